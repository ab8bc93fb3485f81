"""
Tests for the simulated clock.
"""

import pytest

from shipflight.clock import FrameTimer, SimulationClock


class TestSimulationClock:
    """Tests for scaled, pausable simulated time."""

    def test_starts_at_zero(self):
        assert SimulationClock().now() == 0.0

    def test_advance_scales_real_time(self):
        clock = SimulationClock(time_scale=4.0)
        assert clock.advance(0.5) == pytest.approx(2.0)
        assert clock.now() == pytest.approx(2.0)

    def test_paused_clock_holds(self):
        clock = SimulationClock()
        clock.advance(1.0)
        clock.pause()
        clock.advance(5.0)
        assert clock.now() == pytest.approx(1.0)
        assert clock.is_paused

        clock.resume()
        clock.advance(1.0)
        assert clock.now() == pytest.approx(2.0)

    def test_zero_scale_counts_as_paused(self):
        clock = SimulationClock(time_scale=0.0)
        clock.advance(3.0)
        assert clock.now() == 0.0
        assert clock.is_paused

    def test_negative_real_time_ignored(self):
        clock = SimulationClock(sim_time=5.0)
        clock.advance(-1.0)
        assert clock.now() == 5.0

    def test_negative_scale_rejected(self):
        with pytest.raises(ValueError):
            SimulationClock(time_scale=-1.0)
        with pytest.raises(ValueError):
            SimulationClock().set_time_scale(-0.5)

    def test_set_time_scale(self):
        clock = SimulationClock()
        clock.set_time_scale(2.0)
        clock.advance(1.0)
        assert clock.now() == pytest.approx(2.0)


class TestFrameTimer:
    """Tests for the wall-clock frame timer."""

    def test_tick_is_non_negative(self):
        timer = FrameTimer()
        assert timer.tick() >= 0.0
        assert timer.tick() >= 0.0
