"""
Tests for flight and simulation configuration.
"""

import json

import pytest

from shipflight.config import DEFAULT_LAUNCH_CONFIG, LaunchConfig, SimulationConfig


class TestLaunchConfig:
    """Tests for per-flight tuning."""

    def test_defaults(self):
        config = LaunchConfig()
        assert config.takeoff_duration == 2.0
        assert config.travel_speed == 4.0
        assert config.orbit_duration == 1.0
        assert config.landing_duration == 2.0
        assert config.takeoff_height == 0.3
        assert config.orbit_radius == 0.3
        assert config.orbit_speed == 0.5
        assert config.max_trail_length == 30

    def test_default_instance_matches(self):
        assert DEFAULT_LAUNCH_CONFIG == LaunchConfig()

    @pytest.mark.parametrize("field_name", [
        "takeoff_duration", "orbit_duration", "landing_duration",
        "takeoff_height", "orbit_radius",
    ])
    def test_negative_values_clamped_to_zero(self, field_name):
        config = LaunchConfig(**{field_name: -1.0})
        assert getattr(config, field_name) == 0.0

    @pytest.mark.parametrize("speed", [0.0, -4.0])
    def test_travel_speed_must_be_positive(self, speed):
        with pytest.raises(ValueError):
            LaunchConfig(travel_speed=speed)

    def test_trail_length_must_be_positive(self):
        with pytest.raises(ValueError):
            LaunchConfig(max_trail_length=0)

    def test_from_dict_ignores_unknown_keys(self):
        config = LaunchConfig.from_dict({"travel_speed": 8.0, "warp_factor": 9})
        assert config.travel_speed == 8.0
        assert config.takeoff_duration == 2.0


class TestSimulationConfig:
    """Tests for stepper configuration."""

    def test_default_tick_rate(self):
        config = SimulationConfig()
        assert config.min_tick_interval == pytest.approx(1.0 / 30.0)
        assert config.max_tick_rate_hz == pytest.approx(30.0)

    def test_unthrottled_rate(self):
        assert SimulationConfig(min_tick_interval=0.0).max_tick_rate_hz == float("inf")

    def test_from_dict_nested(self):
        config = SimulationConfig.from_dict({
            "launch": {"travel_speed": 2.0, "max_trail_length": 10},
            "max_tick_rate_hz": 60,
            "event_history_limit": 50,
        })
        assert config.launch.travel_speed == 2.0
        assert config.launch.max_trail_length == 10
        assert config.min_tick_interval == pytest.approx(1.0 / 60.0)
        assert config.event_history_limit == 50

    def test_from_dict_flat(self):
        config = SimulationConfig.from_dict({"orbit_duration": 3.0})
        assert config.launch.orbit_duration == 3.0
        assert config.min_tick_interval == pytest.approx(1.0 / 30.0)

    def test_from_dict_rejects_bad_rate(self):
        with pytest.raises(ValueError):
            SimulationConfig.from_dict({"max_tick_rate_hz": 0})

    def test_from_json(self, tmp_path):
        path = tmp_path / "flight.json"
        path.write_text(json.dumps({"launch": {"landing_duration": 4.0}}))
        config = SimulationConfig.from_json(path)
        assert config.launch.landing_duration == 4.0

    def test_from_json_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_json(tmp_path / "missing.json")
