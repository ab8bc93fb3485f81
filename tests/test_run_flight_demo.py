"""
Tests for the headless flight demo script.

Runs ``main()`` in-process with short durations and checks exit codes and
the JSON summary.
"""

import importlib.util
import json
from pathlib import Path

import pytest


SCRIPT = Path(__file__).parent.parent / "scripts" / "run_flight_demo.py"


@pytest.fixture(scope="module")
def demo():
    """Load the script as a module without running it."""
    spec = importlib.util.spec_from_file_location("run_flight_demo", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run_json(demo, capsys, *args):
    code = demo.main(["--json", "--fps", "30", *args])
    captured = capsys.readouterr()
    return code, captured


class TestRunFlightDemo:
    """Tests for the demo CLI."""

    def test_short_run_reports_ships(self, demo, capsys):
        code, captured = run_json(demo, capsys, "--duration", "1")
        assert code == 0
        summary = json.loads(captured.out)
        assert summary["system"] == "demo"
        assert summary["frames"] == 30
        assert summary["duration"] == pytest.approx(1.0)
        assert len(summary["ships"]) == 1
        assert summary["ships"][0]["destination"] == "moon:luna"
        assert summary["ships"][0]["state"] == "launching"

    def test_paused_clock_terminates(self, demo, capsys):
        code, captured = run_json(demo, capsys, "--duration", "1", "--time-scale", "0")
        assert code == 0
        summary = json.loads(captured.out)
        assert summary["frames"] == 30
        assert summary["duration"] == 0.0
        assert summary["ships"][0]["trail_length"] == 1

    def test_time_scale_multiplies_simulated_time(self, demo, capsys):
        code, captured = run_json(demo, capsys, "--duration", "1", "--time-scale", "4")
        assert code == 0
        summary = json.loads(captured.out)
        assert summary["duration"] == pytest.approx(4.0)
        assert summary["ships"][0]["state"] != "launching"

    def test_retarget(self, demo, capsys):
        code, captured = run_json(
            demo, capsys, "--duration", "2", "--retarget-at", "1", "--retarget-to", "planet:outer"
        )
        assert code == 0
        summary = json.loads(captured.out)
        assert summary["ships"][0]["destination"] == "planet:outer"
        assert any("SHIP_RETARGETED" in e for e in summary["events"])

    @pytest.mark.parametrize("args", [
        ["--time-scale", "-1"],
        ["--fps", "0"],
        ["--launch", "planet:home", "home"],
        ["--config", "does-not-exist.json"],
    ])
    def test_bad_setup_returns_error(self, demo, capsys, args):
        code = demo.main(["--duration", "1", *args])
        captured = capsys.readouterr()
        assert code == 1
        assert captured.err.startswith("Error:")

    def test_unresolvable_launch(self, demo, capsys):
        code = demo.main(["--duration", "1", "--launch", "planet:home", "moon:nowhere"])
        captured = capsys.readouterr()
        assert code == 1
        assert "no ship could be launched" in captured.err
