"""Tests for the doppler-sim command-line tool."""

import json

import h5py
import pytest
from click.testing import CliRunner

from doppler_sim.cli.run import main, parse_change


@pytest.fixture
def runner():
    return CliRunner()


class TestParseChange:
    """Tests for parse_change()."""

    def test_speed(self):
        scheduled = parse_change("2.5:speed=120")
        assert scheduled.time == 2.5
        assert scheduled.change.parameter == "speed"
        assert scheduled.change.value == 120.0

    def test_case_and_whitespace(self):
        scheduled = parse_change("4: Frequency =2")
        assert scheduled.change.parameter == "frequency"
        assert scheduled.change.value == 2.0

    @pytest.mark.parametrize("text", ["speed=120", "1:speed", "1:volume=3", "x:speed=1"])
    def test_malformed(self, text):
        with pytest.raises(ValueError, match="Invalid change"):
            parse_change(text)

    def test_negative_time(self):
        with pytest.raises(ValueError, match="non-negative"):
            parse_change("-1:speed=5")


class TestMain:
    """Tests for the click entry point."""

    def test_dry_run(self, runner):
        """Test --dry-run validates and prints run info only."""
        result = runner.invoke(main, ["--speed", "50", "--frequency", "1", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry run - simulation not executed" in result.output
        assert "Ring capacity" in result.output
        assert "Simulation complete" not in result.output

    def test_run_summary(self, runner):
        """Test a 5 s run reports the measured Doppler shift."""
        result = runner.invoke(main, ["-s", "50", "-f", "1", "-d", "5"])

        assert result.exit_code == 0, result.output
        assert "Simulation complete!" in result.output
        assert "Detections: 1" in result.output
        assert "Observed frequency: 0.87 Hz" in result.output
        assert "Closed-form frequency at current velocity: 0.87 Hz" in result.output

    def test_trace_output(self, runner, tmp_path):
        """Test -o writes an HDF5 trace with the requested snapshots."""
        output = tmp_path / "run.h5"
        result = runner.invoke(
            main, ["-f", "1", "-d", "1", "-o", str(output), "--snapshot-interval", "5"]
        )

        assert result.exit_code == 0, result.output
        assert output.exists()
        with h5py.File(output, "r") as f:
            assert f["metadata"].attrs["num_ticks"] == 20
            assert f["metadata"].attrs["num_snapshots"] == 4

    def test_scheduled_changes(self, runner):
        result = runner.invoke(
            main, ["-d", "2", "--set", "0.5:speed=100", "--set", "1:frequency=2"]
        )
        assert result.exit_code == 0, result.output
        assert "Scheduled changes" in result.output

    def test_live_display(self, runner):
        result = runner.invoke(main, ["-s", "50", "-f", "1", "-d", "1", "--live"])
        assert result.exit_code == 0, result.output

    def test_bad_change(self, runner):
        """Test malformed --set values are usage errors."""
        result = runner.invoke(main, ["--set", "soon:speed=5"])
        assert result.exit_code == 2
        assert "Invalid change" in result.output

    def test_config_file(self, runner, tmp_path):
        config = tmp_path / "engine.json"
        config.write_text(json.dumps({"c": 340.0}))

        result = runner.invoke(main, ["--config", str(config), "--dry-run", "-v"])
        assert result.exit_code == 0, result.output
        assert "340 m/s" in result.output

    def test_bad_config(self, runner, tmp_path):
        config = tmp_path / "engine.json"
        config.write_text(json.dumps({"speed": 50}))

        result = runner.invoke(main, ["--config", str(config)])
        assert result.exit_code == 1
        assert "Config Error" in result.output

    def test_negative_frequency(self, runner):
        result = runner.invoke(main, ["--frequency=-1", "--dry-run"])
        assert result.exit_code == 1
        assert "non-negative" in result.output

    def test_zero_duration(self, runner):
        result = runner.invoke(main, ["--duration", "0"])
        assert result.exit_code == 1
        assert "duration must be positive" in result.output

    def test_quantization_warning(self, runner):
        """Test the too-high-frequency warning reaches the console."""
        result = runner.invoke(main, ["-f", "100", "--dry-run"])
        assert result.exit_code == 0
        assert "Warning:" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
