"""
Tests for engine configuration.

Tests verify:
- Defaults and derived positions
- Validation of out-of-range constants
- Dict and JSON loading
"""

import dataclasses
import json

import pytest

from doppler_sim import EngineConfig, load_config


class TestDefaults:
    """Tests for default constants."""

    def test_defaults(self, config):
        assert config.dt == 0.05
        assert config.c == 343.0
        assert config.capacity == 28
        assert config.boundary == 2000.0
        assert config.crossing == "decreasing"

    def test_derived_positions(self, config):
        """Test observer and source positions follow the boundary."""
        assert config.observer_position == (200.0, 1000.0)
        assert config.source_position == (1000.0, 1000.0)
        assert config.reflect_low == pytest.approx(400.0)
        assert config.reflect_high == pytest.approx(1800.0)
        assert config.wave_step == pytest.approx(17.15)

    def test_positions_scale_with_boundary(self):
        config = EngineConfig(boundary=1000.0)
        assert config.observer_position == (100.0, 500.0)
        assert config.source_position == (500.0, 500.0)

    def test_frozen(self, config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.dt = 0.1


class TestValidation:
    """Tests for rejected constants."""

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"dt": 0.0}, "dt"),
            ({"dt": float("nan")}, "dt"),
            ({"c": -1.0}, "c must be"),
            ({"capacity": 1}, "capacity"),
            ({"boundary": 0.0}, "boundary"),
            ({"observer_margin": 1.5}, "observer_margin"),
            ({"observer_margin": 0.6, "space_margin": 0.5}, "no room"),
            ({"stale_ticks": -1}, "stale_ticks"),
            ({"crossing": "sideways"}, "crossing"),
            ({"observer_position": (1.0, 2.0, 3.0)}, "2 coordinates"),
        ],
    )
    def test_invalid(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            EngineConfig(**kwargs)


class TestSerialization:
    """Tests for dict and JSON conversion."""

    def test_dict_round_trip(self):
        config = EngineConfig(c=340.0, observer_position=(150.0, 900.0))
        data = config.to_dict()

        assert data["observer_position"] == [150.0, 900.0]
        assert EngineConfig.from_dict(data) == config

    def test_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown config keys: speed"):
            EngineConfig.from_dict({"speed": 50.0})

    def test_replace(self, config):
        changed = config.replace(capacity=40)
        assert changed.capacity == 40
        assert changed.c == config.c
        assert config.capacity == 28

    def test_load_config(self, tmp_path):
        """Test missing keys keep their defaults."""
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"c": 340.0, "crossing": "increasing"}))

        config = load_config(path)
        assert config.c == 340.0
        assert config.crossing == "increasing"
        assert config.dt == 0.05

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(path)

    def test_load_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError, match="JSON object"):
            load_config(path)
