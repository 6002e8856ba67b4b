"""Tests for the closed-form Doppler comparison helpers."""

import math

import numpy as np
import pytest

from doppler_sim import expected_observed_frequency, relative_error


class TestExpectedObservedFrequency:
    """Tests for expected_observed_frequency()."""

    def test_stationary(self):
        assert expected_observed_frequency(2.0, 0.0) == pytest.approx(2.0)

    def test_receding_lowers_frequency(self):
        """Test a source moving away from a low-x observer is heard lower."""
        assert expected_observed_frequency(1.0, 50.0) == pytest.approx(343.0 / 393.0)

    def test_approaching_raises_frequency(self):
        assert expected_observed_frequency(1.0, -50.0) == pytest.approx(343.0 / 293.0)

    def test_increasing_crossing_flips_direction(self):
        """Test the approach direction follows the crossing direction."""
        assert expected_observed_frequency(
            1.0, 50.0, crossing="increasing"
        ) == pytest.approx(343.0 / 293.0)

    def test_supersonic_approach(self):
        """Test sources approaching at or above c give inf."""
        assert math.isinf(expected_observed_frequency(1.0, -343.0))
        assert math.isinf(expected_observed_frequency(1.0, -400.0))

    def test_array_input(self):
        velocity = np.array([-50.0, 0.0, 50.0])
        result = expected_observed_frequency(1.0, velocity)

        assert isinstance(result, np.ndarray)
        assert result.shape == (3,)
        assert result[0] > result[1] > result[2]

    def test_scalar_returns_float(self):
        assert isinstance(expected_observed_frequency(1.0, 10.0), float)


class TestRelativeError:
    """Tests for relative_error()."""

    def test_value(self):
        assert relative_error(0.87, 0.8728) == pytest.approx(0.0028 / 0.8728)

    @pytest.mark.parametrize("expected", [0.0, float("inf")])
    def test_undefined(self, expected):
        assert math.isnan(relative_error(1.0, expected))
