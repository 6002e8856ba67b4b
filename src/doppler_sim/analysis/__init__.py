"""Post-processing and reference calculations."""

# Closed-form Doppler shift for comparison with detected frequencies
from doppler_sim.analysis.doppler import (
    expected_observed_frequency,
    relative_error,
)

__all__ = [
    "expected_observed_frequency",
    "relative_error",
]
