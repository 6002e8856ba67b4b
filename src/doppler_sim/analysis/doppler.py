"""
Closed-form Doppler shift for a source moving along the observer axis.

The engine measures the observed frequency from wavefront spacing; these
helpers give the textbook value to compare against:

    f_obs = f0 * c / (c - v_toward)

where ``v_toward`` is the component of source velocity pointing at the
observer. With the observer at lower x ("decreasing" crossing) a source moving
toward negative x approaches it.

Typical usage:
    >>> round(expected_observed_frequency(1.0, velocity=50.0, c=343.0), 4)
    0.8728
    >>> round(expected_observed_frequency(1.0, velocity=-50.0, c=343.0), 4)
    1.1706
"""

from typing import Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray


def expected_observed_frequency(
    f0: ArrayLike,
    velocity: ArrayLike,
    c: float = 343.0,
    crossing: Literal["decreasing", "increasing"] = "decreasing",
) -> float | NDArray[np.floating]:
    """Doppler-shifted frequency heard by a stationary observer.

    Args:
        f0: Emitted frequency in Hz
        velocity: Signed source velocity along x in m/s
        c: Wave propagation speed in m/s
        crossing: "decreasing" if the observer sits at lower x than the source

    Returns:
        Observed frequency in Hz. Sources approaching at or above the wave
        speed have no steady observed frequency and yield inf.
    """
    f0 = np.asarray(f0, dtype=np.float64)
    velocity = np.asarray(velocity, dtype=np.float64)

    toward = -velocity if crossing == "decreasing" else velocity
    denom = c - toward

    with np.errstate(divide="ignore", invalid="ignore"):
        result = np.where(denom > 0, f0 * c / np.where(denom > 0, denom, 1.0), np.inf)

    if result.ndim == 0:
        return float(result)
    return result


def relative_error(measured: float, expected: float) -> float:
    """Relative error of a detected frequency against the closed-form value.

    Returns nan when the expected frequency is zero or infinite.
    """
    if expected == 0 or not np.isfinite(expected):
        return float("nan")
    return abs(measured - expected) / expected
