"""Parameter quantization to the emission timing grid."""

from __future__ import annotations

import math


def round_to_resolution(value: float) -> float:
    """Snap a value to the nearest multiple of 0.05 on a three-level grid.

    The value is scaled by 10 and its fractional part bucketed: below 0.25
    rounds down, 0.75 and above rounds up, anything in between snaps to the
    midpoint 0.5. Periods produced this way line up with the 0.05 s tick so
    the emission scheduler can hit them within its tolerance window.

    Args:
        value: Any finite real number (period in seconds, speed in m/s)

    Returns:
        The quantized value

    Example:
        >>> round_to_resolution(0.12)
        0.1
        >>> round_to_resolution(0.17)
        0.15
        >>> round_to_resolution(0.28)
        0.3
    """
    scaled = value * 10
    int_part = math.floor(scaled)
    dec_part = scaled - int_part

    if dec_part < 0.25:
        dec_part = 0.0
    elif dec_part >= 0.75:
        dec_part = 0.0
        int_part += 1
    else:
        dec_part = 0.5

    return (int_part + dec_part) / 10


# Smallest nonzero value round_to_resolution can produce
RESOLUTION_STEP = 0.05
