"""
Example: Speed Sweep
====================
Measures the observed frequency of a 1 Hz source over a range of source
speeds and compares each measurement with the closed-form Doppler shift.

Each run stops at the first detection. Both wavefronts of the first pair
are emitted before the source can reach a reflection point, so the
measurement is compared against the starting velocity even if the source
has turned around by the time the pair reaches the observer.

Negative speeds approach the observer (higher pitch), positive speeds
recede from it (lower pitch).
"""

import numpy as np

from doppler_sim import SimulationEngine, expected_observed_frequency, relative_error

SPEEDS = np.arange(-300.0, 301.0, 50.0)
MAX_TICKS = 400

print("=" * 60)
print("Doppler Speed Sweep (f0 = 1 Hz, c = 343 m/s)")
print("=" * 60)
print(f"{'speed (m/s)':>12} {'measured (Hz)':>14} {'expected (Hz)':>14} {'error':>8}")

for speed in SPEEDS:
    engine = SimulationEngine(speed=float(speed), frequency=1.0)
    for _ in range(MAX_TICKS):
        engine.step()
        if engine.detections:
            break

    measured = engine.observed_frequency
    expected = expected_observed_frequency(1.0, speed, engine.config.c)
    error = relative_error(measured, expected)
    print(f"{speed:12.0f} {measured:14.2f} {expected:14.4f} {error:8.2%}")

print("=" * 60)
