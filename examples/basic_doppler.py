"""
Example: Receding Source
========================
A 1 Hz source moving away from the observer at 50 m/s. The observer
measures the frequency from the spacing of the wavefronts sweeping past it
and should hear roughly 0.87 Hz, the textbook Doppler shift
f0 * c / (c + v).

Expected runtime: well under a second
Output: doppler.h5 (per-tick series and ring geometry every 20 ticks)

Space: 2000 m × 2000 m
Source: starts at x=1000 m, 50 m/s toward +x, 1 Hz
Observer: x=200 m
"""

import os

from doppler_sim import SimulationEngine, expected_observed_frequency

# Default constants: dt = 0.05 s, c = 343 m/s, 28 wavefront slots
engine = SimulationEngine(speed=50.0, frequency=1.0)

print("=" * 60)
print("Doppler Simulation: Receding Source")
print("=" * 60)
print(f"Timestep: {engine.config.dt:.3f} s")
print(f"Wave speed: {engine.config.c:.0f} m/s")
print(f"Source speed: {engine.source.velocity:.2f} m/s (Mach {engine.mach_number:.2f})")
print(f"Source frequency: {engine.source.frequency:.2f} Hz")
print(f"Observer: x = {engine.observer.x:.0f} m")
print("=" * 60)
print()

# 10 simulated seconds, as fast as the machine allows
print("Running simulation...")
stats = engine.run(duration=10.0, output_file="doppler.h5", snapshot_interval=20)

snapshot = engine.snapshot()
expected = expected_observed_frequency(
    snapshot.source_frequency, snapshot.source_velocity, engine.config.c
)

print()
print("=" * 60)
print("✓ Simulation complete!")
print("=" * 60)
print(f"Ticks: {stats.ticks} ({stats.overloaded_ticks} overloaded)")
print(f"Detections: {stats.detections}")
print(f"Observed frequency: {snapshot.observed_frequency:.2f} Hz")
print(f"Closed-form frequency: {expected:.2f} Hz")
print(f"Output saved to: doppler.h5 ({os.path.getsize('doppler.h5') / 1e3:.1f} kB)")
print()
print("Analyze in Python:")
print("  >>> from doppler_sim.io import TraceReader")
print("  >>> reader = TraceReader('doppler.h5')")
print("  >>> observed = reader.load_series('observed_frequency')")
print("  >>> time = reader.load_series('time')")
