"""
Observed-frequency detection from wavefront arrivals.

The detector never evaluates the Doppler formula. Instead it waits until two
wavefronts in adjacent ring slots have both swept past the observer, measures
the spatial gap between their leading edges (the wavelength as seen at the
observer) and converts it back to a frequency with ``c / wavelength``.

The ring is scanned in storage order, not emission order. When the write
cursor wraps, the newest and oldest wavefronts sit in adjacent slots and the
scan can pair them; that timing quirk is kept as is.
"""

from __future__ import annotations

from dataclasses import dataclass

from doppler_sim.core.wavefronts import WavefrontRing


@dataclass
class DetectionState:
    """Mutable detector state.

    Attributes:
        period_estimate_clock: Seconds since the last observed-frequency sample
        observed_frequency: Most recent sample in Hz (0 when none or stale)
    """

    period_estimate_clock: float = 0.0
    observed_frequency: float = 0.0


class FrequencyDetector:
    """Infers the frequency heard by a stationary observer.

    Args:
        c: Wave propagation speed in m/s
        dt: Tick interval in seconds
        stale_ticks: Ticks tolerated past one observed period before the
            observed frequency is dropped to zero

    Example:
        >>> ring = WavefrontRing(capacity=4)
        >>> ring.place(0, radius=615.0, center_x=1000.0)
        >>> ring.place(1, radius=605.0, center_x=1000.0)
        >>> detector = FrequencyDetector(c=343.0, dt=0.05)
        >>> detector.scan(ring, observer_x=400.0)
        34.3
    """

    def __init__(self, c: float, dt: float, stale_ticks: int = 10):
        self.c = c
        self.dt = dt
        self.stale_ticks = stale_ticks
        self.state = DetectionState()

    @property
    def observed_frequency(self) -> float:
        return self.state.observed_frequency

    def reset(self) -> None:
        self.state = DetectionState()

    def scan(self, ring: WavefrontRing, observer_x: float) -> float | None:
        """Run one detection pass over the ring.

        Args:
            ring: Wavefront ring to scan (slots are marked observed in place)
            observer_x: Observer x-coordinate in meters

        Returns:
            The new observed-frequency sample, or None if no pair qualified
        """
        self._expire_stale()

        observed = ring.observed
        for i in range(1, ring.capacity):
            if observed[i - 1] or not ring.has_reached(i - 1, observer_x):
                continue
            if observed[i] or not ring.has_reached(i, observer_x):
                continue

            d = ring.leading_edge(i - 1)
            d_next = ring.leading_edge(i)
            wavelength = -ring.edge_sign * (d_next - d)
            if wavelength == 0:
                continue

            sample = round(self.c / wavelength, 2)
            self.state.observed_frequency = sample
            self.state.period_estimate_clock = 0.0
            ring.mark_observed(i - 1)
            return sample

        return None

    def _expire_stale(self) -> None:
        state = self.state
        state.period_estimate_clock += self.dt

        if state.observed_frequency == 0:
            return

        limit = 1 / state.observed_frequency + self.stale_ticks * self.dt
        if state.period_estimate_clock > limit:
            state.observed_frequency = 0.0
            state.period_estimate_clock = 0.0
