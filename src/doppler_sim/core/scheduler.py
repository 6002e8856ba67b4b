"""Periodic wavefront emission under a tick-quantized clock."""

from __future__ import annotations


class EmissionScheduler:
    """Decides once per tick whether the source emits a new wavefront.

    The tick interval rarely divides the period exactly, so the scheduler
    accumulates elapsed time within the current period and fires when it
    lands within ``dt / 10`` of the period. The accumulator is folded back
    into one period and rounded to two decimals every tick so float error
    cannot build up across periods.

    Example:
        >>> scheduler = EmissionScheduler()
        >>> [scheduler.tick(period=0.2, dt=0.05) for _ in range(8)]
        [False, False, False, True, False, False, False, True]
    """

    def __init__(self):
        self.elapsed = 0.0

    def reset(self) -> None:
        self.elapsed = 0.0

    def tick(self, period: float, dt: float) -> bool:
        """Advance the period clock by one tick.

        Args:
            period: Emission period in seconds (0 means the source is silent)
            dt: Tick interval in seconds

        Returns:
            True if a wavefront should be emitted this tick
        """
        if period == 0:
            self.elapsed = 0.0
            return False

        self.elapsed = round(self.elapsed % period, 2) + dt
        return abs(self.elapsed - period) < dt / 10
