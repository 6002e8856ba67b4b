"""
Tick pacing and keep-up monitoring.

A pacer brackets the work done in one tick: :meth:`Pacer.start` marks the
beginning, :meth:`Pacer.finish` measures how long the work took, reports
whether the tick overran its nominal budget and waits out whatever is left
of it. Overload is purely advisory; no tick is ever skipped.

Classes:
    TickTiming: Timing report for one tick
    KeepUpMonitor: Latest overload flag and overload count
    Pacer: Base class
    RealTimePacer: Wall-clock pacer (optionally free-running without sleep)
    SyntheticPacer: Deterministic pacer fed with fake tick durations

Example:
    >>> pacer = SyntheticPacer(dt=0.05, durations=[0.01, 0.08, 0.02])
    >>> for _ in range(3):
    ...     pacer.start()
    ...     print(pacer.finish().overloaded)
    False
    True
    False
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class TickTiming:
    """Timing report for one tick.

    Attributes:
        elapsed: Seconds spent on the tick's work
        sleep: Seconds waited afterwards to fill the nominal interval
        overloaded: True if the work alone exceeded the nominal interval
    """

    elapsed: float
    sleep: float
    overloaded: bool


class KeepUpMonitor:
    """Tracks whether ticks complete within their nominal interval."""

    def __init__(self, dt: float):
        self.dt = dt
        self.overloaded = False
        self.overload_count = 0
        self.ticks = 0

    def check(self, elapsed: float) -> bool:
        """Record one tick's work duration and return its overload flag."""
        self.overloaded = self.dt - elapsed < 0
        if self.overloaded:
            self.overload_count += 1
        self.ticks += 1
        return self.overloaded

    def reset(self) -> None:
        self.overloaded = False
        self.overload_count = 0
        self.ticks = 0


class Pacer(ABC):
    """Fixed-interval tick source.

    Args:
        dt: Nominal tick interval in seconds
    """

    def __init__(self, dt: float):
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        self.dt = dt
        self.monitor = KeepUpMonitor(dt)

    @abstractmethod
    def start(self) -> None:
        """Mark the beginning of a tick's work."""

    @abstractmethod
    def _measure(self) -> float:
        """Seconds of work since :meth:`start`."""

    @abstractmethod
    def _wait(self, seconds: float) -> None:
        """Block for the remainder of the tick."""

    def finish(self) -> TickTiming:
        """Measure the tick, update the monitor and wait out the budget."""
        elapsed = self._measure()
        overloaded = self.monitor.check(elapsed)
        remaining = max(0.0, self.dt - elapsed)
        if remaining > 0:
            self._wait(remaining)
        return TickTiming(elapsed=elapsed, sleep=remaining, overloaded=overloaded)


class RealTimePacer(Pacer):
    """Wall-clock pacer.

    Args:
        dt: Nominal tick interval in seconds
        realtime: If False, never sleep; ticks run back to back while the
            keep-up monitor still judges each one against ``dt``
        clock: Monotonic clock returning seconds
        sleep: Blocking sleep function
    """

    def __init__(
        self,
        dt: float,
        realtime: bool = True,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(dt)
        self.realtime = realtime
        self._clock = clock
        self._sleep = sleep
        self._tick_start: float | None = None

    def start(self) -> None:
        self._tick_start = self._clock()

    def _measure(self) -> float:
        if self._tick_start is None:
            raise RuntimeError("finish() called before start()")
        elapsed = self._clock() - self._tick_start
        self._tick_start = None
        return elapsed

    def _wait(self, seconds: float) -> None:
        if self.realtime:
            self._sleep(seconds)


class SyntheticPacer(Pacer):
    """Pacer driven by a scripted sequence of tick durations.

    Each :meth:`finish` consumes the next duration; once the sequence is
    exhausted every further tick takes ``default`` seconds. Nothing ever
    sleeps, the would-be sleep time is only accumulated in ``total_sleep``.

    Args:
        dt: Nominal tick interval in seconds
        durations: Work duration for each successive tick
        default: Duration used after ``durations`` runs out
    """

    def __init__(self, dt: float, durations: Iterable[float] = (), default: float = 0.0):
        super().__init__(dt)
        self._durations = iter(durations)
        self.default = default
        self.total_sleep = 0.0

    def start(self) -> None:
        pass

    def _measure(self) -> float:
        return next(self._durations, self.default)

    def _wait(self, seconds: float) -> None:
        self.total_sleep += seconds
