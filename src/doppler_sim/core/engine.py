"""1-D Doppler effect simulation engine.

The engine owns every piece of simulation state: source and observer
kinematics, the wavefront ring, the emission scheduler and the frequency
detector. Each tick runs, in order:

    source kinematics → wavefront growth → emission → frequency detection

and afterwards the pacer judges whether the tick kept up with real time.

Physics:
    Wavefronts expand at the constant speed c from the point where the source
    was when it emitted them. The observed frequency is never computed from
    the Doppler formula; it is measured as c / λ where λ is the gap between
    two consecutive wavefronts after both have passed the observer.

Example:
    >>> from doppler_sim import SimulationEngine
    >>> engine = SimulationEngine(speed=50.0, frequency=1.0)
    >>> engine.run(duration=5.0)
    RunStats(ticks=100, overloaded_ticks=0, detections=1, wall_time=...)
    >>> engine.snapshot().observed_frequency
    0.87

Parameter changes:
    ``set_source_speed`` / ``set_source_frequency`` apply immediately and are
    meant to be called between ticks from the loop's own thread. Other
    threads hand changes over with :meth:`SimulationEngine.submit`; they are
    queued and applied atomically at the start of the next tick.
"""

from __future__ import annotations

import math
import queue
import time
import warnings
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from doppler_sim.config import EngineConfig
from doppler_sim.core.detector import FrequencyDetector
from doppler_sim.core.kinematics import ObserverState, SourceState, advance_source
from doppler_sim.core.pacer import Pacer, RealTimePacer, TickTiming
from doppler_sim.core.quantize import RESOLUTION_STEP, round_to_resolution
from doppler_sim.core.scheduler import EmissionScheduler
from doppler_sim.core.wavefronts import WavefrontRing, WavefrontSnapshot

if TYPE_CHECKING:
    from doppler_sim.io.hdf5 import TraceWriter

PARAMETERS = ("speed", "frequency")


@dataclass(frozen=True)
class ParameterChange:
    """A speed or frequency update coming from an input control.

    Args:
        parameter: "speed" (m/s) or "frequency" (Hz)
        value: Requested value before quantization
    """

    parameter: Literal["speed", "frequency"]
    value: float

    def __post_init__(self):
        if self.parameter not in PARAMETERS:
            raise ValueError(
                f"Unknown parameter {self.parameter!r}. Expected one of {PARAMETERS}"
            )
        if not math.isfinite(self.value):
            raise ValueError(f"{self.parameter} must be finite, got {self.value}")
        if self.parameter == "frequency" and self.value < 0:
            raise ValueError(f"frequency must be non-negative, got {self.value}")


@dataclass(frozen=True)
class ScheduledChange:
    """A parameter change to submit once simulation time reaches ``time``."""

    time: float
    change: ParameterChange


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only view of the simulation after one tick.

    Attributes:
        tick: Number of completed ticks
        time: Simulation time in seconds
        source_position: Source (x, y) in meters
        source_velocity: Signed source velocity along x in m/s
        observer_position: Observer (x, y) in meters
        source_frequency: Emitted frequency in Hz
        observed_frequency: Frequency detected at the observer in Hz
        mach_number: |velocity| / c
        overloaded: True if the last paced tick overran its interval
        wavefronts: Copy of the ring geometry (storage order)
    """

    tick: int
    time: float
    source_position: tuple[float, float]
    source_velocity: float
    observer_position: tuple[float, float]
    source_frequency: float
    observed_frequency: float
    mach_number: float
    overloaded: bool
    wavefronts: WavefrontSnapshot

    @property
    def source_distance(self) -> float:
        """Signed x distance from the observer to the source in meters."""
        return self.source_position[0] - self.observer_position[0]


@dataclass(frozen=True)
class RunStats:
    """Summary of one :meth:`SimulationEngine.run` call."""

    ticks: int
    overloaded_ticks: int
    detections: int
    wall_time: float

    def __repr__(self) -> str:
        # wall_time varies run to run; keep it out of doctest output
        return (
            f"RunStats(ticks={self.ticks}, overloaded_ticks={self.overloaded_ticks}, "
            f"detections={self.detections}, wall_time=...)"
        )


class SimulationEngine:
    """Doppler effect simulation for a source moving along x.

    Args:
        config: Run constants (defaults to EngineConfig())
        speed: Initial source speed in m/s (quantized)
        frequency: Initial source frequency in Hz (0 = silent, quantized)

    Example:
        >>> engine = SimulationEngine()
        >>> engine.set_source_frequency(3.0)
        >>> engine.source.period, engine.source.frequency
        (0.35, 2.86)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        speed: float = 0.0,
        frequency: float = 0.0,
    ):
        self.config = config if config is not None else EngineConfig()
        cfg = self.config

        self.observer = ObserverState(*cfg.observer_position)
        self.source = SourceState(*cfg.source_position)
        self.ring = WavefrontRing(
            capacity=cfg.capacity, boundary=cfg.boundary, crossing=cfg.crossing
        )
        self.scheduler = EmissionScheduler()
        self.detector = FrequencyDetector(c=cfg.c, dt=cfg.dt, stale_ticks=cfg.stale_ticks)

        self._pending: queue.SimpleQueue[ParameterChange] = queue.SimpleQueue()
        self._tick = 0
        self._detections = 0
        self._overloaded = False
        self._mach_number = 0.0
        self.last_timing: TickTiming | None = None

        if speed:
            self.set_source_speed(speed)
        if frequency:
            self.set_source_frequency(frequency)

    @property
    def tick(self) -> int:
        """Number of completed ticks."""
        return self._tick

    @property
    def time(self) -> float:
        """Current simulation time in seconds."""
        return self._tick * self.config.dt

    @property
    def observed_frequency(self) -> float:
        return self.detector.observed_frequency

    @property
    def mach_number(self) -> float:
        return self._mach_number

    @property
    def overloaded(self) -> bool:
        """Overload flag of the most recent paced tick."""
        return self._overloaded

    @property
    def detections(self) -> int:
        """Observed-frequency samples taken since construction or reset."""
        return self._detections

    def set_source_speed(self, value: float) -> None:
        """Set the source velocity to the quantized value (m/s).

        Raises:
            ValueError: If value is not finite
        """
        if not math.isfinite(value):
            raise ValueError(f"Source speed must be finite, got {value}")

        velocity = round_to_resolution(round(value, 2))
        self.source = replace(self.source, velocity=velocity)
        self._mach_number = abs(velocity) / self.config.c

    def set_source_frequency(self, value: float) -> None:
        """Set the emitted frequency (Hz); 0 silences the source.

        The period is quantized to the emission timing grid and the frequency
        recomputed from it, so the stored frequency can differ from the
        requested one (3 Hz becomes 2.86 Hz).

        Raises:
            ValueError: If value is negative or not finite
        """
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Source frequency must be a non-negative number, got {value}")

        value = round(value, 2)
        if value == 0:
            period = 0.0
            frequency = 0.0
        else:
            period = round_to_resolution(1 / value)
            if period == 0:
                warnings.warn(
                    f"Source frequency {value} Hz is above what the {RESOLUTION_STEP} s "
                    f"timing grid can represent; using period {RESOLUTION_STEP} s "
                    f"({1 / RESOLUTION_STEP:.0f} Hz) instead.",
                    UserWarning,
                    stacklevel=2,
                )
                period = RESOLUTION_STEP
            frequency = round(1 / period, 2)

        self.source = replace(self.source, period=period, frequency=frequency)

    def apply(self, change: ParameterChange) -> None:
        """Apply a parameter change immediately."""
        if change.parameter == "speed":
            self.set_source_speed(change.value)
        else:
            self.set_source_frequency(change.value)

    def submit(self, change: ParameterChange) -> None:
        """Queue a parameter change for the next tick boundary (thread-safe)."""
        self._pending.put(change)

    def _apply_pending(self) -> None:
        while True:
            try:
                change = self._pending.get_nowait()
            except queue.Empty:
                return
            self.apply(change)

    def step(self) -> None:
        """Advance the simulation by one tick."""
        self._apply_pending()
        cfg = self.config

        self.source = advance_source(
            self.source, cfg.dt, cfg.boundary, cfg.observer_margin, cfg.space_margin
        )
        self.ring.advance_all(cfg.c, cfg.dt)

        if self.scheduler.tick(self.source.period, cfg.dt):
            self.ring.recycle(self.source.x, self.source.y)

        if self.detector.scan(self.ring, self.observer.x) is not None:
            self._detections += 1

        self._tick += 1

    def record_timing(self, timing: TickTiming) -> None:
        """Attach the pacer's verdict to the tick that just completed."""
        self.last_timing = timing
        self._overloaded = timing.overloaded

    def snapshot(self) -> EngineSnapshot:
        """Capture the current state for renderers and recorders."""
        return EngineSnapshot(
            tick=self._tick,
            time=self.time,
            source_position=self.source.position,
            source_velocity=self.source.velocity,
            observer_position=self.observer.position,
            source_frequency=self.source.frequency,
            observed_frequency=self.detector.observed_frequency,
            mach_number=self._mach_number,
            overloaded=self._overloaded,
            wavefronts=self.ring.snapshot(),
        )

    def run(
        self,
        duration: float | None = None,
        num_ticks: int | None = None,
        pacer: Pacer | None = None,
        callback: Callable[[int], None] | None = None,
        schedule: Iterable[ScheduledChange] = (),
        output_file: str | Path | None = None,
        snapshot_interval: int | None = None,
    ) -> RunStats:
        """Run the simulation loop.

        Args:
            duration: Simulated time in seconds (ignored if num_ticks is given)
            num_ticks: Number of ticks to run
            pacer: Tick source. Defaults to a free-running RealTimePacer that
                measures each tick without sleeping.
            callback: Called with the tick index after each tick's work and
                before the tick is timed, so rendering done here counts toward
                the tick budget
            schedule: Parameter changes to submit once their time is reached
            output_file: Path to an HDF5 trace file (optional)
            snapshot_interval: Save ring geometry to the trace every N ticks

        Returns:
            RunStats for this call
        """
        if num_ticks is None:
            if duration is None:
                raise ValueError("Must provide either 'duration' or 'num_ticks'")
            num_ticks = int(round(duration / self.config.dt))
        if num_ticks < 0:
            raise ValueError(f"num_ticks must be non-negative, got {num_ticks}")

        if pacer is None:
            pacer = RealTimePacer(self.config.dt, realtime=False)
        pending = sorted(schedule, key=lambda item: item.time)
        half_tick = self.config.dt / 2

        writer: TraceWriter | None = None
        if output_file:
            from doppler_sim.io.hdf5 import TraceWriter

            writer = TraceWriter(output_file, self)

        overloaded_ticks = 0
        detections_before = self._detections
        start_time = time.perf_counter()

        try:
            for i in range(num_ticks):
                # Changes due at or before the upcoming tick's start time
                while pending and pending[0].time <= self.time + half_tick:
                    self.submit(pending.pop(0).change)

                pacer.start()
                self.step()
                if callback:
                    callback(i)
                timing = pacer.finish()
                self.record_timing(timing)
                if timing.overloaded:
                    overloaded_ticks += 1

                if writer:
                    save_snapshot = (
                        snapshot_interval is not None and i % snapshot_interval == 0
                    )
                    writer.write_tick(self.snapshot(), timing, save_snapshot)
        finally:
            wall_time = time.perf_counter() - start_time
            if writer:
                writer.finalize(runtime=wall_time)

        return RunStats(
            ticks=num_ticks,
            overloaded_ticks=overloaded_ticks,
            detections=self._detections - detections_before,
            wall_time=wall_time,
        )

    def reset(self) -> None:
        """Return to the initial position with an empty ring.

        Speed and frequency settings are kept.
        """
        x, y = self.config.source_position
        self.source = replace(self.source, x=x, y=y)
        self.ring.reset()
        self.scheduler.reset()
        self.detector.reset()
        while True:
            try:
                self._pending.get_nowait()
            except queue.Empty:
                break
        self._tick = 0
        self._detections = 0
        self._overloaded = False
        self.last_timing = None
