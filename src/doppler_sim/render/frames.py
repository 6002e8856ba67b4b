"""
Render-ready frames built from engine snapshots.

The engine never touches a drawing API. Renderers call
:meth:`FrameBuilder.build` once per tick and draw what it returns:

- wavefront circles as (x, y) sample arrays, one row per ring slot
- source and observer markers
- scrolling sine traces of the source and observed frequencies
- a text readout for the status display
- the status lamp color (blinking green when keeping up, red when not)

Example:
    >>> from doppler_sim import SimulationEngine
    >>> engine = SimulationEngine(frequency=1.0)
    >>> builder = FrameBuilder(c=engine.config.c)
    >>> engine.step()
    >>> frame = builder.build(engine.snapshot())
    >>> frame.circles_x.shape
    (28, 629)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from doppler_sim.core.engine import EngineSnapshot
from doppler_sim.core.wavefronts import WavefrontSnapshot

# Circle sampling step in radians
THETA_STEP = 0.01

LAMP_OFF = "gray"
LAMP_OK = "green"
LAMP_OVERLOAD = "red"


def circle_angles(step: float = THETA_STEP) -> NDArray[np.float64]:
    """Angles from 0 up to (but not past) 2π in ``step`` increments."""
    return np.arange(0.0, 2 * np.pi, step)


def wavefront_circles(
    wavefronts: WavefrontSnapshot,
    theta: NDArray[np.float64] | None = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Sample every wavefront circle.

    Args:
        wavefronts: Ring geometry from an engine snapshot
        theta: Sample angles (defaults to :func:`circle_angles`)

    Returns:
        (x, y) arrays of shape (num_slots, len(theta))
    """
    if theta is None:
        theta = circle_angles()

    radius = wavefronts.radius[:, np.newaxis]
    x = radius * np.cos(theta) + wavefronts.center_x[:, np.newaxis]
    y = radius * np.sin(theta) + wavefronts.center_y[:, np.newaxis]
    return x, y


class WaveformTrace:
    """Scrolling sine trace over a fixed time window.

    The visible span grows by 1/20 of the window per tick and wraps back to
    the start once it has covered the whole window.

    Args:
        window: Time window in seconds
        sample_interval: Spacing of time samples in seconds
        sweeps: Ticks needed for the span to cover the window

    Example:
        >>> trace = WaveformTrace()
        >>> [trace.advance() for _ in range(3)]
        [11, 21, 31]
    """

    def __init__(self, window: float = 1.0, sample_interval: float = 0.005, sweeps: int = 20):
        num_samples = int(round(window / sample_interval)) + 1
        if num_samples - 1 < sweeps:
            raise ValueError(
                f"Window of {num_samples} samples is too short for {sweeps} sweeps"
            )
        self.t = np.linspace(0.0, window, num_samples)
        self._increment = (num_samples - 1) // sweeps
        self.span = 1

    def advance(self) -> int:
        """Move the span forward by one tick and return it."""
        self.span = self.span % (len(self.t) - 1) + self._increment
        return self.span

    def trace(self, frequency: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Sine wave of the given frequency over the visible span."""
        t = self.t[: self.span]
        return t, np.sin(2 * np.pi * frequency * t)


def format_readout(snapshot: EngineSnapshot, c: float) -> str:
    """Multi-line status text for the simulation display."""
    return (
        f"Src Speed: {abs(snapshot.source_velocity):.2f} m/s\n"
        f"Src Wave Speed: {c:.0f} m/s\n"
        f"Src Mach Number: {snapshot.mach_number:.2f}\n"
        f"Src Distance: {snapshot.source_distance:.2f}\n"
        f"Src Frequency: {snapshot.source_frequency:.2f} Hz\n"
        f"Obs Frequency: {snapshot.observed_frequency:.2f} Hz"
    )


def lamp_color(lit: bool, overloaded: bool) -> str:
    """Status lamp color for one blink phase."""
    if not lit:
        return LAMP_OFF
    return LAMP_OVERLOAD if overloaded else LAMP_OK


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to draw one tick."""

    tick: int
    circles_x: NDArray[np.float64]
    circles_y: NDArray[np.float64]
    source_position: tuple[float, float]
    observer_position: tuple[float, float]
    source_trace: tuple[NDArray[np.float64], NDArray[np.float64]]
    observed_trace: tuple[NDArray[np.float64], NDArray[np.float64]]
    readout: str
    lamp: str


class FrameBuilder:
    """Turns engine snapshots into frames, one per tick.

    The builder keeps the only render-side state: the waveform span and the
    lamp blink phase.

    Args:
        c: Wave propagation speed shown in the readout
        theta_step: Circle sampling step in radians
    """

    def __init__(self, c: float = 343.0, theta_step: float = THETA_STEP):
        self.c = c
        self.theta = circle_angles(theta_step)
        self.waveform = WaveformTrace()
        self.lamp_lit = False

    def build(self, snapshot: EngineSnapshot) -> Frame:
        circles_x, circles_y = wavefront_circles(snapshot.wavefronts, self.theta)

        self.waveform.advance()
        self.lamp_lit = not self.lamp_lit

        return Frame(
            tick=snapshot.tick,
            circles_x=circles_x,
            circles_y=circles_y,
            source_position=snapshot.source_position,
            observer_position=snapshot.observer_position,
            source_trace=self.waveform.trace(snapshot.source_frequency),
            observed_trace=self.waveform.trace(snapshot.observed_frequency),
            readout=format_readout(snapshot, self.c),
            lamp=lamp_color(self.lamp_lit, snapshot.overloaded),
        )
