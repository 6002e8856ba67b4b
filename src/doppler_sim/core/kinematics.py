"""
Source and observer kinematics.

The source moves along x only. Each tick its position advances by
``velocity * dt`` and its velocity is reflected whenever the new position
falls outside the band between the observer margin and the far edge of the
simulation space. Position is never clamped, so the source may overshoot the
band by up to one tick of travel before heading back.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SourceState:
    """Kinematic and emission state of the moving source.

    Attributes:
        x, y: Position in meters
        velocity: Signed speed along x in m/s
        frequency: Emitted frequency in Hz (0 when silent)
        period: Emission period in seconds (0 when silent)
    """

    x: float
    y: float
    velocity: float = 0.0
    frequency: float = 0.0
    period: float = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def silent(self) -> bool:
        return self.period == 0


@dataclass(frozen=True)
class ObserverState:
    """Stationary observer position in meters."""

    x: float
    y: float

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


def advance_source(
    state: SourceState,
    dt: float,
    boundary: float,
    observer_margin: float,
    space_margin: float,
) -> SourceState:
    """Advance the source by one tick.

    Args:
        state: Current source state
        dt: Tick interval in seconds
        boundary: Side length of the simulation space in meters
        observer_margin: Fraction of the boundary below which the source reflects
        space_margin: Fraction of the boundary kept free at the far edge

    Returns:
        New source state with updated position and possibly reflected velocity
    """
    x = state.x + state.velocity * dt
    velocity = state.velocity

    if x < boundary * observer_margin or x > boundary * (1 - space_margin):
        velocity = -velocity

    return replace(state, x=x, velocity=velocity)
