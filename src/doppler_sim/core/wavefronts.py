"""
Fixed-capacity ring buffer of emitted wavefronts.

Each slot holds one circular wavefront: the radius it has travelled since
emission, the source position at the moment of emission, and whether the
frequency detector has already consumed it. Storage is column-oriented so a
tick can grow every radius with a single vectorized add.

Classes:
    Wavefront: Read-only record for one slot
    WavefrontSnapshot: Copy of the ring geometry for renderers
    WavefrontRing: The ring buffer itself

Example:
    >>> ring = WavefrontRing(capacity=4, boundary=2000.0)
    >>> ring.recycle(1000.0, 1000.0)
    1
    >>> ring.advance_all(c=343.0, dt=0.05)
    >>> round(ring[0].radius, 2)
    17.15
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Wavefront:
    """One emitted circular wave."""

    radius: float
    center_x: float
    center_y: float
    observed: bool


@dataclass(frozen=True)
class WavefrontSnapshot:
    """Geometry of every ring slot at one instant (storage order)."""

    radius: NDArray[np.float64]
    center_x: NDArray[np.float64]
    center_y: NDArray[np.float64]

    def __len__(self) -> int:
        return len(self.radius)


class WavefrontRing:
    """Circular buffer of wavefronts with a 1-indexed write cursor.

    The cursor is 0 until the first emission. Every call to :meth:`recycle`
    advances it by exactly one position, wrapping from ``capacity`` back to 1,
    and resets the slot it lands on. Before the first emission every slot is
    parked at twice the simulation boundary and flagged as observed, so none
    of them can trigger the frequency detector.

    Args:
        capacity: Number of slots
        boundary: Side length of the simulation space in meters
        crossing: "decreasing" if wavefront edges reach the observer while
            moving toward lower x, "increasing" otherwise
    """

    def __init__(
        self,
        capacity: int = 28,
        boundary: float = 2000.0,
        crossing: str = "decreasing",
    ):
        if capacity < 2:
            raise ValueError(f"capacity must be at least 2, got {capacity}")
        if crossing not in ("decreasing", "increasing"):
            raise ValueError(f"Unknown crossing direction: {crossing!r}")

        self.capacity = capacity
        self.boundary = boundary
        self.crossing = crossing
        self._edge_sign = -1.0 if crossing == "decreasing" else 1.0

        self.radius = np.empty(capacity, dtype=np.float64)
        self.center_x = np.empty(capacity, dtype=np.float64)
        self.center_y = np.empty(capacity, dtype=np.float64)
        self.observed = np.empty(capacity, dtype=bool)
        self.reset()

    def reset(self) -> None:
        """Park every slot outside the simulation space and rewind the cursor."""
        self.radius.fill(2 * self.boundary)
        self.center_x.fill(0.0)
        self.center_y.fill(0.0)
        self.observed.fill(True)
        self._cursor = 0
        self._emissions = 0

    @property
    def cursor(self) -> int:
        """1-indexed position of the most recently recycled slot (0 if none)."""
        return self._cursor

    @property
    def emissions(self) -> int:
        """Total number of recycles since the last reset."""
        return self._emissions

    @property
    def edge_sign(self) -> float:
        """-1 when edges travel toward lower x, +1 otherwise."""
        return self._edge_sign

    def __len__(self) -> int:
        return self.capacity

    def __getitem__(self, index: int) -> Wavefront:
        return Wavefront(
            radius=float(self.radius[index]),
            center_x=float(self.center_x[index]),
            center_y=float(self.center_y[index]),
            observed=bool(self.observed[index]),
        )

    def advance_all(self, c: float, dt: float) -> None:
        """Grow every wavefront by ``c * dt``, observed or not."""
        self.radius += c * dt

    def recycle(self, x: float, y: float) -> int:
        """Reset the oldest slot into a new wavefront centred at (x, y).

        Returns:
            The new 1-indexed cursor
        """
        self._cursor = self._cursor % self.capacity + 1
        index = self._cursor - 1

        self.radius[index] = 0.0
        self.center_x[index] = x
        self.center_y[index] = y
        self.observed[index] = False
        self._emissions += 1

        return self._cursor

    def place(
        self,
        index: int,
        radius: float,
        center_x: float,
        center_y: float = 0.0,
        observed: bool = False,
    ) -> None:
        """Overwrite one slot directly (0-based storage index).

        Used to seed synthetic scenarios; the cursor is left untouched.
        """
        self.radius[index] = radius
        self.center_x[index] = center_x
        self.center_y[index] = center_y
        self.observed[index] = observed

    def leading_edge(self, index: int) -> float:
        """x-coordinate of the slot's edge on the observer's side."""
        return float(self.center_x[index] + self._edge_sign * self.radius[index])

    def leading_edges(self) -> NDArray[np.float64]:
        """Leading-edge x-coordinates of every slot (storage order)."""
        return self.center_x + self._edge_sign * self.radius

    def has_reached(self, index: int, observer_x: float) -> bool:
        """True once the slot's leading edge is at or past the observer."""
        return self._edge_sign * (self.leading_edge(index) - observer_x) >= 0

    def mark_observed(self, index: int) -> None:
        self.observed[index] = True

    def snapshot(self) -> WavefrontSnapshot:
        """Copy the ring geometry for renderers."""
        return WavefrontSnapshot(
            radius=self.radius.copy(),
            center_x=self.center_x.copy(),
            center_y=self.center_y.copy(),
        )
