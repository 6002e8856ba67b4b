"""
Run constants for the Doppler simulation engine.

Classes:
    EngineConfig: Immutable per-run constants (timestep, wave speed, ring
        capacity, simulation space and observer placement)

Functions:
    load_config: Build an EngineConfig from a JSON file of overrides

Example:
    >>> from doppler_sim import EngineConfig
    >>> config = EngineConfig(dt=0.05, c=343.0)
    >>> config.observer_position
    (200.0, 1000.0)
    >>> config.reflect_low, config.reflect_high
    (400.0, 1800.0)
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Literal

CROSSING_DIRECTIONS = ("decreasing", "increasing")


@dataclass(frozen=True)
class EngineConfig:
    """Immutable constants for one simulation run.

    Args:
        dt: Tick interval in seconds (default 0.05)
        c: Wave propagation speed in m/s (default 343, sound in dry air at 20 °C)
        capacity: Number of wavefront slots in the ring buffer (default 28)
        boundary: Side length of the square simulation space in meters
        observer_margin: Fraction of the boundary below which the source
            reflects (keeps the source away from the observer)
        space_margin: Fraction of the boundary kept free at the far edge of
            the simulation space
        stale_ticks: Extra ticks tolerated past one observed period before the
            observed frequency is dropped to zero
        crossing: Direction in which wavefront edges travel to reach the
            observer. "decreasing" means the observer sits at lower x than the
            source's range of motion.
        observer_position: Observer (x, y) in meters. Defaults to
            (0.1 * boundary, 0.5 * boundary).
        source_position: Initial source (x, y) in meters. Defaults to the
            centre of the simulation space.

    Raises:
        ValueError: If any constant is out of range
    """

    dt: float = 0.05
    c: float = 343.0
    capacity: int = 28
    boundary: float = 2000.0
    observer_margin: float = 0.2
    space_margin: float = 0.1
    stale_ticks: int = 10
    crossing: Literal["decreasing", "increasing"] = "decreasing"
    observer_position: tuple[float, float] | None = None
    source_position: tuple[float, float] | None = None

    def __post_init__(self):
        if not (math.isfinite(self.dt) and self.dt > 0):
            raise ValueError(f"dt must be a positive finite number, got {self.dt}")
        if not (math.isfinite(self.c) and self.c > 0):
            raise ValueError(f"c must be a positive finite number, got {self.c}")
        if self.capacity < 2:
            raise ValueError(f"capacity must be at least 2, got {self.capacity}")
        if not (math.isfinite(self.boundary) and self.boundary > 0):
            raise ValueError(f"boundary must be positive, got {self.boundary}")
        if not 0.0 <= self.observer_margin < 1.0:
            raise ValueError(
                f"observer_margin must be in [0, 1), got {self.observer_margin}"
            )
        if not 0.0 <= self.space_margin < 1.0:
            raise ValueError(f"space_margin must be in [0, 1), got {self.space_margin}")
        if self.observer_margin >= 1.0 - self.space_margin:
            raise ValueError(
                "observer_margin and space_margin leave no room for the source "
                f"({self.observer_margin} + {self.space_margin} >= 1)"
            )
        if self.stale_ticks < 0:
            raise ValueError(f"stale_ticks must be non-negative, got {self.stale_ticks}")
        if self.crossing not in CROSSING_DIRECTIONS:
            raise ValueError(
                f"crossing must be one of {CROSSING_DIRECTIONS}, got {self.crossing!r}"
            )

        # Frozen dataclass: resolve defaults through object.__setattr__
        if self.observer_position is None:
            object.__setattr__(
                self, "observer_position", (self.boundary * 0.1, self.boundary / 2)
            )
        else:
            object.__setattr__(
                self, "observer_position", _as_point("observer_position", self.observer_position)
            )
        if self.source_position is None:
            object.__setattr__(
                self, "source_position", (self.boundary / 2, self.boundary / 2)
            )
        else:
            object.__setattr__(
                self, "source_position", _as_point("source_position", self.source_position)
            )

    @property
    def reflect_low(self) -> float:
        """Source x below which velocity is reflected."""
        return self.boundary * self.observer_margin

    @property
    def reflect_high(self) -> float:
        """Source x above which velocity is reflected."""
        return self.boundary * (1.0 - self.space_margin)

    @property
    def wave_step(self) -> float:
        """Distance every wavefront grows per tick (c * dt)."""
        return self.c * self.dt

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of all constants (JSON and HDF5 attribute friendly)."""
        data = asdict(self)
        data["observer_position"] = list(self.observer_position)
        data["source_position"] = list(self.source_position)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Create a config from a dict of overrides.

        Raises:
            ValueError: If the dict contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown config keys: {', '.join(unknown)}. "
                f"Valid keys: {', '.join(sorted(known))}"
            )
        kwargs = dict(data)
        for key in ("observer_position", "source_position"):
            if kwargs.get(key) is not None:
                kwargs[key] = tuple(kwargs[key])
        return cls(**kwargs)

    def replace(self, **changes: Any) -> EngineConfig:
        """Return a copy with the given constants changed."""
        data = self.to_dict()
        data.update(changes)
        return EngineConfig.from_dict(data)


def load_config(path: str | Path) -> EngineConfig:
    """Load an EngineConfig from a JSON file.

    The file holds a single object whose keys are EngineConfig fields; missing
    keys keep their defaults.

    Args:
        path: Path to the JSON file

    Returns:
        Validated EngineConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't a JSON object or holds invalid values
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    return EngineConfig.from_dict(data)


def _as_point(name: str, value) -> tuple[float, float]:
    point = tuple(float(v) for v in value)
    if len(point) != 2:
        raise ValueError(f"{name} must have exactly 2 coordinates, got {len(point)}")
    return point
