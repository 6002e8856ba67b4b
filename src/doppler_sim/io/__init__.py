"""I/O for simulation traces."""

from doppler_sim.io.hdf5 import (
    SERIES,
    TraceReader,
    TraceWriter,
)

__all__ = [
    "TraceWriter",
    "TraceReader",
    "SERIES",
]
