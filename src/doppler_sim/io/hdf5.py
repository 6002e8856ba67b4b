"""HDF5 trace format for Doppler simulation runs.

This module provides a streaming writer and a reader for per-tick
simulation traces. A trace file holds:
- Run metadata (engine config, creation time, package version, runtime)
- One resizable dataset per tick series under ``ticks/``
- Optional ring-geometry snapshots under ``wavefronts/``
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import h5py
import numpy as np
from numpy.typing import NDArray

from doppler_sim.core.engine import EngineSnapshot
from doppler_sim.core.pacer import TickTiming

if TYPE_CHECKING:
    from doppler_sim.core.engine import SimulationEngine

# Series name -> (dtype, units)
SERIES: dict[str, tuple[type, str]] = {
    "tick": (np.int64, "ticks"),
    "time": (np.float64, "s"),
    "source_x": (np.float64, "m"),
    "source_velocity": (np.float64, "m/s"),
    "source_frequency": (np.float64, "Hz"),
    "observed_frequency": (np.float64, "Hz"),
    "mach_number": (np.float64, "1"),
    "overloaded": (np.bool_, "bool"),
    "elapsed": (np.float64, "s"),
}

WAVEFRONT_FIELDS = ("radius", "center_x", "center_y")


class TraceWriter:
    """Streaming writer for simulation traces.

    Example:
        >>> writer = TraceWriter("trace.h5", engine)
        >>> for _ in range(num_ticks):
        ...     pacer.start()
        ...     engine.step()
        ...     timing = pacer.finish()
        ...     writer.write_tick(engine.snapshot(), timing)
        >>> writer.finalize(runtime=12.3)
    """

    def __init__(
        self,
        filename: str | Path,
        engine: "SimulationEngine",
        compression: str | None = "gzip",
        compression_level: int = 4,
    ):
        """Initialize trace writer.

        Args:
            filename: Output file path
            engine: Engine whose run is being recorded
            compression: Compression algorithm ('gzip', 'lzf', None)
            compression_level: Compression level (0-9 for gzip)
        """
        self.filename = Path(filename)
        self.engine = engine
        self.file = h5py.File(filename, "w")
        self.compression = compression
        self.compression_opts = compression_level if compression == "gzip" else None
        self._num_ticks = 0
        self._num_snapshots = 0

        self._write_metadata()
        self._create_datasets()

    def _write_metadata(self):
        """Write run metadata to HDF5 attributes."""
        from doppler_sim import __version__

        meta = self.file.create_group("metadata")
        meta.attrs["created_at"] = datetime.now(timezone.utc).isoformat()
        meta.attrs["version"] = __version__

        config_group = self.file.create_group("config")
        for key, value in self.engine.config.to_dict().items():
            config_group.attrs[key] = value

        observer = self.file.create_group("observer")
        observer.attrs["position"] = list(self.engine.observer.position)

    def _create_datasets(self):
        """Create resizable datasets for tick series and ring snapshots."""
        ticks_group = self.file.create_group("ticks")
        for name, (dtype, units) in SERIES.items():
            dataset = ticks_group.create_dataset(
                name,
                shape=(0,),
                maxshape=(None,),
                dtype=dtype,
                chunks=True,
                compression=self.compression,
                compression_opts=self.compression_opts,
            )
            dataset.attrs["units"] = units

        capacity = self.engine.config.capacity
        wavefronts_group = self.file.create_group("wavefronts")
        wavefronts_group.create_dataset(
            "tick", shape=(0,), maxshape=(None,), dtype=np.int64, chunks=True
        )
        for name in WAVEFRONT_FIELDS:
            dataset = wavefronts_group.create_dataset(
                name,
                shape=(0, capacity),
                maxshape=(None, capacity),
                dtype=np.float64,
                chunks=(1, capacity),
                compression=self.compression,
                compression_opts=self.compression_opts,
            )
            dataset.attrs["units"] = "m"

    def write_tick(
        self,
        snapshot: EngineSnapshot,
        timing: TickTiming | None = None,
        save_snapshot: bool = False,
    ):
        """Append one tick to the trace.

        Args:
            snapshot: Engine state after the tick
            timing: Pacer report for the tick (elapsed is NaN if omitted)
            save_snapshot: If True, also save the ring geometry
        """
        values = {
            "tick": snapshot.tick,
            "time": snapshot.time,
            "source_x": snapshot.source_position[0],
            "source_velocity": snapshot.source_velocity,
            "source_frequency": snapshot.source_frequency,
            "observed_frequency": snapshot.observed_frequency,
            "mach_number": snapshot.mach_number,
            "overloaded": snapshot.overloaded,
            "elapsed": timing.elapsed if timing is not None else np.nan,
        }

        idx = self._num_ticks
        ticks_group = self.file["ticks"]
        for name, value in values.items():
            dataset = ticks_group[name]
            dataset.resize((idx + 1,))
            dataset[idx] = value
        self._num_ticks += 1

        if save_snapshot:
            self._write_wavefronts(snapshot)

    def _write_wavefronts(self, snapshot: EngineSnapshot):
        idx = self._num_snapshots
        group = self.file["wavefronts"]

        group["tick"].resize((idx + 1,))
        group["tick"][idx] = snapshot.tick
        for name in WAVEFRONT_FIELDS:
            dataset = group[name]
            dataset.resize((idx + 1, dataset.shape[1]))
            dataset[idx] = getattr(snapshot.wavefronts, name)
        self._num_snapshots += 1

    def finalize(self, runtime: float | None = None, **extra_metadata):
        """Write final metadata and close file.

        Args:
            runtime: Total wall-clock runtime in seconds
            **extra_metadata: Additional metadata to store
        """
        if not self.file:
            return

        meta = self.file["metadata"]
        meta.attrs["num_ticks"] = self._num_ticks
        meta.attrs["num_snapshots"] = self._num_snapshots
        meta.attrs["detections"] = self.engine.detections

        if runtime is not None:
            meta.attrs["total_runtime_seconds"] = runtime

        for key, value in extra_metadata.items():
            meta.attrs[key] = value

        self.file.flush()
        self.file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()


class TraceReader:
    """Reader for simulation traces written by :class:`TraceWriter`.

    Example:
        >>> with TraceReader("trace.h5") as reader:
        ...     observed = reader.load_series("observed_frequency")
        ...     radius = reader.load_wavefronts(0)["radius"]
    """

    def __init__(self, filename: str | Path):
        """Initialize reader.

        Args:
            filename: Path to HDF5 trace file
        """
        self.filename = Path(filename)
        self.file = h5py.File(filename, "r")

    def get_metadata(self) -> dict[str, Any]:
        """Extract run metadata and config.

        Returns:
            Dict with 'metadata', 'config' and 'observer' sections
        """
        metadata = {}
        for section in ("metadata", "config", "observer"):
            if section in self.file:
                metadata[section] = dict(self.file[section].attrs)
        return metadata

    def get_series_names(self) -> list[str]:
        """Get list of recorded tick series."""
        if "ticks" not in self.file:
            return []
        return list(self.file["ticks"].keys())

    def load_series(self, name: str) -> NDArray:
        """Load one tick series.

        Args:
            name: Series name (see SERIES)

        Returns:
            1D array with one value per recorded tick
        """
        if f"ticks/{name}" not in self.file:
            raise KeyError(
                f"Series '{name}' not found. Available: {self.get_series_names()}"
            )
        return self.file[f"ticks/{name}"][:]

    def get_num_ticks(self) -> int:
        """Get number of recorded ticks."""
        if "ticks/tick" not in self.file:
            return 0
        return self.file["ticks/tick"].shape[0]

    def get_num_snapshots(self) -> int:
        """Get number of saved ring snapshots."""
        if "wavefronts/tick" not in self.file:
            return 0
        return self.file["wavefronts/tick"].shape[0]

    def load_wavefronts(self, index: int) -> dict[str, NDArray[np.floating] | int]:
        """Load one ring snapshot.

        Args:
            index: Snapshot index (not tick number)

        Returns:
            Dict with 'tick' and per-slot 'radius', 'center_x', 'center_y'
        """
        num = self.get_num_snapshots()
        if not 0 <= index < num:
            raise IndexError(f"Snapshot index {index} out of range (have {num})")

        group = self.file["wavefronts"]
        result: dict[str, NDArray[np.floating] | int] = {"tick": int(group["tick"][index])}
        for name in WAVEFRONT_FIELDS:
            result[name] = group[name][index]
        return result

    def close(self):
        """Close the HDF5 file."""
        if self.file:
            self.file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
