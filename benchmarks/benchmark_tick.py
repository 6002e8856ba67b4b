#!/usr/bin/env python3
"""
Benchmark script for per-tick cost against the real-time budget.

Each tick must finish well inside dt (50 ms by default) for the paced loop
to keep up. This measures the work done per tick in three configurations:
- Engine only (kinematics, ring growth, emission, detection)
- Engine plus frame building (circle sampling, waveform traces, readout)
- Engine plus HDF5 trace recording

Usage:
    python benchmarks/benchmark_tick.py
    python benchmarks/benchmark_tick.py --quick
    python benchmarks/benchmark_tick.py --json
"""

from __future__ import annotations

import argparse
import json
import tempfile
import time
from dataclasses import asdict, dataclass
from pathlib import Path

import numpy as np

from doppler_sim import EngineConfig, FrameBuilder, SimulationEngine
from doppler_sim.io import TraceWriter


@dataclass
class TickResult:
    """Per-tick timing for one configuration."""

    name: str
    capacity: int
    num_ticks: int
    mean_ms: float
    p99_ms: float
    max_ms: float
    budget_percent: float


def _make_engine(capacity: int) -> SimulationEngine:
    config = EngineConfig(capacity=capacity)
    return SimulationEngine(config, speed=120.0, frequency=2.0)


def _summarize(name: str, engine: SimulationEngine, durations: list[float]) -> TickResult:
    ms = np.array(durations) * 1000
    return TickResult(
        name=name,
        capacity=engine.config.capacity,
        num_ticks=len(durations),
        mean_ms=float(ms.mean()),
        p99_ms=float(np.percentile(ms, 99)),
        max_ms=float(ms.max()),
        budget_percent=float(ms.mean() / (engine.config.dt * 1000) * 100),
    )


def benchmark_engine(capacity: int, num_ticks: int) -> TickResult:
    """Time engine.step() alone."""
    engine = _make_engine(capacity)
    durations = []
    for _ in range(num_ticks):
        start = time.perf_counter()
        engine.step()
        durations.append(time.perf_counter() - start)
    return _summarize("engine", engine, durations)


def benchmark_render(capacity: int, num_ticks: int) -> TickResult:
    """Time engine.step() plus building one frame."""
    engine = _make_engine(capacity)
    builder = FrameBuilder(c=engine.config.c)
    durations = []
    for _ in range(num_ticks):
        start = time.perf_counter()
        engine.step()
        builder.build(engine.snapshot())
        durations.append(time.perf_counter() - start)
    return _summarize("engine+frame", engine, durations)


def benchmark_trace(capacity: int, num_ticks: int, snapshot_interval: int = 10) -> TickResult:
    """Time engine.step() plus writing the tick to an HDF5 trace."""
    engine = _make_engine(capacity)

    with tempfile.NamedTemporaryFile(suffix=".h5", delete=False) as f:
        output_path = Path(f.name)

    try:
        writer = TraceWriter(output_path, engine)
        durations = []
        for i in range(num_ticks):
            start = time.perf_counter()
            engine.step()
            writer.write_tick(engine.snapshot(), save_snapshot=i % snapshot_interval == 0)
            durations.append(time.perf_counter() - start)
        writer.finalize()
    finally:
        output_path.unlink()

    return _summarize("engine+trace", engine, durations)


def run_benchmarks(quick: bool = False) -> list[TickResult]:
    """Run every configuration.

    Args:
        quick: If True, use fewer ticks and only the default ring size
    """
    num_ticks = 200 if quick else 2000
    capacities = [28] if quick else [28, 112, 448]

    results = []
    for capacity in capacities:
        print(f"  Benchmarking {num_ticks} ticks with {capacity} wavefront slots")
        results.append(benchmark_engine(capacity, num_ticks))
        results.append(benchmark_render(capacity, num_ticks))
        results.append(benchmark_trace(capacity, num_ticks))
    return results


def print_results(results: list[TickResult]) -> None:
    """Print formatted benchmark results."""
    print("\n" + "=" * 80)
    print("PER-TICK COST")
    print("=" * 80)
    print(f"{'config':<14} {'slots':>6} {'mean ms':>9} {'p99 ms':>9} {'max ms':>9} {'budget':>8}")
    print("-" * 60)

    for r in results:
        status = "✓" if r.p99_ms < 50.0 else "✗"
        print(
            f"{r.name:<14} {r.capacity:>6} {r.mean_ms:>9.3f} {r.p99_ms:>9.3f} "
            f"{r.max_ms:>9.3f} {r.budget_percent:>7.2f}% {status}"
        )


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark per-tick cost of the Doppler simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python benchmarks/benchmark_tick.py              # Full benchmark
  python benchmarks/benchmark_tick.py --quick      # Quick test
  python benchmarks/benchmark_tick.py --json       # JSON output
        """,
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Run quick benchmark with fewer ticks",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results in JSON format",
    )

    args = parser.parse_args()

    if not args.json:
        print("=" * 80)
        print("DOPPLER SIMULATION TICK BENCHMARK")
        print("=" * 80)
        print()

    results = run_benchmarks(quick=args.quick)

    if args.json:
        print(json.dumps([asdict(r) for r in results], indent=2))
    else:
        print_results(results)


if __name__ == "__main__":
    main()
