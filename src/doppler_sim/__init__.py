"""
Doppler Sim - real-time Doppler effect simulation.

A point source moves back and forth along x, emitting circular wavefronts at
its (quantized) period. A stationary observer measures the frequency it hears
from the spacing of wavefronts sweeping past it.

Main exports:
- SimulationEngine: Owns all state and runs the tick loop
- EngineConfig: Immutable run constants
- WavefrontRing: Fixed-capacity ring of emitted wavefronts
- EmissionScheduler: Periodic emission under a tick-quantized clock
- FrequencyDetector: Observed frequency from wavefront arrivals
- RealTimePacer, SyntheticPacer: Tick sources with overload monitoring
- FrameBuilder: Render-ready frames from engine snapshots
- TraceWriter, TraceReader: HDF5 run traces
"""

from doppler_sim.analysis import expected_observed_frequency, relative_error
from doppler_sim.config import EngineConfig, load_config
from doppler_sim.core import (
    RESOLUTION_STEP,
    DetectionState,
    EmissionScheduler,
    EngineSnapshot,
    FrequencyDetector,
    KeepUpMonitor,
    ObserverState,
    Pacer,
    ParameterChange,
    RealTimePacer,
    RunStats,
    ScheduledChange,
    SimulationEngine,
    SourceState,
    SyntheticPacer,
    TickTiming,
    Wavefront,
    WavefrontRing,
    WavefrontSnapshot,
    advance_source,
    round_to_resolution,
)
from doppler_sim.render import Frame, FrameBuilder, WaveformTrace

# Submodules for more specific imports
from . import analysis, core, io, render

__version__ = "0.1.0"

__all__ = [
    # Engine
    "SimulationEngine",
    "EngineSnapshot",
    "ParameterChange",
    "ScheduledChange",
    "RunStats",
    "EngineConfig",
    "load_config",
    # Components
    "SourceState",
    "ObserverState",
    "advance_source",
    "Wavefront",
    "WavefrontRing",
    "WavefrontSnapshot",
    "EmissionScheduler",
    "FrequencyDetector",
    "DetectionState",
    "round_to_resolution",
    "RESOLUTION_STEP",
    # Pacing
    "Pacer",
    "RealTimePacer",
    "SyntheticPacer",
    "KeepUpMonitor",
    "TickTiming",
    # Rendering
    "Frame",
    "FrameBuilder",
    "WaveformTrace",
    # Analysis
    "expected_observed_frequency",
    "relative_error",
    # Submodules
    "analysis",
    "core",
    "io",
    "render",
]
