"""Core simulation components."""

from doppler_sim.core.detector import DetectionState, FrequencyDetector
from doppler_sim.core.engine import (
    EngineSnapshot,
    ParameterChange,
    RunStats,
    ScheduledChange,
    SimulationEngine,
)
from doppler_sim.core.kinematics import ObserverState, SourceState, advance_source
from doppler_sim.core.pacer import (
    KeepUpMonitor,
    Pacer,
    RealTimePacer,
    SyntheticPacer,
    TickTiming,
)
from doppler_sim.core.quantize import RESOLUTION_STEP, round_to_resolution
from doppler_sim.core.scheduler import EmissionScheduler
from doppler_sim.core.wavefronts import Wavefront, WavefrontRing, WavefrontSnapshot

__all__ = [
    "SimulationEngine",
    "EngineSnapshot",
    "ParameterChange",
    "ScheduledChange",
    "RunStats",
    "SourceState",
    "ObserverState",
    "advance_source",
    "Wavefront",
    "WavefrontRing",
    "WavefrontSnapshot",
    "EmissionScheduler",
    "FrequencyDetector",
    "DetectionState",
    "Pacer",
    "RealTimePacer",
    "SyntheticPacer",
    "KeepUpMonitor",
    "TickTiming",
    "round_to_resolution",
    "RESOLUTION_STEP",
]
