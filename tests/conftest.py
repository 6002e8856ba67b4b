"""Shared fixtures for the doppler-sim test suite."""

import pytest

from doppler_sim import EngineConfig, SimulationEngine, WavefrontRing


@pytest.fixture
def config():
    """Default engine constants (dt=0.05, c=343, 28 slots, 2 km space)."""
    return EngineConfig()


@pytest.fixture
def engine(config):
    """Engine with a silent, stationary source."""
    return SimulationEngine(config)


@pytest.fixture
def ring():
    """Default-size ring with every slot parked."""
    return WavefrontRing(capacity=28, boundary=2000.0)
