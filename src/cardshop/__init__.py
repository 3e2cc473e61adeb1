"""Deterministic card-shop simulation engine."""

from .config import DEFAULT_CONFIG, SimConfig, load_config
from .services.session_service import GameSession
from .services.simulation_service import SimSnapshot, SimulationService

__all__ = [
    "DEFAULT_CONFIG",
    "GameSession",
    "SimConfig",
    "SimSnapshot",
    "SimulationService",
    "load_config",
]
