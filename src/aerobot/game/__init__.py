"""Simulation and lifecycle for the descent game."""

from .entities import Entity, EntityType, Particle, Player
from .engine import SimulationEngine, Snapshot, TickResult, World
from .controller import GameController

__all__ = [
    "Entity",
    "EntityType",
    "Particle",
    "Player",
    "SimulationEngine",
    "Snapshot",
    "TickResult",
    "World",
    "GameController",
]
