"""Configuration for Aerobot Descent."""

from .game import GameConfig, GAME_CONFIG
from .settings import Settings, get_settings

__all__ = ["GameConfig", "GAME_CONFIG", "Settings", "get_settings"]
