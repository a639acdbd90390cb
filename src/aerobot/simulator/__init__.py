"""Desktop pygame shell for Aerobot Descent."""

from .window import GameWindow, WindowConfig

__all__ = ["GameWindow", "WindowConfig"]
