"""Rendering for Aerobot Descent."""

from .renderer import Renderer

__all__ = ["Renderer"]
