"""Aerobot Descent - a one-button arcade descent game."""

__version__ = "0.1.0"
