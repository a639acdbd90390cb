"""High score persistence."""

from .highscore import HighScoreStore

__all__ = ["HighScoreStore"]
