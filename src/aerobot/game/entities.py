"""Game entity dataclasses."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class EntityType(Enum):
    """Spawned entity categories."""
    OBSTACLE = "OBSTACLE"
    COIN = "COIN"
    POWERUP = "POWERUP"


@dataclass
class Player:
    """The descending robot. ``y`` stays fixed while playing."""
    x: float
    y: float
    radius: float
    direction: int = -1  # 1 right, -1 left
    speed_x: float = 0.0  # px/s
    tilt: float = 0.0  # radians


@dataclass
class Entity:
    """An obstacle or collectible scrolling up towards the player."""
    id: str
    x: float
    y: float
    width: float
    height: float
    type: EntityType
    marked_for_deletion: bool = False
    rotation: float = 0.0  # radians


@dataclass
class Particle:
    """Cosmetic effect point. ``life`` counts down in seconds."""
    x: float
    y: float
    vx: float
    vy: float
    life: float
    max_life: float
    color: Tuple[int, int, int]
    size: float

    @property
    def alpha(self) -> float:
        """Opacity derived from remaining life."""
        return max(0.0, min(1.0, self.life))

    @property
    def is_dead(self) -> bool:
        return self.life <= 0.0
