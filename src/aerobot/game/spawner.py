"""Entity placement within the playable band."""

import math
import random
import string

from aerobot.config.game import GameConfig
from aerobot.game.entities import Entity, EntityType

_ID_ALPHABET = string.digits + string.ascii_lowercase


class Spawner:
    """Creates obstacles and collectibles just below the visible area."""

    ID_LENGTH = 9

    def __init__(self, config: GameConfig, rng: random.Random):
        self.config = config
        self.rng = rng

    def entity_size(self, entity_type: EntityType, width: float) -> float:
        """Side length of the square footprint for a category."""
        if entity_type is EntityType.OBSTACLE:
            return width * self.config.obstacle_size_pct
        return width * self.config.item_size_pct

    def pick_item_type(self) -> EntityType:
        """Choose a coin or a powerup with equal probability."""
        return EntityType.COIN if self.rng.random() < 0.5 else EntityType.POWERUP

    def spawn(self, entity_type: EntityType, width: float, height: float) -> Entity:
        """Create an entity at a random x inside the walls.

        The band is shrunk by the entity footprint on both sides so the
        whole square stays clear of the walls.
        """
        wall = self.config.wall_width(width)
        size = self.entity_size(entity_type, width)
        playable = width - wall * 2
        band = max(0.0, playable - size * 2)

        x = wall + size + self.rng.random() * band
        y = height + self.config.spawn_offset

        rotation = 0.0
        if entity_type is EntityType.OBSTACLE:
            rotation = self.rng.uniform(0.0, 2 * math.pi)

        return Entity(
            id=self._new_id(),
            x=x,
            y=y,
            width=size,
            height=size,
            type=entity_type,
            rotation=rotation,
        )

    def _new_id(self) -> str:
        return "".join(self.rng.choice(_ID_ALPHABET) for _ in range(self.ID_LENGTH))
