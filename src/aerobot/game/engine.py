"""
Simulation engine for the descent.

The player hangs at a fixed height while the world scrolls up past it.
``SimulationEngine.tick`` advances the single owned ``World`` by one
bounded time step and reports what happened in a ``TickResult``; it never
touches the lifecycle state itself, that is the controller's job.

Per tick, in order: score accrual, scroll acceleration, player motion and
tilt, wall check, spawn timers, entity motion and collisions, particles,
wall texture offset. A terminal event (wall or obstacle) ends the tick
early.
"""

import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from aerobot.config.game import GameConfig, GAME_CONFIG
from aerobot.game.entities import Entity, EntityType, Particle, Player
from aerobot.game.particles import advance_particles, create_burst
from aerobot.game.spawner import Spawner

logger = logging.getLogger(__name__)


@dataclass
class World:
    """All mutable simulation state for one run."""

    width: float
    height: float
    player: Player
    entities: List[Entity] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    scroll_speed: float = 0.0  # px/s
    obstacle_timer: float = 0.0  # ms
    item_timer: float = 0.0  # ms
    score: float = 0.0
    wall_offset: float = 0.0
    elapsed: float = 0.0  # seconds of play
    over: bool = False

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass
class TickResult:
    """What a single tick produced."""

    score_gained: float = 0.0
    collected: List[EntityType] = field(default_factory=list)
    terminal: bool = False
    cause: Optional[str] = None  # "wall" or "obstacle"
    skipped: bool = False


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the world handed to the renderer."""

    width: float
    height: float
    wall_width: float
    wall_offset: float
    player: Player
    entities: Tuple[Entity, ...]
    particles: Tuple[Particle, ...]
    score: int


class SimulationEngine:
    """Owns and advances the authoritative game world."""

    def __init__(self, config: GameConfig = GAME_CONFIG, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng or random.Random()
        self.spawner = Spawner(config, self.rng)
        self.world = self._new_world(0, 0)

    @property
    def score(self) -> int:
        """Displayed score (floor of the accumulator)."""
        return math.floor(self.world.score)

    # ----------------------------
    # World setup
    # ----------------------------

    def _new_player(self, width: float, height: float) -> Player:
        cfg = self.config
        return Player(
            x=width / 2,
            y=height * cfg.player_y_pct,
            radius=width * cfg.player_radius_pct,
            direction=-1,
            speed_x=width * cfg.player_speed_pct,
            tilt=0.0,
        )

    def _new_world(self, width: float, height: float) -> World:
        return World(
            width=width,
            height=height,
            player=self._new_player(width, height),
            scroll_speed=height * self.config.scroll_speed_pct,
        )

    def reset(self, width: float, height: float) -> World:
        """Reinitialize the world for a fresh run sized to the play area."""
        self.world = self._new_world(width, height)
        logger.info(f"World reset at {int(width)}x{int(height)}")
        return self.world

    def resize(self, width: float, height: float) -> None:
        """Rescale size-relative values after the play area changes."""
        world = self.world
        old_w, old_h = world.width, world.height
        world.width, world.height = width, height

        if width <= 0 or height <= 0 or old_w <= 0 or old_h <= 0:
            return

        cfg = self.config
        p = world.player
        p.x = p.x * width / old_w
        p.y = height * cfg.player_y_pct
        p.radius = width * cfg.player_radius_pct
        p.speed_x = width * cfg.player_speed_pct
        world.scroll_speed = world.scroll_speed * height / old_h
        logger.debug(f"World resized {int(old_w)}x{int(old_h)} -> {int(width)}x{int(height)}")

    # ----------------------------
    # Input
    # ----------------------------

    def flip_direction(self) -> None:
        """Reverse the player's horizontal direction."""
        self.world.player.direction *= -1

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, delta_ms: float) -> TickResult:
        """Advance the world by ``delta_ms`` (clamped to the frame budget)."""
        world = self.world
        if world.over or not world.has_area:
            return TickResult(skipped=True)

        delta_ms = min(max(delta_ms, 0.0), self.config.max_delta_ms)
        dt = delta_ms / 1000.0
        result = TickResult()

        world.elapsed += dt
        gained = dt * self.config.score_rate
        world.score += gained
        result.score_gained += gained

        world.scroll_speed += self.config.scroll_acceleration * dt

        self._update_player(dt)

        if self._hits_wall():
            self._end_run(result, "wall")
            return result

        self._update_spawning(delta_ms)
        self._update_entities(dt, result)
        if result.terminal:
            return result

        world.particles = advance_particles(world.particles, dt)
        world.wall_offset = (
            world.wall_offset + world.scroll_speed * dt
        ) % self.config.wall_texture_period

        return result

    def _update_player(self, dt: float) -> None:
        p = self.world.player
        p.x += p.speed_x * p.direction * dt

        # First-order ease toward the lean for the current direction
        target_tilt = p.direction * math.radians(self.config.tilt_degrees)
        p.tilt += (target_tilt - p.tilt) * self.config.tilt_response * dt

    def _hits_wall(self) -> bool:
        world = self.world
        p = world.player
        wall = self.config.wall_width(world.width)
        return p.x < wall + p.radius or p.x > world.width - wall - p.radius

    def obstacle_spawn_interval(self) -> float:
        """Current obstacle threshold in ms; shrinks as the scroll speeds up."""
        cfg = self.config
        return max(
            cfg.obstacle_spawn_min_ms,
            cfg.obstacle_spawn_ms - self.world.scroll_speed * cfg.obstacle_spawn_speed_factor,
        )

    def _update_spawning(self, delta_ms: float) -> None:
        world = self.world
        world.obstacle_timer += delta_ms
        world.item_timer += delta_ms

        if world.obstacle_timer > self.obstacle_spawn_interval():
            world.entities.append(
                self.spawner.spawn(EntityType.OBSTACLE, world.width, world.height)
            )
            world.obstacle_timer = 0.0

        if world.item_timer > self.config.item_spawn_ms:
            item_type = self.spawner.pick_item_type()
            world.entities.append(
                self.spawner.spawn(item_type, world.width, world.height)
            )
            world.item_timer = 0.0

    def _update_entities(self, dt: float, result: TickResult) -> None:
        world = self.world
        cfg = self.config
        p = world.player

        for entity in world.entities:
            entity.y -= world.scroll_speed * dt
            entity.rotation += cfg.entity_spin * dt

            if entity.y < -cfg.despawn_margin:
                entity.marked_for_deletion = True
                continue

            # Circle test using half the box width as the entity radius
            distance = math.hypot(p.x - entity.x, p.y - entity.y)
            if distance >= p.radius + entity.width / 2:
                continue

            if entity.type is EntityType.OBSTACLE:
                self._end_run(result, "obstacle")
                break
            elif entity.type is EntityType.COIN:
                self._collect(entity, cfg.coin_bonus, cfg.palette["coin"], result)
            elif entity.type is EntityType.POWERUP:
                self._collect(entity, cfg.powerup_bonus, cfg.palette["powerup"], result)

        world.entities = [e for e in world.entities if not e.marked_for_deletion]

    def _collect(self, entity: Entity, bonus: int, color, result: TickResult) -> None:
        self.world.score += bonus
        result.score_gained += bonus
        result.collected.append(entity.type)
        entity.marked_for_deletion = True
        self.world.particles.extend(create_burst(
            self.rng, entity.x, entity.y, color,
            self.config.pickup_burst, self.config.particle_speed,
        ))

    def _end_run(self, result: TickResult, cause: str) -> None:
        world = self.world
        cfg = self.config
        p = world.player

        if cause == "wall":
            color, count = cfg.palette["player_accent"], cfg.wall_burst
        else:
            color, count = cfg.palette["player"], cfg.obstacle_burst

        world.particles.extend(create_burst(
            self.rng, p.x, p.y, color, count, cfg.particle_speed,
        ))
        world.over = True
        result.terminal = True
        result.cause = cause
        logger.info(f"Run ended by {cause} at score {self.score}")

    # ----------------------------
    # Rendering support
    # ----------------------------

    def snapshot(self) -> Snapshot:
        """Capture the current world for drawing."""
        world = self.world
        return Snapshot(
            width=world.width,
            height=world.height,
            wall_width=self.config.wall_width(world.width),
            wall_offset=world.wall_offset,
            player=replace(world.player),
            entities=tuple(world.entities),
            particles=tuple(world.particles),
            score=self.score,
        )
