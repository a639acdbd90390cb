"""Frame renderer for the descent game.

Draws a simulation ``Snapshot`` into a numpy RGB buffer. The renderer
only reads the snapshot; all motion happens in the engine.
"""

import math
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from aerobot.config.game import GameConfig, GAME_CONFIG
from aerobot.core.state import GameState
from aerobot.game.engine import Snapshot
from aerobot.game.entities import Entity, EntityType, Player
from aerobot.graphics.primitives import (
    draw_circle, draw_ellipse, draw_line, draw_rect, fill, fill_polygon,
    rotated_rect_points,
)


def _rotate(dx: float, dy: float, angle: float) -> Tuple[float, float]:
    c, s = math.cos(angle), math.sin(angle)
    return dx * c - dy * s, dx * s + dy * c


class Renderer:
    """Draws the playfield, entities, player and particles."""

    def __init__(self, config: GameConfig = GAME_CONFIG):
        self.config = config
        self.colors = config.palette

    @staticmethod
    def new_buffer(width: int, height: int) -> NDArray[np.uint8]:
        """Allocate a frame buffer for the given size."""
        return np.zeros((max(0, height), max(0, width), 3), dtype=np.uint8)

    def render(self, snapshot: Snapshot, state: GameState, buffer: NDArray[np.uint8]) -> None:
        """Render one frame.

        Args:
            snapshot: Current simulation state
            state: Lifecycle state; the player is only drawn while playing
            buffer: Target (height, width, 3) array
        """
        if buffer.size == 0:
            return

        fill(buffer, self.colors["bg_sand"])
        self._draw_walls(buffer, snapshot)

        for entity in snapshot.entities:
            self._draw_entity(buffer, entity)

        if state is GameState.PLAYING:
            self._draw_player(buffer, snapshot.player)

        for p in snapshot.particles:
            draw_circle(buffer, p.x, p.y, p.size, p.color, alpha=p.alpha)

    def _draw_walls(self, buffer: NDArray[np.uint8], snapshot: Snapshot) -> None:
        h, w = buffer.shape[:2]
        wall = snapshot.wall_width
        draw_rect(buffer, 0, 0, wall, h, self.colors["wall"])
        draw_rect(buffer, w - wall, 0, wall, h, self.colors["wall"])

        spike = self.config.spike_height
        pattern = self.colors["wall_pattern"]
        y = -spike + snapshot.wall_offset
        while y < h:
            fill_polygon(buffer, [(0, y), (wall + 5, y + spike / 2), (0, y + spike)], pattern)
            fill_polygon(buffer, [(w, y), (w - wall - 5, y + spike / 2), (w, y + spike)], pattern)
            y += spike

    def _draw_entity(self, buffer: NDArray[np.uint8], e: Entity) -> None:
        if e.type is EntityType.OBSTACLE:
            # Hieroglyph block with an inner frame
            fill_polygon(buffer, rotated_rect_points(e.x, e.y, e.width, e.height, e.rotation),
                         self.colors["obstacle"])
            fill_polygon(buffer, rotated_rect_points(e.x, e.y, e.width * 0.6, e.height * 0.6, e.rotation),
                         self.colors["obstacle_highlight"])
            fill_polygon(buffer, rotated_rect_points(e.x, e.y, e.width * 0.45, e.height * 0.45, e.rotation),
                         self.colors["obstacle"])
        elif e.type is EntityType.COIN:
            # Relic piece
            draw_circle(buffer, e.x, e.y, e.width / 2, self.colors["coin"])
            draw_circle(buffer, e.x, e.y, e.width / 6, (255, 255, 255))
        elif e.type is EntityType.POWERUP:
            # Hourglass
            hw, hh = e.width / 2, e.height / 2
            for tri in (((-hw, -hh), (hw, -hh), (0, 0)), ((0, 0), (hw, hh), (-hw, hh))):
                points = []
                for dx, dy in tri:
                    rx, ry = _rotate(dx, dy, e.rotation)
                    points.append((e.x + rx, e.y + ry))
                fill_polygon(buffer, points, self.colors["powerup"])

    def _draw_player(self, buffer: NDArray[np.uint8], p: Player) -> None:
        r = p.radius
        if r <= 0:
            return

        # Shadow
        draw_ellipse(buffer, p.x, p.y + r + 5, r * 0.8, r * 0.3, (0, 0, 0), alpha=0.2)

        # Body and visor
        fill_polygon(buffer, rotated_rect_points(p.x, p.y, r * 2, r * 2, p.tilt), self.colors["player"])
        fill_polygon(buffer, rotated_rect_points(p.x, p.y, r * 1.4, r * 0.6, p.tilt),
                     self.colors["player_visor"])

        # Glowing eyes
        for side in (-1, 1):
            ex, ey = _rotate(side * r * 0.3, 0, p.tilt)
            draw_circle(buffer, p.x + ex, p.y + ey, r * 0.3, self.colors["player_accent"], alpha=0.3)
            draw_circle(buffer, p.x + ex, p.y + ey, r * 0.15, self.colors["player_accent"])

        # Antenna
        bx, by = _rotate(0, -r, p.tilt)
        tx, ty = _rotate(0, -r - 8, p.tilt)
        draw_line(buffer, int(p.x + bx), int(p.y + by), int(p.x + tx), int(p.y + ty),
                  self.colors["antenna"], thickness=2)
        draw_circle(buffer, p.x + tx, p.y + ty, 3, self.colors["antenna_tip"])
