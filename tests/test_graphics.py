import random

import numpy as np
import pytest

from aerobot.config.game import GameConfig
from aerobot.core.state import GameState
from aerobot.game.engine import SimulationEngine
from aerobot.game.entities import Entity, EntityType, Particle
from aerobot.graphics.primitives import (
    draw_circle, draw_rect, fill, fill_polygon, rotated_rect_points,
)
from aerobot.graphics.renderer import Renderer

WIDTH = 480
HEIGHT = 800


@pytest.fixture
def buffer():
    return np.zeros((40, 40, 3), dtype=np.uint8)


class TestPrimitives:
    def test_rect_is_clipped(self, buffer):
        draw_rect(buffer, -10, -10, 20, 20, (255, 0, 0))
        assert tuple(buffer[0, 0]) == (255, 0, 0)
        assert tuple(buffer[9, 9]) == (255, 0, 0)
        assert tuple(buffer[10, 10]) == (0, 0, 0)

    def test_rect_fully_outside(self, buffer):
        draw_rect(buffer, 100, 100, 5, 5, (255, 0, 0))
        assert not buffer.any()

    def test_circle(self, buffer):
        draw_circle(buffer, 20, 20, 5, (0, 255, 0))
        assert tuple(buffer[20, 20]) == (0, 255, 0)
        assert tuple(buffer[20, 30]) == (0, 0, 0)

    def test_alpha_blend(self, buffer):
        fill(buffer, (200, 0, 0))
        draw_rect(buffer, 0, 0, 40, 40, (0, 0, 200), alpha=0.5)
        assert tuple(buffer[5, 5]) == (100, 0, 100)

    def test_zero_alpha_leaves_buffer(self, buffer):
        draw_circle(buffer, 20, 20, 10, (255, 255, 255), alpha=0.0)
        assert not buffer.any()

    def test_triangle(self, buffer):
        fill_polygon(buffer, [(0, 0), (40, 0), (0, 40)], (9, 9, 9))
        assert tuple(buffer[2, 2]) == (9, 9, 9)
        assert tuple(buffer[38, 38]) == (0, 0, 0)

    def test_rotated_rect_points(self):
        points = rotated_rect_points(0, 0, 2, 2, 0)
        assert points == [(-1, -1), (1, -1), (1, 1), (-1, 1)]


class TestRenderer:
    @pytest.fixture
    def engine(self):
        engine = SimulationEngine(GameConfig(), random.Random(0))
        engine.reset(WIDTH, HEIGHT)
        return engine

    @pytest.fixture
    def renderer(self):
        return Renderer(GameConfig())

    def body_pixel(self, frame, engine):
        p = engine.world.player
        return tuple(frame[int(p.y + p.radius * 0.8), int(p.x)])

    def test_player_drawn_while_playing(self, engine, renderer):
        frame = renderer.new_buffer(WIDTH, HEIGHT)
        renderer.render(engine.snapshot(), GameState.PLAYING, frame)
        assert self.body_pixel(frame, engine) == renderer.colors["player"]

    @pytest.mark.parametrize("state", [GameState.START, GameState.GAME_OVER])
    def test_player_hidden_outside_playing(self, engine, renderer, state):
        frame = renderer.new_buffer(WIDTH, HEIGHT)
        renderer.render(engine.snapshot(), state, frame)
        assert self.body_pixel(frame, engine) == renderer.colors["bg_sand"]

    def test_walls_and_entities(self, engine, renderer):
        engine.world.entities.append(
            Entity(id="c", x=240, y=600, width=24, height=24, type=EntityType.COIN)
        )
        frame = renderer.new_buffer(WIDTH, HEIGHT)
        renderer.render(engine.snapshot(), GameState.PLAYING, frame)

        wall_colors = {renderer.colors["wall"], renderer.colors["wall_pattern"]}
        assert tuple(frame[400, 1]) in wall_colors
        assert tuple(frame[400, WIDTH - 2]) in wall_colors
        assert tuple(frame[600, 240 + 8]) == renderer.colors["coin"]

    def test_render_does_not_mutate_world(self, engine, renderer):
        engine.world.entities.append(
            Entity(id="o", x=200, y=500, width=38, height=38, type=EntityType.OBSTACLE, rotation=0.7)
        )
        engine.world.entities.append(
            Entity(id="p", x=300, y=650, width=24, height=24, type=EntityType.POWERUP, rotation=1.1)
        )
        engine.world.particles.append(Particle(100, 100, 5, 5, 0.5, 1.0, (1, 2, 3), 3))
        snapshot = engine.snapshot()
        before = (
            [(e.x, e.y, e.rotation) for e in snapshot.entities],
            [(p.x, p.y, p.life) for p in snapshot.particles],
            snapshot.player.x,
        )

        renderer.render(snapshot, GameState.PLAYING, renderer.new_buffer(WIDTH, HEIGHT))

        after = (
            [(e.x, e.y, e.rotation) for e in snapshot.entities],
            [(p.x, p.y, p.life) for p in snapshot.particles],
            snapshot.player.x,
        )
        assert before == after

    def test_empty_buffer_is_ignored(self, engine, renderer):
        renderer.render(engine.snapshot(), GameState.PLAYING, renderer.new_buffer(0, 0))
