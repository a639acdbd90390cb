import asyncio

import pytest

from aerobot.core.events import Event, EventType, tap_event
from aerobot.core.state import GameState
from aerobot.game.controller import GameController
from aerobot.game.entities import EntityType, Entity
from aerobot.persistence.highscore import HighScoreStore

WIDTH = 480
HEIGHT = 800


def crash_into_wall(controller):
    p = controller.engine.world.player
    p.direction = -1
    p.x = WIDTH * 0.05 + p.radius
    return controller.tick(10, WIDTH, HEIGHT)


def record(event_bus, event_type):
    seen = []
    event_bus.subscribe(event_type, seen.append)
    return seen


class TestLifecycle:
    def test_starts_in_start_state(self, controller):
        assert controller.state is GameState.START
        assert controller.score == 0
        assert controller.high_score == 0

    def test_start_moves_to_playing(self, controller):
        assert controller.start(WIDTH, HEIGHT)
        assert controller.state is GameState.PLAYING
        assert controller.score == 0
        assert controller.engine.world.width == WIDTH

    def test_start_only_from_start(self, controller):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 12.0
        assert not controller.start(WIDTH, HEIGHT)
        assert controller.state is GameState.PLAYING
        assert controller.score == 12

    def test_restart_ignored_while_playing(self, controller):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 30.0
        assert not controller.restart(WIDTH, HEIGHT)
        assert controller.score == 30

    def test_restart_ignored_before_first_game(self, controller):
        assert not controller.restart(WIDTH, HEIGHT)
        assert controller.state is GameState.START

    def test_tick_outside_playing_does_nothing(self, controller):
        result = controller.tick(16, WIDTH, HEIGHT)
        assert result.skipped
        assert controller.score == 0


class TestInput:
    def test_tap_applies_on_next_tick(self, controller):
        controller.start(WIDTH, HEIGHT)
        assert controller.tap()
        assert controller.engine.world.player.direction == -1

        controller.tick(10, WIDTH, HEIGHT)

        assert controller.engine.world.player.direction == 1

    def test_double_tap_flips_once(self, controller):
        controller.start(WIDTH, HEIGHT)
        controller.tap()
        controller.tap()
        controller.tick(10, WIDTH, HEIGHT)
        assert controller.engine.world.player.direction == 1

    def test_tap_ignored_outside_playing(self, controller):
        assert not controller.tap()
        controller.start(WIDTH, HEIGHT)
        controller.tick(10, WIDTH, HEIGHT)
        assert controller.engine.world.player.direction == -1

    def test_bus_events_drive_commands(self, controller, event_bus):
        event_bus.emit(Event(EventType.START, data={"width": WIDTH, "height": HEIGHT}))
        assert controller.state is GameState.PLAYING

        event_bus.emit(tap_event())
        controller.tick(10, WIDTH, HEIGHT)
        assert controller.engine.world.player.direction == 1

    def test_resize_event_rescales_on_next_tick(self, controller, event_bus):
        controller.start(WIDTH, HEIGHT)
        event_bus.emit(Event(EventType.RESIZE, data={"width": 960, "height": 800}))
        assert controller.engine.world.width == WIDTH

        controller.tick(0)

        assert controller.engine.world.width == 960
        assert controller.engine.world.player.radius == pytest.approx(960 * 0.03)


class TestGameOver:
    def test_wall_crash_sets_high_score(self, controller, recording_store):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 42.7

        result = crash_into_wall(controller)

        assert result.terminal
        assert controller.state is GameState.GAME_OVER
        assert controller.high_score == 42
        assert recording_store.saved == [42]

    def test_obstacle_crash_sets_high_score(self, controller, recording_store):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.player.speed_x = 0.0
        p = controller.engine.world.player
        controller.engine.world.score = 18.0
        controller.engine.world.entities.append(
            Entity(id="rock", x=p.x, y=p.y, width=30, height=30, type=EntityType.OBSTACLE)
        )

        controller.tick(0, WIDTH, HEIGHT)

        assert controller.state is GameState.GAME_OVER
        assert controller.high_score == 18

    def test_lower_score_does_not_save(self, controller, recording_store):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 100.0
        crash_into_wall(controller)

        controller.restart(WIDTH, HEIGHT)
        controller.engine.world.score = 60.0
        crash_into_wall(controller)

        assert controller.high_score == 100
        assert recording_store.saved == [100]

    def test_equal_score_does_not_save(self, controller, recording_store):
        controller.start(WIDTH, HEIGHT)
        crash_into_wall(controller)
        assert controller.high_score == 0
        assert recording_store.saved == []

    def test_game_over_event(self, controller, event_bus):
        seen = record(event_bus, EventType.GAME_OVER)
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 5.0
        crash_into_wall(controller)

        assert len(seen) == 1
        assert seen[0].data["cause"] == "wall"
        assert seen[0].data["score"] == 5
        assert seen[0].data["high_score"] == 5

    def test_no_ticks_after_game_over(self, controller):
        controller.start(WIDTH, HEIGHT)
        crash_into_wall(controller)
        score = controller.engine.world.score
        assert controller.tick(50, WIDTH, HEIGHT).skipped
        assert controller.engine.world.score == score


class TestRestart:
    def test_restart_reinitializes_world(self, controller):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.player.speed_x = 0.0
        for _ in range(60):
            controller.tick(50, WIDTH, HEIGHT)
        controller.engine.world.score += 200
        crash_into_wall(controller)
        assert controller.engine.world.particles

        assert controller.restart(WIDTH, HEIGHT)

        world = controller.engine.world
        assert controller.state is GameState.PLAYING
        assert world.entities == []
        assert world.particles == []
        assert controller.score == 0
        assert world.player.x == WIDTH / 2
        assert world.player.speed_x == pytest.approx(WIDTH * 0.6)

    def test_score_changed_reset_to_zero(self, controller, event_bus):
        seen = record(event_bus, EventType.SCORE_CHANGED)
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 9.5
        controller.tick(50, WIDTH, HEIGHT)
        crash_into_wall(controller)
        controller.restart(WIDTH, HEIGHT)

        scores = [e.data["score"] for e in seen]
        assert scores[0] == 0
        assert 10 in scores
        assert scores[-1] == 0

    def test_state_changes_published(self, controller, event_bus):
        seen = record(event_bus, EventType.STATE_CHANGED)
        controller.start(WIDTH, HEIGHT)
        crash_into_wall(controller)
        controller.restart(WIDTH, HEIGHT)
        assert [(e.data["old"], e.data["new"]) for e in seen] == [
            ("START", "PLAYING"),
            ("PLAYING", "GAME_OVER"),
            ("GAME_OVER", "PLAYING"),
        ]


class TestCollecting:
    def test_coin_at_fifty_becomes_one_fifty(self, controller, event_bus):
        collected = record(event_bus, EventType.ITEM_COLLECTED)
        controller.start(WIDTH, HEIGHT)
        world = controller.engine.world
        world.player.speed_x = 0.0
        world.score = 50.0
        world.entities.append(
            Entity(id="coin", x=world.player.x, y=world.player.y, width=24, height=24, type=EntityType.COIN)
        )

        controller.tick(0, WIDTH, HEIGHT)

        assert controller.score == 150
        assert world.entities == []
        assert controller.state is GameState.PLAYING
        assert collected[0].data["type"] == "COIN"

    def test_new_record_flag(self, controller):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 20.0
        crash_into_wall(controller)
        controller.restart(WIDTH, HEIGHT)

        assert not controller.is_new_record
        controller.engine.world.score = 21.0
        assert controller.is_new_record

    def test_tying_the_best_is_not_a_record(self, controller):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 20.0
        crash_into_wall(controller)
        assert controller.run_set_record

        controller.restart(WIDTH, HEIGHT)
        assert not controller.run_set_record
        controller.engine.world.score = 20.0
        crash_into_wall(controller)

        assert controller.state is GameState.GAME_OVER
        assert controller.high_score == 20
        assert not controller.run_set_record

    def test_empty_run_is_not_a_record(self, controller):
        controller.start(WIDTH, HEIGHT)
        crash_into_wall(controller)
        assert not controller.run_set_record


class TestHighScoreLoading:
    def test_loads_from_store(self, controller, recording_store, event_bus):
        seen = record(event_bus, EventType.HIGH_SCORE_CHANGED)
        recording_store.loaded = 250

        assert asyncio.run(controller.load_high_score()) == 250
        assert controller.high_score == 250
        assert not controller.loading_high_score
        assert seen[0].data["high_score"] == 250

    def test_loaded_value_never_lowers_high_score(self, controller, recording_store):
        controller.start(WIDTH, HEIGHT)
        controller.engine.world.score = 400.0
        crash_into_wall(controller)
        recording_store.loaded = 100

        asyncio.run(controller.load_high_score())

        assert controller.high_score == 400

    def test_without_store(self, config):
        controller = GameController(config=config)
        assert asyncio.run(controller.load_high_score()) == 0


def test_game_over_writes_local_file(tmp_path, config, event_bus):
    store = HighScoreStore(tmp_path / "hs.json")
    controller = GameController(event_bus=event_bus, store=store, config=config)
    controller.start(WIDTH, HEIGHT)
    controller.engine.world.score = 77.0

    crash_into_wall(controller)

    assert store.load_local() == 77


def test_close_detaches_from_bus(controller, event_bus):
    controller.close()
    event_bus.emit(Event(EventType.START, data={"width": WIDTH, "height": HEIGHT}))
    assert controller.state is GameState.START
