import random

import pytest

from aerobot.config.game import GameConfig
from aerobot.core.events import EventBus
from aerobot.core.state import StateMachine
from aerobot.game.controller import GameController
from aerobot.game.engine import SimulationEngine
from aerobot.persistence.highscore import HighScoreStore

WIDTH = 480
HEIGHT = 800


class RecordingStore:
    """Stands in for HighScoreStore and records what was saved."""

    def __init__(self, loaded: int = 0):
        self.loaded = loaded
        self.saved: list[int] = []

    async def load(self) -> int:
        return self.loaded

    def save(self, score: int):
        self.saved.append(score)
        return None


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def engine(config):
    engine = SimulationEngine(config, random.Random(1234))
    engine.reset(WIDTH, HEIGHT)
    return engine


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def controller(config, event_bus, recording_store):
    return GameController(
        engine=SimulationEngine(config, random.Random(99)),
        state_machine=StateMachine(),
        event_bus=event_bus,
        store=recording_store,
        config=config,
    )


@pytest.fixture
def store(tmp_path):
    return HighScoreStore(tmp_path / "highscore.json")
