"""Game lifecycle controller.

Wires player input and the frame tick to the simulation engine, owns the
lifecycle state machine, and keeps the score and high score in sync with
the display and with persistence.
"""

import logging
from typing import Optional

from aerobot.config.game import GameConfig, GAME_CONFIG
from aerobot.core.events import Event, EventBus, EventType
from aerobot.core.state import GameState, StateMachine
from aerobot.game.engine import SimulationEngine, TickResult
from aerobot.persistence.highscore import HighScoreStore

logger = logging.getLogger(__name__)


class GameController:
    """Runs START -> PLAYING -> GAME_OVER -> PLAYING.

    Input only sets flags; the pending direction flip and resize are
    applied at the start of the next ``tick``.
    """

    def __init__(
        self,
        engine: Optional[SimulationEngine] = None,
        state_machine: Optional[StateMachine] = None,
        event_bus: Optional[EventBus] = None,
        store: Optional[HighScoreStore] = None,
        config: GameConfig = GAME_CONFIG,
    ):
        self.config = config
        self.engine = engine or SimulationEngine(config)
        self.state_machine = state_machine or StateMachine()
        self.event_bus = event_bus or EventBus()
        self.store = store

        self._high_score = 0
        self._last_score = 0
        self._loading_high_score = False
        self._run_set_record = False
        self._flip_pending = False
        self._pending_size: Optional[tuple[int, int]] = None

        self.state_machine.add_listener(self._on_state_changed)
        self._unsubscribers = [
            self.event_bus.subscribe(EventType.TAP, self._on_tap),
            self.event_bus.subscribe(EventType.START, self._on_start),
            self.event_bus.subscribe(EventType.RESTART, self._on_restart),
            self.event_bus.subscribe(EventType.RESIZE, self._on_resize),
        ]

    # ----------------------------
    # Properties
    # ----------------------------

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def score(self) -> int:
        return self.engine.score

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def is_new_record(self) -> bool:
        """True while a run is beating an existing (non-zero) best."""
        return self.score > self._high_score > 0

    @property
    def run_set_record(self) -> bool:
        """True after a run that ended above the best known before it."""
        return self._run_set_record

    @property
    def loading_high_score(self) -> bool:
        return self._loading_high_score

    # ----------------------------
    # Commands
    # ----------------------------

    def start(self, width: float, height: float) -> bool:
        """Begin the first run. Only valid from START."""
        if self.state is not GameState.START:
            logger.debug(f"Ignoring start in {self.state.name}")
            return False
        return self._begin_run(width, height)

    def restart(self, width: float, height: float) -> bool:
        """Begin a new run after a crash. Only valid from GAME_OVER."""
        if self.state is not GameState.GAME_OVER:
            logger.debug(f"Ignoring restart in {self.state.name}")
            return False
        return self._begin_run(width, height)

    def tap(self) -> bool:
        """Request a direction flip on the next tick."""
        if self.state is not GameState.PLAYING:
            return False
        self._flip_pending = True
        return True

    def request_resize(self, width: int, height: int) -> None:
        """Queue a play-area size change for the next tick."""
        self._pending_size = (width, height)

    def _begin_run(self, width: float, height: float) -> bool:
        self._flip_pending = False
        self._pending_size = None
        self.engine.reset(width, height)
        self._last_score = 0
        self._run_set_record = False
        if not self.state_machine.transition(GameState.PLAYING):
            return False
        self._publish(EventType.SCORE_CHANGED, score=0)
        return True

    # ----------------------------
    # Frame update
    # ----------------------------

    def tick(self, delta_ms: float, width: Optional[float] = None, height: Optional[float] = None) -> TickResult:
        """Advance one frame.

        Args:
            delta_ms: Time since the previous frame in milliseconds
            width: Current play-area width, if it may have changed
            height: Current play-area height, if it may have changed
        """
        if width is not None and height is not None:
            world = self.engine.world
            if (width, height) != (world.width, world.height):
                self._pending_size = (width, height)

        if self._pending_size is not None:
            self.engine.resize(*self._pending_size)
            self._pending_size = None

        if self.state is not GameState.PLAYING:
            self._flip_pending = False
            return TickResult(skipped=True)

        if self._flip_pending:
            self.engine.flip_direction()
            self._flip_pending = False

        result = self.engine.tick(delta_ms)

        for entity_type in result.collected:
            self._publish(EventType.ITEM_COLLECTED, type=entity_type.value)

        score = self.engine.score
        if score != self._last_score:
            self._last_score = score
            self._publish(EventType.SCORE_CHANGED, score=score)

        if result.terminal:
            self._finish_run(result.cause)

        return result

    def _finish_run(self, cause: Optional[str]) -> None:
        final = self.engine.score
        previous = self._high_score
        self._run_set_record = final > previous
        self.state_machine.transition(GameState.GAME_OVER)
        self._publish(EventType.GAME_OVER, score=final, cause=cause, high_score=max(previous, final))
        self._update_high_score(final)

    def _update_high_score(self, candidate: int) -> None:
        if candidate <= self._high_score:
            return

        self._high_score = candidate
        logger.info(f"New high score: {candidate}")
        self._publish(EventType.HIGH_SCORE_CHANGED, high_score=candidate)

        if self.store is not None:
            self.store.save(candidate)

    # ----------------------------
    # High score loading
    # ----------------------------

    async def load_high_score(self) -> int:
        """Fetch the persisted high score; a higher in-memory value wins."""
        if self.store is None:
            return self._high_score

        self._loading_high_score = True
        try:
            loaded = await self.store.load()
        finally:
            self._loading_high_score = False

        if loaded > self._high_score:
            self._high_score = loaded
            self._publish(EventType.HIGH_SCORE_CHANGED, high_score=loaded)
        logger.info(f"High score loaded: {self._high_score}")
        return self._high_score

    # ----------------------------
    # Event wiring
    # ----------------------------

    def _publish(self, event_type: EventType, **data) -> None:
        self.event_bus.emit(Event(event_type, data=data, source="controller"))

    def _on_state_changed(self, old: GameState, new: GameState) -> None:
        self._publish(EventType.STATE_CHANGED, old=old.name, new=new.name)

    def _on_tap(self, event: Event) -> None:
        self.tap()

    def _on_start(self, event: Event) -> None:
        self.start(*self._event_size(event))

    def _on_restart(self, event: Event) -> None:
        self.restart(*self._event_size(event))

    def _on_resize(self, event: Event) -> None:
        self.request_resize(event.data["width"], event.data["height"])

    def _event_size(self, event: Event) -> tuple[float, float]:
        world = self.engine.world
        return (
            event.data.get("width", world.width),
            event.data.get("height", world.height),
        )

    def close(self) -> None:
        """Detach from the event bus and state machine."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.state_machine.remove_listener(self._on_state_changed)
