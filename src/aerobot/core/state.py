"""
State machine for the game lifecycle.

States:
    START: Title screen, waiting for the first start command
    PLAYING: Simulation running
    GAME_OVER: Run ended by a wall or obstacle collision
"""

from enum import Enum
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Game lifecycle states."""
    START = "START"
    PLAYING = "PLAYING"
    GAME_OVER = "GAME_OVER"


StateListener = Callable[[GameState, GameState], None]


class StateMachine:
    """
    Holds the single current GameState and guards transitions.

    Invalid transitions are rejected (logged and reported as False),
    never raised, so a stray command can not corrupt the lifecycle.
    """

    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        (GameState.START, GameState.PLAYING),
        (GameState.PLAYING, GameState.GAME_OVER),
        (GameState.GAME_OVER, GameState.PLAYING),
    ]

    def __init__(self, initial_state: GameState = GameState.START) -> None:
        self._state = initial_state
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state

        logger.info(f"State transition: {old_state.name} -> {to_state.name}")

        for listener in list(self._listeners):
            try:
                listener(old_state, to_state)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
