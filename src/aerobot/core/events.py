"""
Event bus system for Aerobot Descent.

Provides pub/sub messaging between the window, the game controller and
anything else that wants to observe the game.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
import logging
import time
from collections import defaultdict

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Input events
    TAP = auto()  # Direction toggle
    START = auto()
    RESTART = auto()
    RESIZE = auto()

    # Game events
    STATE_CHANGED = auto()
    SCORE_CHANGED = auto()
    ITEM_COLLECTED = auto()
    GAME_OVER = auto()
    HIGH_SCORE_CHANGED = auto()

    # System events
    TICK = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type
        data: Event payload
        source: Component that emitted the event
        timestamp: When event was created
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.monotonic)


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    Handlers run synchronously in subscription order; a failing handler
    is logged and does not stop the others.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Emit an event immediately to every handler."""
        for handler in list(self._handlers.get(event.type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type.name}: {e}")


# Convenience functions for creating common events
def tap_event(source: str = "input") -> Event:
    """Create a direction toggle event."""
    return Event(EventType.TAP, source=source)


def resize_event(width: int, height: int, source: str = "window") -> Event:
    """Create a play-area resize event."""
    return Event(EventType.RESIZE, data={"width": width, "height": height}, source=source)
