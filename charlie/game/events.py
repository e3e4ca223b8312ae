"""Game events for the event system."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of game events."""

    # Round flow events
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()
    GAME_RESET = auto()
    NEW_ROUND = auto()

    # Betting events
    WAGER_CHANGED = auto()
    BET_PLACED = auto()

    # Card events
    DECK_SHUFFLED = auto()
    CARD_DEALT = auto()

    # Player events
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_BUSTS = auto()
    PLAYER_CHARLIE = auto()

    # Dealer events
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()
    DEALER_CHARLIE = auto()

    # Natural events
    PLAYER_BLACKJACK = auto()
    DEALER_BLACKJACK = auto()

    # Auto-play events
    AUTOPLAY_ENGAGED = auto()
    AUTOPLAY_DISENGAGED = auto()

    # Error events
    INVALID_ACTION = auto()
    INSUFFICIENT_FUNDS = auto()
    DECK_EXHAUSTED = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the primary communication mechanism between the engine and
    whatever shell renders it.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Simple event emitter for game events.

    Allows subscribing to specific event types or all events. History is
    bounded so a long auto-play session does not grow without limit.
    """

    def __init__(self, history_size: int = 500) -> None:
        """Initialize the event emitter."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: deque[GameEvent] = deque(maxlen=history_size)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Record an event and pass it to every matching subscriber."""
        self._event_history.append(event)

        for handler in list(self._handlers.get(event.event_type, [])):
            handler(event)

        # Catch-all handlers
        for handler in list(self._handlers.get(None, [])):
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return list(self._event_history)

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
