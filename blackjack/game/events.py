"""What the table reports to its controller."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Kinds of table events."""

    # Round boundaries
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()
    PLAYER_LEFT = auto()

    # Wagers and answers
    BET_PLACED = auto()
    INVALID_WAGER = auto()
    INVALID_ACTION = auto()

    # Shoe
    CARD_DEALT = auto()
    SHOE_SHUFFLED = auto()

    # Insurance
    INSURANCE_OFFERED = auto()
    INSURANCE_TAKEN = auto()
    INSURANCE_DECLINED = auto()
    INSURANCE_WINS = auto()
    INSURANCE_LOSES = auto()

    # Seat turns
    SEAT_HIT = auto()
    SEAT_STAND = auto()
    SEAT_DOUBLE = auto()
    SEAT_SURRENDER = auto()
    SEAT_BUSTS = auto()
    SEAT_BLACKJACK = auto()

    # Dealer turn
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()
    DEALER_BLACKJACK = auto()

    # Settlement
    SEAT_WINS = auto()
    SEAT_LOSES = auto()
    PUSH = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    One thing that happened at the table.

    ``data`` holds plain values only (names, amounts, card strings), so a
    controller can log or serialise events without touching engine objects.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    round_number: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[round {self.round_number}] {self.event_type.name}: {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Fans table events out to subscribers and keeps a history.

    Handlers subscribed to a type run before catch-all handlers (subscribed
    with ``None``). Handler errors propagate to the table.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._event_history: list[GameEvent] = []
        self._round_number = 0

    @property
    def round_number(self) -> int:
        """Number of the round in progress (0 before the first)."""
        return self._round_number

    def start_round(self) -> int:
        """Stamp later events with the next round number."""
        self._round_number += 1
        return self._round_number

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """
        Register a handler.

        Args:
            handler: Called with each matching event
            event_type: Only deliver this type, or None for everything
        """
        self._handlers[event_type].append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        if handler in self._handlers.get(event_type, ()):
            self._handlers[event_type].remove(handler)

    def emit(self, event: GameEvent) -> None:
        self._event_history.append(event)
        for handler in [*self._handlers.get(event.event_type, ()), *self._handlers.get(None, ())]:
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event for the current round and emit it."""
        event = GameEvent(event_type, data, round_number=self._round_number)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Copy of every event emitted so far."""
        return list(self._event_history)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        return [event for event in self._event_history if event.event_type == event_type]

    def for_seat(self, seat_name: str) -> list[GameEvent]:
        """Past events about one seat."""
        return [event for event in self._event_history if event.data.get("seat") == seat_name]

    def clear_history(self) -> None:
        self._event_history.clear()
