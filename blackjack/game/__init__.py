"""Round driver and state management."""

from blackjack.game.events import GameEvent, EventType
from blackjack.game.state import RoundPhase
from blackjack.game.table import Table, RoundSummary

__all__ = [
    "GameEvent",
    "EventType",
    "RoundPhase",
    "Table",
    "RoundSummary",
]
