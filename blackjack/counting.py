"""Card counting systems used by the shoe."""

from abc import ABC, abstractmethod
from typing import Mapping

from blackjack.cards import Card, Rank


class CountingSystem(ABC):
    """
    Abstract base class for card counting systems.

    Tracks a running count over every card seen since the last reset.
    """

    def __init__(self) -> None:
        """Initialize the counting system."""
        self._running_count: int = 0
        self._cards_seen: int = 0

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the counting system."""
        ...

    @property
    @abstractmethod
    def tag_values(self) -> Mapping[Rank, int]:
        """Return the count value of each rank."""
        ...

    @property
    def full_deck_sum(self) -> int:
        """Sum of tag values over one 52-card deck (0 for balanced systems)."""
        return sum(self.tag_values[rank] * 4 for rank in Rank)

    def count_card(self, card: Card) -> int:
        """
        Count a single card and update the running count.

        Args:
            card: The card to count

        Returns:
            The tag value of the card
        """
        tag_value = self.tag_values[card.rank]
        self._running_count += tag_value
        self._cards_seen += 1
        return tag_value

    @property
    def running_count(self) -> int:
        """Return the current running count."""
        return self._running_count

    @property
    def cards_seen(self) -> int:
        """Return the number of cards seen."""
        return self._cards_seen

    def reset(self) -> None:
        """Reset the count to zero."""
        self._running_count = 0
        self._cards_seen = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(running_count={self._running_count})"


class HiLoSystem(CountingSystem):
    """
    Hi-Lo counting system.

    Tag values:
        2-6: +1 (low cards)
        7-9: 0  (neutral)
        10-A: -1 (high cards)
    """

    _TAG_VALUES: Mapping[Rank, int] = {
        Rank.TWO: 1,
        Rank.THREE: 1,
        Rank.FOUR: 1,
        Rank.FIVE: 1,
        Rank.SIX: 1,
        Rank.SEVEN: 0,
        Rank.EIGHT: 0,
        Rank.NINE: 0,
        Rank.TEN: -1,
        Rank.JACK: -1,
        Rank.QUEEN: -1,
        Rank.KING: -1,
        Rank.ACE: -1,
    }

    @property
    def name(self) -> str:
        return "Hi-Lo"

    @property
    def tag_values(self) -> Mapping[Rank, int]:
        return self._TAG_VALUES
