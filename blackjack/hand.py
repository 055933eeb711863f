"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterator

from blackjack.cards import Card


@dataclass
class Hand:
    """A blackjack hand owned by one seat or the dealer."""

    cards: list[Card] = field(default_factory=list)

    @classmethod
    def of(cls, first: Card, second: Card) -> "Hand":
        """Create a hand from two starting cards."""
        return cls([first, second])

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> list[Card]:
        """Remove all cards from the hand and return them."""
        removed = list(self.cards)
        self.cards.clear()
        return removed

    def flip_second(self) -> None:
        """Turn the second card over (the dealer's hole card)."""
        if len(self.cards) >= 2:
            self.cards[1] = self.cards[1].turned(not self.cards[1].face_up)

    def _evaluate(self) -> tuple[int, int]:
        """
        Find the best total and how many Aces it counts as 11.

        Each Ace is promoted from 1 to 11 independently; the highest total
        not over 21 wins, falling back to the all-hard total.
        """
        base = sum(card.value for card in self.cards)
        aces = sum(1 for card in self.cards if card.is_ace)

        for promoted in range(aces, -1, -1):
            total = base + 10 * promoted
            if total <= 21:
                return total, promoted
        return base, 0

    @property
    def best_value(self) -> int:
        """Return the highest total not over 21, or the hard total if all bust."""
        return self._evaluate()[0]

    @property
    def hard_value(self) -> int:
        """Return the total with every Ace counted as 1."""
        return sum(card.value for card in self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the best total counts an Ace as 11.

        A natural blackjack reports as blackjack rather than soft 21.
        """
        return self._evaluate()[1] > 0 and not self.is_blackjack

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.best_value == 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.best_value > 21

    @property
    def up_card(self) -> Card | None:
        """Return the first card, the one the dealer shows."""
        return self.cards[0] if self.cards else None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __getitem__(self, index: int) -> Card:
        return self.cards[index]

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        if any(not card.face_up for card in self.cards):
            return cards_str
        value_str = f"({self.best_value})"
        if self.is_soft:
            value_str = f"(soft {self.best_value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.best_value})"
