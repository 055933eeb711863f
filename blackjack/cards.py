"""Card, Suit and Rank - immutable card representations."""

from dataclasses import dataclass, field, replace
from enum import Enum


class Suit(Enum):
    """Card suits, valued by their symbol."""

    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    @property
    def letter(self) -> str:
        """Single-letter shorthand: C, D, H or S."""
        return self.name[0]

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    """Card ranks, Ace through King."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def point_value(self) -> int:
        """Return the hard point value (Ace = 1, face cards = 10)."""
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank counts as ten."""
        return self.value >= 10


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    ``face_up`` is a display attribute only: it takes no part in equality,
    hashing or any point value.
    """

    rank: Rank
    suit: Suit
    face_up: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        if not self.face_up:
            return "??"
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        state = "" if self.face_up else ", face down"
        return f"Card({self.rank.name}, {self.suit.name}{state})"

    @property
    def value(self) -> int:
        """Return the point value with an Ace counted as 1."""
        return self.rank.point_value

    @property
    def high_value(self) -> int:
        """Return the point value with an Ace counted as 11."""
        if self.is_ace:
            return 11
        return self.value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    def turned(self, face_up: bool) -> "Card":
        """Return this card with the given face state."""
        if face_up == self.face_up:
            return self
        return replace(self, face_up=face_up)

    @classmethod
    def from_string(cls, text: str) -> "Card":
        """
        Parse short notation: rank then suit, as in 'AS', '10h', 'T♦' or 'K♥'.

        Raises:
            ValueError: The text is not a card
        """
        text = text.strip().upper()
        rank = _RANKS.get(text[:-1])
        suit = _SUITS.get(text[-1:])
        if rank is None or suit is None:
            raise ValueError(f"Invalid card string: {text!r}")
        return cls(rank, suit)


def standard_deck() -> list[Card]:
    """Return the 52 cards of one deck in suit-then-rank order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


_RANKS = {str(rank): rank for rank in Rank} | {"T": Rank.TEN}
_SUITS = {key: suit for suit in Suit for key in (suit.letter, suit.value)}
