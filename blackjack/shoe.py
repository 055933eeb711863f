"""Multi-deck shoe with a running Hi-Lo count."""

import logging
import math
from collections import deque
from random import Random
from typing import Iterable, Iterator

from blackjack.cards import Card, standard_deck
from blackjack.counting import CountingSystem, HiLoSystem
from blackjack.errors import EmptyShoe

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52


class Shoe:
    """
    A multi-deck shoe for blackjack.

    Cards are dealt from the front and returned to the back. Every dealt card
    is counted; the count and the undealt total restart on each shuffle.
    """

    def __init__(
        self,
        num_decks: int = 8,
        reshuffle_below_decks: int = 2,
        rng: Random | None = None,
        counter: CountingSystem | None = None,
    ) -> None:
        """
        Initialize and shuffle a shoe.

        Args:
            num_decks: Number of decks in the shoe
            reshuffle_below_decks: Reshuffle once fewer undealt decks than this remain
            rng: Random number generator for shuffling
            counter: Counting system fed with every dealt card (Hi-Lo by default)
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")
        if not 0 <= reshuffle_below_decks < num_decks:
            raise ValueError("reshuffle_below_decks must be between 0 and num_decks - 1")

        self._num_decks = num_decks
        self._reshuffle_at = reshuffle_below_decks * CARDS_PER_DECK
        self._rng = rng or Random()
        self._counter = counter or HiLoSystem()
        self._cards: deque[Card] = deque()
        self._undealt = 0
        self._in_play = 0
        self._shuffles = 0
        self.shuffle()

    def shuffle(self) -> None:
        """Rebuild the full shoe in a new random order and reset the count."""
        if self._in_play:
            raise ValueError(f"Cannot shuffle while {self._in_play} cards are in play")

        cards = [card for _ in range(self._num_decks) for card in standard_deck()]
        self._rng.shuffle(cards)
        self._cards = deque(cards)
        self._undealt = len(cards)
        self._counter.reset()
        self._shuffles += 1
        logger.info("Shoe shuffled: %d decks, %d cards", self._num_decks, len(cards))

    def draw(self) -> Card:
        """Deal the front card of the shoe."""
        if not self._cards:
            raise EmptyShoe()
        card = self._cards.popleft()
        self._undealt = max(self._undealt - 1, 0)
        self._in_play += 1
        self._counter.count_card(card)
        logger.debug("Drew %s, running count %d", card, self._counter.running_count)
        return card

    def return_to_bottom(self, card: Card) -> None:
        """
        Put a card back at the bottom of the shoe.

        Once fewer than the reshuffle threshold of undealt cards remain and
        every dealt card is back, the shoe reshuffles.
        """
        if not self._in_play:
            raise ValueError(f"{card!r} was not dealt from this shoe")
        self._cards.append(card.turned(True))
        self._in_play -= 1

        if self._undealt < self._reshuffle_at and not self._in_play:
            logger.info(
                "Only %d undealt cards left, reshuffling", self._undealt
            )
            self.shuffle()

    def return_all(self, cards: Iterable[Card]) -> None:
        """Return several cards to the bottom, in order."""
        for card in cards:
            self.return_to_bottom(card)

    def true_count(self) -> int:
        """
        Return the running count per deck remaining, rounded half up.

        At least one card is always assumed to remain.
        """
        decks_remaining = max(self._undealt, 1) / CARDS_PER_DECK
        return math.floor(self._counter.running_count / decks_remaining + 0.5)

    @property
    def running_count(self) -> int:
        """Return the running count since the last shuffle."""
        return self._counter.running_count

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards not yet dealt since the last shuffle."""
        return self._undealt

    @property
    def cards_in_play(self) -> int:
        """Return the number of dealt cards not yet returned."""
        return self._in_play

    @property
    def decks_remaining(self) -> float:
        """Return the number of undealt decks."""
        return self._undealt / CARDS_PER_DECK

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self._num_decks * CARDS_PER_DECK

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks

    @property
    def shuffle_count(self) -> int:
        """Return how many times the shoe has been shuffled."""
        return self._shuffles

    @property
    def counter(self) -> CountingSystem:
        return self._counter

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
