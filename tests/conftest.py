"""Pytest fixtures for blackjack table tests."""

from random import Random

import pytest

from blackjack.cards import Card
from blackjack.hand import Hand
from blackjack.counting import HiLoSystem
from blackjack.seat import Seat
from blackjack.shoe import Shoe
from blackjack.strategy import Action, BetEngine, HouseRules, SkillTier, StrategyEngine
from blackjack.settlement import RoundSettlement


def make_hand(*cards: str) -> Hand:
    """Build a hand from short card strings like 'AS', '10H'."""
    return Hand([Card.from_string(c) for c in cards])


def stack(shoe: Shoe, *cards: str) -> Shoe:
    """Move the given cards to the front of the shoe, in order."""
    picked = [Card.from_string(c) for c in cards]
    for card in picked:
        shoe._cards.remove(card)
    shoe._cards.extendleft(reversed(picked))
    return shoe


class FixedRandom(Random):
    """Random source that always returns the same numbers."""

    def __init__(self, value: float = 0.0, integer: int = 0) -> None:
        super().__init__(0)
        self.value = value
        self.integer = integer

    def random(self) -> float:
        return self.value

    def randint(self, a: int, b: int) -> int:
        return self.integer

    def randrange(self, *args, **kwargs) -> int:
        return self.integer


class ScriptedInput:
    """
    Human input that replays canned answers.

    Bets default to the table minimum, insurance to 0, actions to STAND.
    """

    def __init__(self, bets=(), insurance=(), actions=()) -> None:
        self.bets = list(bets)
        self.insurance = list(insurance)
        self.actions = list(actions)
        self.bet_prompts: list[tuple[int, int]] = []
        self.insurance_prompts: list[int] = []
        self.action_prompts: list[frozenset[Action]] = []

    def ask_bet(self, seat, minimum, maximum):
        self.bet_prompts.append((minimum, maximum))
        return self.bets.pop(0) if self.bets else minimum

    def ask_insurance(self, seat, maximum):
        self.insurance_prompts.append(maximum)
        return self.insurance.pop(0) if self.insurance else 0

    def ask_action(self, seat, dealer_up_card, allowed):
        self.action_prompts.append(allowed)
        return self.actions.pop(0) if self.actions else Action.STAND


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def fixed_rng():
    """Factory for random sources with pinned results."""
    return FixedRandom


@pytest.fixture
def shoe(rng):
    """A shuffled 8-deck shoe."""
    return Shoe(num_decks=8, rng=rng)


@pytest.fixture
def stacked_shoe(rng):
    """Factory for a shoe (8 decks unless told otherwise) whose first cards are fixed."""

    def make(*cards: str, num_decks: int = 8, reshuffle_below_decks: int = 2) -> Shoe:
        shoe = Shoe(num_decks=num_decks, reshuffle_below_decks=reshuffle_below_decks, rng=rng)
        return stack(shoe, *cards)

    return make


@pytest.fixture
def hand():
    """Factory for hands from card strings."""
    return make_hand


@pytest.fixture
def scripted_input():
    """Factory for scripted human input."""
    return ScriptedInput


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HiLoSystem()


@pytest.fixture
def rules():
    """Default house rules."""
    return HouseRules()


@pytest.fixture
def bet_engine(rules, rng):
    """Bet engine for default rules."""
    return BetEngine(rules, rng)


@pytest.fixture
def strategy(rng):
    """Strategy engine with a seeded random source."""
    return StrategyEngine(rng)


@pytest.fixture
def settlement(rules):
    """Settlement for default rules."""
    return RoundSettlement(rules)


@pytest.fixture
def hard_bot(bet_engine):
    """A HARD computer seat with 1000."""
    return Seat.computer("Bot", 1000, SkillTier.HARD, bet_engine)

