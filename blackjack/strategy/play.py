"""Action selection for computer-controlled seats."""

import logging
from enum import Enum, auto
from random import Random

from blackjack.cards import Card
from blackjack.hand import Hand

logger = logging.getLogger(__name__)

# Chance an EASY seat doubles a two-card 10 or 11
EASY_DOUBLE_CHANCE = 4 / 13


class Action(Enum):
    """Possible seat actions. Splitting is not offered."""

    STAND = auto()
    HIT = auto()
    SURRENDER = auto()
    DOUBLE = auto()

    def __str__(self) -> str:
        return self.name.title()


class SkillTier(Enum):
    """Computer player difficulty."""

    EASY = auto()
    HARD = auto()

    def __str__(self) -> str:
        return self.name.title()


def easy_hit_chance(value: int) -> float:
    """
    Probability an EASY seat hits on a total above 11.

    Falls smoothly from certain at 12 to never well before 21.
    """
    success = 1 - (value - 8) / 13
    return min(max((success + 0.6) ** 2 - 0.6, 0.0), 1.0)


class StrategyEngine:
    """
    Chooses actions for computer seats.

    EASY plays a loose probabilistic heuristic. HARD approximates basic
    strategy with a table keyed on the dealer's up card (Ace counted as 11).
    Neither tier ever surrenders.
    """

    def __init__(self, rng: Random | None = None) -> None:
        self._rng = rng or Random()

    def decide(self, hand: Hand, dealer_up_card: Card, tier: SkillTier) -> Action:
        """
        Pick the next action for a computer seat.

        Args:
            hand: The seat's current hand
            dealer_up_card: The dealer's visible card
            tier: The seat's skill tier

        Returns:
            STAND, HIT or DOUBLE
        """
        if hand.is_blackjack or hand.is_busted:
            return Action.STAND

        if tier == SkillTier.EASY:
            action = self._decide_easy(hand)
        else:
            action = self._decide_hard(hand, dealer_up_card)

        logger.debug(
            "%s tier with %s against %s: %s", tier, hand, dealer_up_card, action
        )
        return action

    def _decide_easy(self, hand: Hand) -> Action:
        value = hand.best_value

        if len(hand) == 2 and value in (10, 11):
            if self._rng.random() < EASY_DOUBLE_CHANCE:
                return Action.DOUBLE
        if value <= 11:
            return Action.HIT

        if self._rng.random() < easy_hit_chance(value):
            return Action.HIT
        return Action.STAND

    def _decide_hard(self, hand: Hand, dealer_up_card: Card) -> Action:
        value = hand.best_value
        dealer = dealer_up_card.high_value

        if len(hand) == 2:
            if (value == 10 and dealer <= 9) or (value == 11 and dealer <= 10):
                return Action.DOUBLE

        if dealer >= 7:
            return Action.STAND if value >= 17 else Action.HIT
        return Action.STAND if value > 11 else Action.HIT
