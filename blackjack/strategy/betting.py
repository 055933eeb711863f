"""Wager sizing for computer seats and validation of human wagers."""

import logging
from enum import Enum
from random import Random

from blackjack.errors import InvalidWager
from blackjack.strategy.play import SkillTier
from blackjack.strategy.rules import HouseRules

logger = logging.getLogger(__name__)

# True count at which a HARD seat insures
HARD_INSURANCE_COUNT = 3


class Outcome(Enum):
    """Result of a seat's last round, remembered for bet sizing."""

    WIN = 1
    PUSH = 0
    LOSS = -1


class BetEngine:
    """
    Sizes bets and insurance for computer seats.

    EASY seats random-walk their bet on the last outcome; HARD seats spread
    their bet with the true count. Either result is capped at a fraction of
    the bankroll and then floored at the table minimum.
    """

    def __init__(self, rules: HouseRules | None = None, rng: Random | None = None) -> None:
        self.rules = rules or HouseRules()
        self._rng = rng or Random()

    @property
    def minimum(self) -> int:
        return self.rules.min_bet

    def computer_bet(
        self,
        tier: SkillTier,
        previous_bet: int,
        previous_outcome: Outcome | None,
        true_count: int,
        bankroll: int,
    ) -> int:
        """
        Size a computer seat's next bet.

        Args:
            tier: The seat's skill tier
            previous_bet: The seat's last bet (0 before its first round)
            previous_outcome: Result of the last round, None before the first
            true_count: Current true count of the shoe
            bankroll: The seat's bankroll before betting

        Returns:
            The bet, never below the table minimum
        """
        if tier == SkillTier.EASY:
            bet = previous_bet
            step = self.minimum * self._rng.randint(0, 2)
            if previous_outcome == Outcome.LOSS:
                bet -= step
            elif previous_outcome == Outcome.WIN:
                bet += step
        else:
            bet = self.minimum * true_count

        return self.clamp(bet, bankroll)

    def clamp(self, bet: int, bankroll: int) -> int:
        """Cap a bet at the bankroll share, then raise it to the minimum."""
        cap = bankroll // self.rules.bet_cap_divisor
        if bet > cap:
            bet = cap
        if bet < self.minimum:
            bet = self.minimum
        return bet

    def computer_insurance(self, tier: SkillTier, true_count: int, bet: int) -> int:
        """Return the insurance a computer seat takes: half its bet, or nothing."""
        if tier == SkillTier.EASY:
            takes = self._rng.randrange(4) == 0
        else:
            takes = true_count >= HARD_INSURANCE_COUNT
        return bet // 2 if takes else 0

    def validate_bet(self, amount: int, bankroll: int) -> int:
        """Check a human bet lies between the minimum and the bankroll."""
        if amount < self.minimum or amount > bankroll:
            logger.warning(
                "Rejected bet of %d (minimum %d, bankroll %d)",
                amount, self.minimum, bankroll,
            )
            raise InvalidWager(amount, self.minimum, bankroll)
        return amount

    def validate_insurance(self, amount: int, bet: int, bankroll: int | None = None) -> int:
        """
        Check a human insurance stake is at most half the bet.

        The stake is paid from what is left after the bet, so the bankroll
        caps it too (never below 0).
        """
        maximum = self.insurance_limit(bet, bankroll)
        if amount < 0 or amount > maximum:
            logger.warning("Rejected insurance of %d (maximum %d)", amount, maximum)
            raise InvalidWager(amount, 0, maximum, kind="insurance")
        return amount

    @staticmethod
    def insurance_limit(bet: int, bankroll: int | None = None) -> int:
        """Largest insurance a seat may stake on a bet."""
        maximum = bet // 2
        if bankroll is not None:
            maximum = max(0, min(bankroll, maximum))
        return maximum
