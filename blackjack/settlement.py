"""Payout resolution at the end of a round."""

import logging
from enum import Enum, auto

from blackjack.hand import Hand
from blackjack.seat import Seat
from blackjack.strategy.rules import HouseRules

logger = logging.getLogger(__name__)


class HandResult(Enum):
    """How a seat's hand was settled against the dealer."""

    SURRENDERED = auto()
    BLACKJACK_PUSH = auto()
    BLACKJACK = auto()
    DEALER_BLACKJACK = auto()
    BUST = auto()
    DEALER_BUST = auto()
    WIN = auto()
    PUSH = auto()
    LOSS = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class RoundSettlement:
    """
    Resolves seats' hands against the dealer's finished hand.

    Payouts are gross: they include the returned stake, since stakes leave
    the bankroll when placed. A busted seat loses even when the dealer busts
    too.
    """

    def __init__(self, rules: HouseRules | None = None) -> None:
        self.rules = rules or HouseRules()

    def classify(self, seat_hand: Hand, dealer_hand: Hand) -> HandResult:
        """
        Decide which settlement rule applies, in priority order.

        An empty seat hand means the seat surrendered before the showdown.
        """
        if not seat_hand.cards:
            return HandResult.SURRENDERED

        seat_bj = seat_hand.is_blackjack
        dealer_bj = dealer_hand.is_blackjack
        if seat_bj and dealer_bj:
            return HandResult.BLACKJACK_PUSH
        if seat_bj:
            return HandResult.BLACKJACK
        if dealer_bj:
            return HandResult.DEALER_BLACKJACK

        if seat_hand.is_busted:
            return HandResult.BUST
        if dealer_hand.is_busted:
            return HandResult.DEALER_BUST

        seat_value = seat_hand.best_value
        dealer_value = dealer_hand.best_value
        if seat_value > dealer_value:
            return HandResult.WIN
        if seat_value == dealer_value:
            return HandResult.PUSH
        return HandResult.LOSS

    def payout(self, result: HandResult, bet: int) -> int:
        """Return the gross amount paid back for a result."""
        if result == HandResult.BLACKJACK:
            return bet + int(bet * self.rules.blackjack_payout)
        if result in (HandResult.DEALER_BUST, HandResult.WIN):
            return bet * 2
        if result in (HandResult.BLACKJACK_PUSH, HandResult.PUSH):
            return bet
        return 0

    def resolve(self, seat_hand: Hand, dealer_hand: Hand, bet: int) -> int:
        """
        Compute a seat's payout.

        Args:
            seat_hand: The seat's final hand
            dealer_hand: The dealer's completed hand
            bet: The stake at risk

        Returns:
            The gross payout (0 for a loss)
        """
        return self.payout(self.classify(seat_hand, dealer_hand), bet)

    def resolve_insurance(self, stake: int, dealer_hand: Hand) -> int:
        """Return the insurance payout: stake plus 2:1 if the dealer has blackjack."""
        if stake and dealer_hand.is_blackjack:
            return stake * (1 + self.rules.insurance_payout)
        return 0

    def settle(self, seat: Seat, dealer_hand: Hand) -> HandResult:
        """Pay a seat its winnings. Surrendered seats were paid already."""
        if seat.surrendered:
            return HandResult.SURRENDERED

        result = self.classify(seat.hand, dealer_hand)
        amount = self.payout(result, seat.bet)
        seat.add_winnings(amount)
        logger.info("%s: %s, paid %d on %d", seat.name, result, amount, seat.bet)
        return result

    def settle_insurance(self, seat: Seat, dealer_hand: Hand) -> int:
        """Pay out a seat's insurance stake, if any. Returns the amount paid."""
        amount = self.resolve_insurance(seat.insurance, dealer_hand)
        if amount:
            seat.collect_insurance(amount)
        return amount
