"""House rules for the table."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config import TableConfig


@dataclass(frozen=True)
class HouseRules:
    """
    Blackjack table rules configuration.

    The defaults describe the standard table: an 8-deck shoe
    reshuffled below 2 decks, a minimum bet of 10, computer bets capped at a
    twentieth of the bankroll, dealer stands on any 17.
    """

    # Shoe
    num_decks: int = 8
    reshuffle_below_decks: int = 2

    # Betting limits
    min_bet: int = 10
    bet_cap_divisor: int = 20  # Computer bets never exceed bankroll // divisor

    # Dealer rules
    dealer_stands_on: int = 17
    dealer_peeks: bool = False  # Check the hole card for blackjack before seats act

    # Payouts, as profit per unit staked
    blackjack_payout: float = 1.5
    insurance_payout: int = 2

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        if not 0 <= self.reshuffle_below_decks < self.num_decks:
            raise ValueError("reshuffle_below_decks must be below num_decks")
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")
        if self.bet_cap_divisor < 1:
            raise ValueError("bet_cap_divisor must be at least 1")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")

    @classmethod
    def from_config(cls, table: "TableConfig") -> "HouseRules":
        """Build rules from the table section of the app configuration."""
        return cls(num_decks=table.num_decks, min_bet=table.min_bet)
