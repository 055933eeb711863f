"""Blackjack table engine - UI-agnostic game logic."""

from blackjack.cards import Card, Rank, Suit
from blackjack.errors import BlackjackError, EmptyShoe, InvalidWager, PlayerLeftTable
from blackjack.hand import Hand
from blackjack.seat import Dealer, HumanInput, Seat
from blackjack.settlement import HandResult, RoundSettlement
from blackjack.shoe import Shoe

__all__ = [
    "BlackjackError",
    "Card",
    "Dealer",
    "EmptyShoe",
    "Hand",
    "HandResult",
    "HumanInput",
    "InvalidWager",
    "PlayerLeftTable",
    "Rank",
    "RoundSettlement",
    "Seat",
    "Shoe",
    "Suit",
]
