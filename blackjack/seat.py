"""Seats at the table: players, human or computer, and the dealer."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from blackjack.cards import Card
from blackjack.errors import PlayerLeftTable
from blackjack.hand import Hand
from blackjack.strategy.betting import BetEngine, Outcome
from blackjack.strategy.play import Action, SkillTier

logger = logging.getLogger(__name__)


class HumanInput(Protocol):
    """
    Collects decisions for a human seat.

    Each call blocks until the person answers. Returning None means they
    refused to answer and are leaving the table.
    """

    def ask_bet(self, seat: "Seat", minimum: int, maximum: int) -> int | None:
        ...

    def ask_insurance(self, seat: "Seat", maximum: int) -> int | None:
        ...

    def ask_action(
        self, seat: "Seat", dealer_up_card: Card, allowed: frozenset[Action]
    ) -> Action | None:
        ...


@dataclass
class Seat:
    """
    A player's place at the table.

    Exactly one of ``tier`` (computer) or ``human_input`` (human) is set.
    The bankroll may go negative: computer seats keep betting on credit.
    """

    name: str
    bankroll: int
    tier: SkillTier | None = None
    human_input: HumanInput | None = field(default=None, repr=False)
    bet_engine: BetEngine = field(default_factory=BetEngine, repr=False)

    # Per round
    bet: int = 0
    insurance: int = 0
    hand: Hand = field(default_factory=Hand)
    surrendered: bool = False

    # Bet sizing memory for computer seats
    previous_bet: int = 0
    previous_outcome: Outcome | None = None

    def __post_init__(self) -> None:
        if (self.tier is None) == (self.human_input is None):
            raise ValueError("A seat needs exactly one of a skill tier or a human input")

    @classmethod
    def human(
        cls,
        name: str,
        bankroll: int,
        human_input: HumanInput,
        bet_engine: BetEngine | None = None,
    ) -> "Seat":
        """Create a seat whose decisions come from a person."""
        return cls(
            name=name,
            bankroll=bankroll,
            human_input=human_input,
            bet_engine=bet_engine or BetEngine(),
        )

    @classmethod
    def computer(
        cls,
        name: str,
        bankroll: int,
        tier: SkillTier,
        bet_engine: BetEngine | None = None,
    ) -> "Seat":
        """Create a computer-controlled seat."""
        return cls(
            name=name,
            bankroll=bankroll,
            tier=tier,
            bet_engine=bet_engine or BetEngine(),
        )

    @property
    def is_human(self) -> bool:
        return self.human_input is not None

    def start_hand(self, first: Card, second: Card) -> None:
        """Take the two starting cards."""
        self.hand = Hand.of(first, second)
        self.surrendered = False

    def clear_hand(self) -> list[Card]:
        """Give up every card held, for return to the shoe."""
        return self.hand.clear()

    def request_bet(self, true_count: int) -> int:
        """
        Place this round's bet and take it from the bankroll.

        Computer seats size the bet themselves. Human seats are asked, and
        their answer is validated.

        Raises:
            InvalidWager: The human's amount is out of bounds
            PlayerLeftTable: The human refused to answer
        """
        if self.human_input is not None:
            amount = self.human_input.ask_bet(self, self.bet_engine.minimum, self.bankroll)
            if amount is None:
                raise PlayerLeftTable(self.name)
            self.bet_engine.validate_bet(amount, self.bankroll)
        else:
            amount = self.bet_engine.computer_bet(
                self.tier,
                self.previous_bet,
                self.previous_outcome,
                true_count,
                self.bankroll,
            )
            self.previous_bet = amount

        self.bankroll -= amount
        self.bet = amount
        logger.debug("%s bets %d (bankroll %d)", self.name, amount, self.bankroll)
        return amount

    def request_insurance(self, true_count: int) -> int:
        """
        Place an insurance stake (possibly 0) and take it from the bankroll.

        Raises:
            InvalidWager: The human's amount is out of bounds
            PlayerLeftTable: The human refused to answer
        """
        if self.human_input is not None:
            maximum = self.bet_engine.insurance_limit(self.bet, self.bankroll)
            amount = self.human_input.ask_insurance(self, maximum)
            if amount is None:
                raise PlayerLeftTable(self.name)
            self.bet_engine.validate_insurance(amount, self.bet, self.bankroll)
        else:
            amount = self.bet_engine.computer_insurance(self.tier, true_count, self.bet)

        self.bankroll -= amount
        self.insurance = amount
        return amount

    def can_double(self) -> bool:
        """Check if doubling is allowed now."""
        if len(self.hand) != 2:
            return False
        # Computer seats may double on credit
        return not self.is_human or self.bankroll >= self.bet

    def double_down(self) -> None:
        """Double the bet, taking the extra stake from the bankroll."""
        self.bankroll -= self.bet
        self.bet *= 2

    def surrender(self) -> list[Card]:
        """
        Give up the hand for half the bet back.

        Returns:
            The surrendered cards, for return to the shoe
        """
        cards = self.clear_hand()
        self.surrendered = True
        self.add_winnings(self.bet // 2)
        return cards

    def add_winnings(self, amount: int) -> None:
        """Credit a settlement and remember how the round went."""
        self.bankroll += amount
        if amount > self.bet:
            self.previous_outcome = Outcome.WIN
        elif amount == self.bet:
            self.previous_outcome = Outcome.PUSH
        else:
            self.previous_outcome = Outcome.LOSS

    def collect_insurance(self, amount: int) -> None:
        """Credit an insurance payout without touching the bet memory."""
        self.bankroll += amount

    def end_round(self) -> None:
        """Reset per-round stakes."""
        self.bet = 0
        self.insurance = 0
        self.surrendered = False

    def allowed_actions(self) -> frozenset[Action]:
        """Actions a human may choose on their current hand."""
        actions = {Action.HIT, Action.STAND}
        if len(self.hand) == 2:
            actions.add(Action.SURRENDER)
            if self.can_double():
                actions.add(Action.DOUBLE)
        return frozenset(actions)

    def __str__(self) -> str:
        kind = "Human" if self.is_human else f"{self.tier} computer"
        return f"{self.name} ({kind}, bankroll {self.bankroll})"


@dataclass
class Dealer:
    """The dealer's hand, played by a fixed rule."""

    hand: Hand = field(default_factory=Hand)
    stands_on: int = 17

    def start_hand(self, first: Card, second: Card) -> None:
        """Take the starting cards, the second one face down."""
        self.hand = Hand.of(first, second.turned(False))

    def flip_second(self) -> None:
        """Turn the hole card over."""
        self.hand.flip_second()

    def reveal(self) -> None:
        """Make sure the hole card is face up."""
        if len(self.hand) >= 2 and not self.hand[1].face_up:
            self.flip_second()

    @property
    def up_card(self) -> Card:
        card = self.hand.up_card
        if card is None:
            raise ValueError("Dealer has no cards")
        return card

    @property
    def shows_ace(self) -> bool:
        return self.hand.up_card is not None and self.hand.up_card.is_ace

    @property
    def should_hit(self) -> bool:
        """Dealer draws below the standing total, soft or hard alike."""
        return self.hand.best_value < self.stands_on

    def clear_hand(self) -> list[Card]:
        return self.hand.clear()
