"""Multi-seat round driver built on a phase state machine."""

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Callable, Iterable, NoReturn

from transitions import Machine, MachineError

from config import TableConfig, config
from blackjack.cards import Card
from blackjack.errors import EmptyShoe, InvalidWager, PlayerLeftTable
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.state import TRANSITIONS, RoundPhase
from blackjack.seat import Dealer, HumanInput, Seat
from blackjack.settlement import HandResult, RoundSettlement
from blackjack.shoe import Shoe
from blackjack.strategy.betting import BetEngine
from blackjack.strategy.play import Action, SkillTier, StrategyEngine
from blackjack.strategy.rules import HouseRules

logger = logging.getLogger(__name__)

_WINNING = (HandResult.BLACKJACK, HandResult.DEALER_BUST, HandResult.WIN)
_PUSHING = (HandResult.BLACKJACK_PUSH, HandResult.PUSH)


@dataclass
class RoundSummary:
    """What happened in one round."""

    true_count: int
    bets: dict[str, int] = field(default_factory=dict)
    insurance: dict[str, int] = field(default_factory=dict)
    insurance_paid: dict[str, int] = field(default_factory=dict)
    results: dict[str, HandResult] = field(default_factory=dict)
    bankrolls: dict[str, int] = field(default_factory=dict)
    dealer_value: int = 0
    dealer_blackjack: bool = False
    reshuffled: bool = False


class Table:
    """
    A blackjack table: one shoe, one dealer, any number of seats.

    Rounds advance through explicit phases. The controller calls the phase
    operations in order (or ``play_round`` for all of them); each one checks
    the current phase and raises ``MachineError`` when called out of turn.
    Human decisions come from each seat's ``HumanInput`` as blocking calls.
    """

    # State machine states
    STATES = [p.name.lower() for p in RoundPhase]

    def __init__(
        self,
        seats: Iterable[Seat],
        rules: HouseRules | None = None,
        rng: Random | None = None,
        shoe: Shoe | None = None,
        strategy: StrategyEngine | None = None,
    ) -> None:
        """
        Set up a table.

        Args:
            seats: Seats in playing order
            rules: House rules (defaults if not provided)
            rng: Random source for the shoe and computer play
            shoe: A prepared shoe (a new one is shuffled if not provided)
            strategy: Action chooser for computer seats
        """
        self.rules = rules or HouseRules()
        self._rng = rng or Random()
        self.seats = list(seats)
        if not self.seats:
            raise ValueError("A table needs at least one seat")
        names = [seat.name for seat in self.seats]
        if len(set(names)) != len(names):
            raise ValueError(f"Seat names must be unique: {names}")

        self.shoe = shoe or Shoe(
            num_decks=self.rules.num_decks,
            reshuffle_below_decks=self.rules.reshuffle_below_decks,
            rng=self._rng,
        )
        self.dealer = Dealer(stands_on=self.rules.dealer_stands_on)
        self.strategy = strategy or StrategyEngine(self._rng)
        self.settlement = RoundSettlement(self.rules)
        self.events = EventEmitter()
        self._round: RoundSummary | None = None

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @classmethod
    def standard(
        cls,
        human_input: HumanInput,
        table_config: TableConfig | None = None,
    ) -> "Table":
        """
        The classic line-up: you, one EASY computer and two HARD computers.
        """
        table_config = table_config or config.table
        rules = HouseRules.from_config(table_config)
        rng = Random(table_config.seed)
        bets = BetEngine(rules, rng)
        money = table_config.start_money
        seats = [
            Seat.human("Human - You", money, human_input, bets),
            Seat.computer("Simple Computer", money, SkillTier.EASY, bets),
            Seat.computer("Smart Computer 1", money, SkillTier.HARD, bets),
            Seat.computer("Smart Computer 2", money, SkillTier.HARD, bets),
        ]
        return cls(seats, rules=rules, rng=rng)

    @property
    def phase(self) -> RoundPhase:
        """Get current phase as enum."""
        return RoundPhase[self._machine_state.upper()]  # type: ignore

    @property
    def current_round(self) -> RoundSummary | None:
        return self._round

    def seat(self, name: str) -> Seat:
        """Look up a seat by name."""
        for seat in self.seats:
            if seat.name == name:
                return seat
        raise KeyError(name)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    def play_round(self) -> RoundSummary:
        """Run every phase of one round, from bets to cleared table."""
        self.collect_bets()
        self.deal()
        if self.phase == RoundPhase.INSURANCE:
            self.offer_insurance()
        if self.phase == RoundPhase.ACTION:
            self.play_seats()
            self.play_dealer()
        self.settle()
        return self.reset()

    def close(self) -> None:
        """Close the table for good."""
        self.close_table()

    # Phases

    def collect_bets(self) -> dict[str, int]:
        """
        Take a bet from every seat.

        Humans who cannot cover the minimum leave the table. Invalid human
        amounts are reported and asked for again.
        """
        self._require(RoundPhase.BETTING)
        true_count = self.shoe.true_count()
        self._round = RoundSummary(true_count=true_count)
        self.events.start_round()
        self.events.emit_new(EventType.ROUND_STARTED, true_count=true_count)

        for seat in self.seats:
            if seat.is_human and seat.bankroll < self.rules.min_bet:
                self._leave(PlayerLeftTable(seat.name, reason="bankrupt"))
            amount = self._ask_until_valid(seat, seat.request_bet, true_count)
            self._round.bets[seat.name] = amount
            self.events.emit_new(
                EventType.BET_PLACED,
                seat=seat.name,
                amount=amount,
                bankroll=seat.bankroll,
            )

        self.bets_placed()
        return dict(self._round.bets)

    def deal(self) -> RoundPhase:
        """
        Deal two cards to the dealer (hole card face down), then to each seat.

        Returns:
            The phase the round moved to
        """
        self._require(RoundPhase.DEALING)

        self.dealer.start_hand(self._draw(), self._draw())
        for card in self.dealer.hand:
            self.events.emit_new(EventType.CARD_DEALT, hand="dealer", card=str(card))

        for seat in self.seats:
            seat.start_hand(self._draw(), self._draw())
            for card in seat.hand:
                self.events.emit_new(EventType.CARD_DEALT, hand=seat.name, card=str(card))
            if seat.hand.is_blackjack:
                self.events.emit_new(EventType.SEAT_BLACKJACK, seat=seat.name)

        if self.dealer.shows_ace:
            self.events.emit_new(EventType.INSURANCE_OFFERED, up_card=str(self.dealer.up_card))
            self.await_insurance()
        elif self._dealer_peeks_blackjack():
            self._announce_dealer_blackjack()
            self.dealer_blackjack()
        else:
            self.begin_play()
        return self.phase

    def offer_insurance(self) -> RoundPhase:
        """
        Ask every seat for insurance and resolve the stakes at once.

        Returns:
            ACTION, or SETTLEMENT when a peeking dealer has blackjack
        """
        self._require(RoundPhase.INSURANCE)
        assert self._round is not None
        true_count = self.shoe.true_count()

        for seat in self.seats:
            stake = self._ask_until_valid(seat, seat.request_insurance, true_count)
            self._round.insurance[seat.name] = stake
            if stake:
                self.events.emit_new(EventType.INSURANCE_TAKEN, seat=seat.name, amount=stake)
            else:
                self.events.emit_new(EventType.INSURANCE_DECLINED, seat=seat.name)

        for seat in self.seats:
            if not seat.insurance:
                continue
            paid = self.settlement.settle_insurance(seat, self.dealer.hand)
            self._round.insurance_paid[seat.name] = paid
            if paid:
                self.events.emit_new(EventType.INSURANCE_WINS, seat=seat.name, amount=paid)
            else:
                self.events.emit_new(
                    EventType.INSURANCE_LOSES, seat=seat.name, amount=seat.insurance
                )

        if self._dealer_peeks_blackjack():
            self._announce_dealer_blackjack()
            self.dealer_blackjack()
        else:
            self.begin_play()
        return self.phase

    def play_seats(self) -> None:
        """Let each seat act on its hand, in table order."""
        self._require(RoundPhase.ACTION)
        up_card = self.dealer.up_card

        for seat in self.seats:
            self._play_seat(seat, up_card)

        self.seats_finished()

    def play_dealer(self) -> int:
        """
        Reveal the hole card and draw until the standing total.

        Returns:
            The dealer's final total
        """
        self._require(RoundPhase.DEALER_TURN)
        self.dealer.reveal()
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(self.dealer.hand[1]),
            hand_value=self.dealer.hand.best_value,
        )
        if self.dealer.hand.is_blackjack:
            self.events.emit_new(EventType.DEALER_BLACKJACK, card=str(self.dealer.hand[1]))

        while self.dealer.should_hit:
            self.dealer.hand.add_card(self._draw())
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer.hand.best_value)

        value = self.dealer.hand.best_value
        if self.dealer.hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=value)

        self.dealer_finished()
        return value

    def settle(self) -> dict[str, HandResult]:
        """Pay every seat against the dealer's final hand."""
        self._require(RoundPhase.SETTLEMENT)
        assert self._round is not None
        self.dealer.reveal()
        dealer_hand = self.dealer.hand

        for seat in self.seats:
            bet = seat.bet
            result = self.settlement.settle(seat, dealer_hand)
            self._round.results[seat.name] = result
            if result in _WINNING:
                self.events.emit_new(
                    EventType.SEAT_WINS, seat=seat.name, result=result.name,
                    amount=self.settlement.payout(result, bet),
                )
            elif result in _PUSHING:
                self.events.emit_new(EventType.PUSH, seat=seat.name, amount=bet)
            elif result != HandResult.SURRENDERED:
                self.events.emit_new(
                    EventType.SEAT_LOSES, seat=seat.name, result=result.name, amount=bet
                )

        self._round.dealer_value = dealer_hand.best_value
        self._round.dealer_blackjack = dealer_hand.is_blackjack
        self.payouts_made()
        return dict(self._round.results)

    def reset(self) -> RoundSummary:
        """
        Return every card to the shoe and clear the seats for the next round.

        Returns:
            The finished round's summary
        """
        self._require(RoundPhase.RESET)
        assert self._round is not None
        shuffles = self.shoe.shuffle_count

        for seat in self.seats:
            self.shoe.return_all(seat.clear_hand())
            seat.end_round()
            self._round.bankrolls[seat.name] = seat.bankroll
        self.shoe.return_all(self.dealer.clear_hand())

        if self.shoe.shuffle_count != shuffles:
            self._round.reshuffled = True
            self.events.emit_new(EventType.SHOE_SHUFFLED, cards=len(self.shoe))

        self.events.emit_new(
            EventType.ROUND_ENDED,
            results={name: result.name for name, result in self._round.results.items()},
            bankrolls=dict(self._round.bankrolls),
        )
        logger.info(
            "Round over: dealer %d, results %s",
            self._round.dealer_value,
            {name: str(result) for name, result in self._round.results.items()},
        )

        summary = self._round
        self.next_round()
        return summary

    # Helpers

    def _require(self, phase: RoundPhase) -> None:
        if self.phase != phase:
            raise MachineError(f"Cannot do this during {self.phase}, expected {phase}")

    def _draw(self) -> Card:
        try:
            return self.shoe.draw()
        except EmptyShoe:
            logger.error("Shoe ran out of cards mid-round, closing the table")
            self.close_table()
            raise

    def _leave(self, error: PlayerLeftTable) -> NoReturn:
        logger.warning("%s", error)
        self.events.emit_new(EventType.PLAYER_LEFT, seat=error.seat_name, reason=error.reason)
        self.close_table()
        raise error

    def _ask_until_valid(self, seat: Seat, request: Callable[[int], int], true_count: int) -> int:
        """Call a seat's wager request, asking again after each invalid amount."""
        while True:
            try:
                return request(true_count)
            except InvalidWager as exc:
                self.events.emit_new(
                    EventType.INVALID_WAGER,
                    seat=seat.name,
                    kind=exc.kind,
                    amount=exc.amount,
                    minimum=exc.minimum,
                    maximum=exc.maximum,
                )
            except PlayerLeftTable as exc:
                self._leave(exc)

    def _dealer_peeks_blackjack(self) -> bool:
        """With peeking, an Ace or ten up card is checked for blackjack."""
        if not self.rules.dealer_peeks:
            return False
        up_card = self.dealer.up_card
        return (up_card.is_ace or up_card.is_ten_value) and self.dealer.hand.is_blackjack

    def _announce_dealer_blackjack(self) -> None:
        self.dealer.reveal()
        self.events.emit_new(EventType.DEALER_BLACKJACK, card=str(self.dealer.hand[1]))

    def _play_seat(self, seat: Seat, up_card: Card) -> None:
        while not (seat.hand.is_blackjack or seat.hand.is_busted):
            if seat.human_input is not None:
                allowed = seat.allowed_actions()
                action = seat.human_input.ask_action(seat, up_card, allowed)
                if action is None:
                    self._leave(PlayerLeftTable(seat.name))
                if action not in allowed:
                    self.events.emit_new(
                        EventType.INVALID_ACTION, seat=seat.name, action=str(action)
                    )
                    continue
            else:
                action = self.strategy.decide(seat.hand, up_card, seat.tier)

            if not self._apply(seat, action):
                return

    def _apply(self, seat: Seat, action: Action) -> bool:
        """Carry out an action. Returns True while the seat's turn goes on."""
        if action == Action.HIT:
            seat.hand.add_card(self._draw())
            self.events.emit_new(EventType.SEAT_HIT, seat=seat.name, hand_value=seat.hand.best_value)
            if seat.hand.is_busted:
                self.events.emit_new(EventType.SEAT_BUSTS, seat=seat.name)
                return False
            return True

        if action == Action.DOUBLE:
            seat.double_down()
            seat.hand.add_card(self._draw())
            self.events.emit_new(
                EventType.SEAT_DOUBLE,
                seat=seat.name,
                hand_value=seat.hand.best_value,
                new_bet=seat.bet,
            )
            if seat.hand.is_busted:
                self.events.emit_new(EventType.SEAT_BUSTS, seat=seat.name)
            return False

        if action == Action.SURRENDER:
            refund = seat.bet // 2
            self.shoe.return_all(seat.surrender())
            self.events.emit_new(EventType.SEAT_SURRENDER, seat=seat.name, refund=refund)
            return False

        self.events.emit_new(
            EventType.SEAT_STAND, seat=seat.name, hand_value=seat.hand.best_value
        )
        return False
