"""Round phases and the triggers that move between them."""

from enum import Enum, auto


class RoundPhase(Enum):
    """
    Round state machine phases.

    Flow: BETTING → DEALING → INSURANCE → ACTION → DEALER_TURN → SETTLEMENT → RESET
    """

    # Every seat places a bet
    BETTING = auto()

    # Two cards to the dealer, then two to each seat
    DEALING = auto()

    # Dealer shows an Ace
    INSURANCE = auto()

    # Seats act in table order
    ACTION = auto()

    # Dealer draws to 17
    DEALER_TURN = auto()

    # Payouts
    SETTLEMENT = auto()

    # Cards go back to the shoe
    RESET = auto()

    # A human left the table
    CLOSED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# State machine triggers; the table fires these and nothing else moves a round
TRANSITIONS: list[dict] = [
    {"trigger": "bets_placed", "source": "betting", "dest": "dealing"},
    {"trigger": "await_insurance", "source": "dealing", "dest": "insurance"},
    {"trigger": "begin_play", "source": ["dealing", "insurance"], "dest": "action"},
    {"trigger": "dealer_blackjack", "source": ["dealing", "insurance"], "dest": "settlement"},
    {"trigger": "seats_finished", "source": "action", "dest": "dealer_turn"},
    {"trigger": "dealer_finished", "source": "dealer_turn", "dest": "settlement"},
    {"trigger": "payouts_made", "source": "settlement", "dest": "reset"},
    {"trigger": "next_round", "source": "reset", "dest": "betting"},
    {
        "trigger": "close_table",
        "source": [p.name.lower() for p in RoundPhase if p != RoundPhase.CLOSED],
        "dest": "closed",
    },
]


def _phase_graph() -> dict[RoundPhase, list[RoundPhase]]:
    graph: dict[RoundPhase, list[RoundPhase]] = {phase: [] for phase in RoundPhase}
    for transition in TRANSITIONS:
        sources = transition["source"]
        if isinstance(sources, str):
            sources = [sources]
        dest = RoundPhase[transition["dest"].upper()]
        for source in sources:
            graph[RoundPhase[source.upper()]].append(dest)
    return graph


# Valid phase transitions, read off the triggers above
VALID_TRANSITIONS: dict[RoundPhase, list[RoundPhase]] = _phase_graph()


def is_valid_transition(from_phase: RoundPhase, to_phase: RoundPhase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if some trigger moves the table between the two phases
    """
    return to_phase in VALID_TRANSITIONS.get(from_phase, [])
