"""Exceptions raised by the table engine."""


class BlackjackError(Exception):
    """Base class for engine errors."""


class InvalidWager(BlackjackError, ValueError):
    """A bet or insurance amount outside the allowed bounds."""

    def __init__(self, amount: int, minimum: int, maximum: int, kind: str = "bet") -> None:
        self.amount = amount
        self.minimum = minimum
        self.maximum = maximum
        self.kind = kind
        super().__init__(
            f"{kind.capitalize()} of {amount} outside allowed range [{minimum}, {maximum}]"
        )


class EmptyShoe(BlackjackError, IndexError):
    """A card was drawn from a shoe with no cards left."""

    def __init__(self) -> None:
        super().__init__("Cannot draw from empty shoe")


class PlayerLeftTable(BlackjackError):
    """A human seat refused to answer, or can no longer cover the minimum bet."""

    def __init__(self, seat_name: str, reason: str = "refused") -> None:
        self.seat_name = seat_name
        self.reason = reason
        super().__init__(f"{seat_name} left the table ({reason})")
