class EconomyError(Exception):
    """Expected failure of an economy operation; ``message`` is shown to the user."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidAmount(EconomyError):
    kind = "invalid_amount"


class InvalidChoice(EconomyError):
    kind = "invalid_choice"


class InsufficientFunds(EconomyError):
    kind = "insufficient_funds"


class BelowMinimum(EconomyError):
    kind = "below_minimum"


class AboveMaximum(EconomyError):
    kind = "above_maximum"


class NotFound(EconomyError):
    kind = "not_found"


class Unauthorized(EconomyError):
    kind = "unauthorized"


class Conflict(EconomyError):
    kind = "conflict"


class CapacityExceeded(EconomyError):
    kind = "capacity_exceeded"
