"""Error taxonomy for the sizing and analytics engine.

Value-type validation failures surface as ``pydantic.ValidationError`` at
construction. Apart from ``TradeRejectedError`` and ``DivisionByZeroError``,
everything here is a precondition failure detected by an operation. None of
them are retried internally.
"""


class ForexHelperError(Exception):
    """Base class for engine errors."""


class PreconditionError(ForexHelperError):
    """An operation was called in a state or with inputs it cannot handle."""


class MissingPriceError(PreconditionError):
    """A current price is required (USD/XXX pairs) but absent or non-positive."""


class MissingConversionError(PreconditionError):
    """No usable exchange rate for a required currency conversion."""


class InvalidStateError(PreconditionError):
    """A trade lifecycle transition is not allowed from the current state."""


class NotClosedError(PreconditionError):
    """The trade has no exit price yet."""


class EmptyInputError(PreconditionError):
    """Metrics were requested for an empty trade list."""


class NoClosedTradesError(PreconditionError):
    """Metrics were requested but none of the trades are closed."""


class MixedCurrencyError(PreconditionError):
    """Closed trades carry profit/loss in more than one currency."""


class InvalidRangeError(PreconditionError):
    """A date range ends before it starts."""


class OwnershipError(PreconditionError):
    """A user tried to act on a trade owned by someone else."""


class TradeRejectedError(ForexHelperError):
    """Trade creation failed one or more business rules."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class DivisionByZeroError(ForexHelperError, ZeroDivisionError):
    """Stop distance or pip value resolved to zero during lot sizing."""
