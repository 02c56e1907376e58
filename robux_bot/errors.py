"""Error taxonomy for command handling.

Every error raised while validating options, computing prices or fetching
exchange rates derives from CommandError and carries the message shown to the
user. The router is the only place that turns these into error payloads.
"""

from typing import Any


class CommandError(Exception):
    """Base class for errors that end a single command with a user-visible message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InsufficientOptions(CommandError):
    """Raised when a command receives fewer options than it requires."""

    def __init__(self, required: int, received: int):
        super().__init__("Insufficient command options")
        self.required = required
        self.received = received


class UnknownPriceKind(CommandError):
    """Raised for a price type outside of 'b/t' and 'a/t'."""

    def __init__(self, value: Any):
        super().__init__("Invalid type. Use 'b/t' or 'a/t'.")
        self.value = value


class InvalidCurrency(CommandError):
    """Raised for a currency tag outside of 'GBP' and 'USD'."""

    def __init__(self, value: Any):
        super().__init__("Invalid currency. Use 'GBP' or 'USD'.")
        self.value = value


class AmountParseError(CommandError):
    """Raised when the amount option cannot be read as a usable number.

    Attributes:
        value: The offending option value.
        shape: Name of the value's type, kept for diagnostics.
    """

    def __init__(self, value: Any, reason: str | None = None):
        self.value = value
        self.shape = type(value).__name__
        super().__init__(reason or f"Unexpected type {self.shape} for amount")


class RateFetchError(CommandError):
    """Raised when an exchange rate cannot be obtained for the current request."""

    def __init__(self, from_currency: str, to_currency: str, reason: str):
        super().__init__(f"Error converting {from_currency} to {to_currency}: {reason}")
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.reason = reason


class ResponseDeliveryError(Exception):
    """Raised by a responder when the platform rejects an outbound message.

    Not a CommandError: by the time it happens the response slot is consumed,
    so it is logged and never shown to the user.
    """
