"""Command option parsing and validation.

Turns the ordered, untyped option list of an inbound command into the typed
requests the pricing engine works with. All functions are pure.
"""

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from ..errors import AmountParseError, InsufficientOptions, InvalidCurrency, UnknownPriceKind
from ..models import CommandOption, ConversionRequest, Currency, CurrencyAmount, PriceKind

REQUIRED_OPTIONS = 2


def _require_options(options: Sequence[CommandOption]) -> None:
    if len(options) < REQUIRED_OPTIONS:
        raise InsufficientOptions(required=REQUIRED_OPTIONS, received=len(options))


def resolve_numeric(value: object) -> int | float:
    """Resolve an option value to either an integer or a float.

    Booleans are rejected even though they subclass int, and so are NaN and
    infinities.

    Args:
        value: Raw option value.

    Returns:
        The value unchanged if it is an int or a finite float.

    Raises:
        AmountParseError: For any other representation.
    """
    if isinstance(value, bool):
        raise AmountParseError(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise AmountParseError(value, "Amount must be a finite number")
        return value
    raise AmountParseError(value)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (100.5 -> 101)."""
    return int(Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP))


def parse_robux_amount(value: object) -> int:
    """Read a Robux amount, rounding fractional input.

    Raises:
        AmountParseError: If the value is not numeric or is negative.
    """
    number = resolve_numeric(value)
    amount = number if isinstance(number, int) else round_half_away_from_zero(number)
    if amount < 0:
        raise AmountParseError(value, "Amount must not be negative")
    return amount


def parse_price_options(options: Sequence[CommandOption]) -> ConversionRequest:
    """Parse the options of the price command.

    Args:
        options: Ordered options, price type first and Robux amount second.

    Returns:
        Validated ConversionRequest.

    Raises:
        InsufficientOptions: If fewer than two options were given.
        UnknownPriceKind: If the first option is not exactly 'b/t' or 'a/t'.
        AmountParseError: If the second option is not a usable number.
    """
    _require_options(options)

    raw_kind = options[0].value
    if not isinstance(raw_kind, str):
        raise UnknownPriceKind(raw_kind)
    try:
        kind = PriceKind(raw_kind)
    except ValueError as e:
        raise UnknownPriceKind(raw_kind) from e

    return ConversionRequest(kind=kind, robux_amount=parse_robux_amount(options[1].value))


def parse_currency_options(options: Sequence[CommandOption]) -> CurrencyAmount:
    """Parse the options of the convert and robux commands.

    The amount is money, so fractional values are kept as they are.

    Args:
        options: Ordered options, currency first and amount second.

    Returns:
        Validated CurrencyAmount.

    Raises:
        InsufficientOptions: If fewer than two options were given.
        InvalidCurrency: If the first option is not exactly 'GBP' or 'USD'.
        AmountParseError: If the second option is not a usable number.
    """
    _require_options(options)

    raw_currency = options[0].value
    if not isinstance(raw_currency, str):
        raise InvalidCurrency(raw_currency)
    try:
        currency = Currency(raw_currency)
    except ValueError as e:
        raise InvalidCurrency(raw_currency) from e

    magnitude = float(resolve_numeric(options[1].value))
    if magnitude < 0:
        raise AmountParseError(options[1].value, "Amount must not be negative")

    return CurrencyAmount(currency=currency, magnitude=magnitude)
