"""Data models for the Robux price bot.

Defines Pydantic models for the pricing domain (price kinds, conversion
requests and results, currency amounts, exchange rates), the immutable
per-Robux rate table, and the platform-neutral shapes of inbound command
events and outbound response payloads.
"""

from collections.abc import Iterator, Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PriceKind(str, Enum):
    """How the Robux are delivered, which decides whether a markup applies.

    BUY_THEN_TRANSFER: the quoted Robux amount already nets the platform cut.
    ASSET_THEN_TRANSFER: the seller lists an asset and must mark it up so the
        platform cut still leaves the requested amount.
    """

    BUY_THEN_TRANSFER = "b/t"
    ASSET_THEN_TRANSFER = "a/t"


class Currency(str, Enum):
    """Supported fiat currencies."""

    GBP = "GBP"
    USD = "USD"

    @property
    def symbol(self) -> str:
        """Display symbol used in formatted amounts."""
        return {"GBP": "£", "USD": "$"}[self.value]


class ConversionRequest(BaseModel):
    """Validated input of the price command.

    Attributes:
        kind: Delivery method the price is quoted for.
        robux_amount: Requested Robux, already rounded to a whole number.
    """

    model_config = ConfigDict(frozen=True)

    kind: PriceKind
    robux_amount: int = Field(ge=0)


class ConversionResult(BaseModel):
    """Complete price quote for a Robux amount.

    Attributes:
        kind: Delivery method the quote was computed for.
        robux_amount: Requested Robux.
        gamepass_price: Listing price that nets robux_amount after the cut.
        gbp_amount: Price in pounds.
        usd_amount: Price in dollars, derived from gbp_amount.
    """

    model_config = ConfigDict(frozen=True)

    kind: PriceKind
    robux_amount: int
    gamepass_price: int
    gbp_amount: float
    usd_amount: float


class CurrencyAmount(BaseModel):
    """A non-negative amount of fiat money."""

    model_config = ConfigDict(frozen=True)

    currency: Currency
    magnitude: float = Field(ge=0)


class RobuxQuote(BaseModel):
    """How many Robux a fiat amount affords at the b/t rate.

    Attributes:
        source: Amount supplied by the user.
        gbp_amount: Source amount expressed in pounds.
        usd_amount: Source amount expressed in dollars.
        robux_amount: Whole Robux affordable, rounded down.
    """

    model_config = ConfigDict(frozen=True)

    source: CurrencyAmount
    gbp_amount: float
    usd_amount: float
    robux_amount: int


class ExchangeRate(BaseModel):
    """Exchange rate between two currencies.

    Attributes:
        from_currency: Source currency.
        to_currency: Target currency.
        rate: Multiplier from source to target, always positive.
        source: Where the rate came from ('fixed' or 'live').
        fetched_at: When the rate was produced.
    """

    model_config = ConfigDict(frozen=True)

    from_currency: Currency
    to_currency: Currency
    rate: float = Field(gt=0)
    source: str = "fixed"
    fetched_at: datetime = Field(default_factory=datetime.now)


class RateTable(Mapping[PriceKind, float]):
    """Read-only GBP-per-Robux rates keyed by price kind.

    Built once at startup and shared by every request; the underlying mapping
    is a MappingProxyType so nothing can mutate it after construction.
    """

    def __init__(self, rates: Mapping[PriceKind, float]):
        checked: dict[PriceKind, float] = {}
        for kind, rate in rates.items():
            if rate <= 0:
                raise ValueError(f"Rate for {PriceKind(kind).value} must be positive, got {rate}")
            checked[PriceKind(kind)] = float(rate)
        self._rates = MappingProxyType(checked)

    def __getitem__(self, kind: PriceKind) -> float:
        return self._rates[kind]

    def __iter__(self) -> Iterator[PriceKind]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{kind.value}={rate}" for kind, rate in self._rates.items())
        return f"RateTable({pairs})"


# === Platform-neutral command events and responses ===


class OptionType(str, Enum):
    """Declared type of a command option."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"


class CommandOption(BaseModel):
    """One entry of a command's ordered option list.

    The value is left untyped on purpose: the option parser decides what it is.
    """

    name: str
    type: OptionType
    value: Any = None


class InteractionEvent(BaseModel):
    """Inbound slash-style command event.

    Attributes:
        event_id: Platform identifier of the event, unique per invocation.
        command_name: Name of the invoked command without the leading slash.
        options: Options in the order the user supplied them.
        user_id: Invoking user, if known.
        username: Invoking user's handle, if known.
    """

    event_id: str
    command_name: str
    options: list[CommandOption] = Field(default_factory=list)
    user_id: int | None = None
    username: str | None = None


class EmbedField(BaseModel):
    """Labeled value inside a structured response."""

    label: str
    value: str
    inline: bool = True


class EmbedPayload(BaseModel):
    """Structured success response.

    Attributes:
        title: Heading of the response.
        description: Free text shown under the title.
        fields: Ordered labeled values.
        ephemeral: Whether only the invoking user should see the response.
        color: Accent colour as a 24-bit RGB integer.
        footer: Small print shown at the bottom.
    """

    title: str
    description: str = ""
    fields: list[EmbedField] = Field(default_factory=list)
    ephemeral: bool = False
    color: int = 0x0096FF
    footer: str | None = None


class ErrorPayload(BaseModel):
    """Plain-text error response."""

    message: str


ResponsePayload = EmbedPayload | ErrorPayload
