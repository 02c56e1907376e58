"""Response formatting for command results and errors.

Builds the structured payloads for price quotes, currency conversions, Robux
quotes and help, and the plain-text payload for errors. Performs no I/O.
"""

import logging

from ..models import (
    ConversionResult,
    Currency,
    CurrencyAmount,
    EmbedField,
    EmbedPayload,
    ErrorPayload,
    RobuxQuote,
)
from .messages import (
    AMOUNT_IN_LABEL,
    CONVERT_TITLE,
    ERROR_PREFIX,
    FOOTER_TEXT,
    GAMEPASS_PRICE_LABEL,
    HELP_HEADER,
    HELP_LINE,
    HELP_TITLE,
    MONEY_VALUE,
    PRICE_DESCRIPTION,
    PRICE_TITLE,
    ROBUX_DESCRIPTION,
    ROBUX_TITLE,
    ROBUX_VALUE,
)
from .schema import COMMANDS

logger = logging.getLogger(__name__)


def format_money(currency: Currency, amount: float) -> str:
    """Format a fiat amount with its symbol and two decimals (e.g. '£0.45')."""
    return MONEY_VALUE.format(symbol=currency.symbol, amount=amount)


def format_robux(amount: int) -> str:
    """Format a Robux count (e.g. '143 R$')."""
    return ROBUX_VALUE.format(amount=amount)


class ResponseFormatter:
    """Formats bot responses for quotes, conversions, help and errors."""

    def __init__(self, bot_name: str | None = None) -> None:
        """Initialize response formatter.

        Args:
            bot_name: Name used in the footer; no footer when omitted.
        """
        self.footer = FOOTER_TEXT.format(bot_name=bot_name) if bot_name else None

    def _embed(
        self,
        title: str,
        description: str = "",
        fields: list[EmbedField] | None = None,
        ephemeral: bool = False,
    ) -> EmbedPayload:
        return EmbedPayload(
            title=title,
            description=description,
            fields=fields or [],
            ephemeral=ephemeral,
            footer=self.footer,
        )

    def format_price(self, result: ConversionResult) -> EmbedPayload:
        """Format the price command result.

        Args:
            result: Quote computed by the pricing engine.

        Returns:
            Payload with gamepass price, GBP and USD fields in that order.
        """
        return self._embed(
            PRICE_TITLE,
            PRICE_DESCRIPTION.format(kind=result.kind.value, robux_amount=result.robux_amount),
            [
                EmbedField(label=GAMEPASS_PRICE_LABEL, value=format_robux(result.gamepass_price)),
                EmbedField(
                    label=AMOUNT_IN_LABEL.format(currency=Currency.GBP.value),
                    value=format_money(Currency.GBP, result.gbp_amount),
                ),
                EmbedField(
                    label=AMOUNT_IN_LABEL.format(currency=Currency.USD.value),
                    value=format_money(Currency.USD, result.usd_amount),
                ),
            ],
        )

    def format_conversion(self, source: CurrencyAmount, target: CurrencyAmount) -> EmbedPayload:
        """Format the convert command result.

        Args:
            source: Amount supplied by the user.
            target: Converted amount.

        Returns:
            Payload with the source field first and the converted field second.
        """
        return self._embed(
            CONVERT_TITLE,
            fields=[
                EmbedField(
                    label=AMOUNT_IN_LABEL.format(currency=amount.currency.value),
                    value=format_money(amount.currency, amount.magnitude),
                )
                for amount in (source, target)
            ],
        )

    def format_robux_quote(self, quote: RobuxQuote) -> EmbedPayload:
        """Format the robux command result as a single description line."""
        source = quote.source
        if source.currency == Currency.GBP:
            other = format_money(Currency.USD, quote.usd_amount)
        else:
            other = format_money(Currency.GBP, quote.gbp_amount)

        return self._embed(
            ROBUX_TITLE,
            ROBUX_DESCRIPTION.format(
                source=format_money(source.currency, source.magnitude),
                robux_amount=quote.robux_amount,
                other=other,
            ),
        )

    def format_help(self) -> EmbedPayload:
        """Format the help listing, visible only to the invoking user."""
        lines = [HELP_HEADER]
        lines.extend(
            HELP_LINE.format(usage=command.usage, description=command.description)
            for command in COMMANDS
        )
        return self._embed(HELP_TITLE, "\n".join(lines), ephemeral=True)

    def format_error(self, message: str) -> ErrorPayload:
        """Format an error message as a plain-text payload."""
        return ErrorPayload(message=ERROR_PREFIX.format(message=message))
