"""Robux pricing engine.

Computes what a Robux amount costs in GBP and USD, the gamepass price that
nets the requested amount after the platform cut, and how many Robux a fiat
amount affords. Arithmetic on money goes through Decimal so exact inputs stay
exact; results are handed out as floats.
"""

import logging
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, localcontext

from ..errors import UnknownPriceKind
from ..models import (
    ConversionRequest,
    ConversionResult,
    Currency,
    CurrencyAmount,
    PriceKind,
    RateTable,
    RobuxQuote,
)
from .currency import RateProvider

logger = logging.getLogger(__name__)


def _decimal(value: float) -> Decimal:
    return Decimal(str(value))


class PricingEngine:
    """Pricing and conversion calculations.

    Attributes:
        rate_table: GBP-per-Robux rates, shared and never mutated.
        rate_provider: Source of GBP/USD exchange rates.
        markup_rate: Share of a sale the platform keeps.
        gamepass_buffer: Robux added after rounding an 'a/t' gamepass price.
    """

    def __init__(
        self,
        rate_table: RateTable,
        rate_provider: RateProvider,
        markup_rate: float = 0.30,
        gamepass_buffer: int = 1,
    ):
        if not 0 <= markup_rate < 1:
            raise ValueError(f"Markup rate must be in [0, 1), got {markup_rate}")
        if gamepass_buffer < 0:
            raise ValueError(f"Gamepass buffer must not be negative, got {gamepass_buffer}")

        self.rate_table = rate_table
        self.rate_provider = rate_provider
        self.markup_rate = markup_rate
        self.gamepass_buffer = gamepass_buffer

    def lookup_rate(self, kind: PriceKind | str) -> float:
        """Get GBP per Robux for a price kind.

        Args:
            kind: Price kind or its raw 'b/t' / 'a/t' tag.

        Returns:
            GBP per Robux.

        Raises:
            UnknownPriceKind: If kind is not a known price kind or has no rate.
        """
        try:
            price_kind = PriceKind(kind)
        except ValueError as e:
            raise UnknownPriceKind(kind) from e

        rate = self.rate_table.get(price_kind)
        if rate is None:
            raise UnknownPriceKind(kind)
        return rate

    def compute_gbp_amount(self, kind: PriceKind | str, amount: int) -> float:
        """Price of amount Robux in pounds."""
        return float(Decimal(amount) * _decimal(self.lookup_rate(kind)))

    def compute_gamepass_price(self, kind: PriceKind | str, amount: int) -> int:
        """Calculate the gamepass listing price for a Robux amount.

        'b/t' quotes already net the platform cut, so the amount is returned
        unchanged. 'a/t' quotes are grossed up by the markup, rounded half
        away from zero, then padded by the configured buffer so the seller
        still nets amount after the cut.

        Args:
            kind: Price kind.
            amount: Robux the seller must receive.

        Returns:
            Gamepass price in Robux.
        """
        try:
            price_kind = PriceKind(kind)
        except ValueError as e:
            raise UnknownPriceKind(kind) from e

        if price_kind == PriceKind.BUY_THEN_TRANSFER:
            return amount

        kept_share = Decimal("1") - _decimal(self.markup_rate)
        with localcontext() as ctx:
            # Keep every integer digit of the quotient, however large the amount
            ctx.prec = max(ctx.prec, amount.bit_length() // 3 + 10)
            grossed_up = (Decimal(amount) / kept_share).to_integral_value(rounding=ROUND_HALF_UP)
        return int(grossed_up) + self.gamepass_buffer

    async def convert_gbp_to_usd(self, gbp: float) -> float:
        """Convert pounds to dollars with the current GBP to USD rate."""
        rate = await self.rate_provider.fetch(Currency.GBP, Currency.USD)
        return float(_decimal(gbp) * _decimal(rate.rate))

    async def convert_usd_to_gbp(self, usd: float) -> float:
        """Convert dollars to pounds with the current USD to GBP rate."""
        rate = await self.rate_provider.fetch(Currency.USD, Currency.GBP)
        return float(_decimal(usd) * _decimal(rate.rate))

    async def quote(self, request: ConversionRequest) -> ConversionResult:
        """Compute the full price quote for the price command.

        The markup only changes the gamepass price and is already part of the
        'a/t' per-Robux rate; USD is always derived from the GBP amount.

        Args:
            request: Validated price request.

        Returns:
            ConversionResult with gamepass price and fiat amounts.

        Raises:
            UnknownPriceKind: If the request kind has no rate.
            RateFetchError: If the GBP to USD rate cannot be obtained.
        """
        gbp_amount = self.compute_gbp_amount(request.kind, request.robux_amount)
        gamepass_price = self.compute_gamepass_price(request.kind, request.robux_amount)
        usd_amount = await self.convert_gbp_to_usd(gbp_amount)

        logger.debug(
            f"Quote {request.kind.value} {request.robux_amount} R$: "
            f"gamepass={gamepass_price}, gbp={gbp_amount}, usd={usd_amount}"
        )

        return ConversionResult(
            kind=request.kind,
            robux_amount=request.robux_amount,
            gamepass_price=gamepass_price,
            gbp_amount=gbp_amount,
            usd_amount=usd_amount,
        )

    async def convert(self, amount: CurrencyAmount) -> CurrencyAmount:
        """Convert an amount into the other supported currency."""
        if amount.currency == Currency.GBP:
            usd = await self.convert_gbp_to_usd(amount.magnitude)
            return CurrencyAmount(currency=Currency.USD, magnitude=usd)

        gbp = await self.convert_usd_to_gbp(amount.magnitude)
        return CurrencyAmount(currency=Currency.GBP, magnitude=gbp)

    async def robux_for(self, amount: CurrencyAmount) -> RobuxQuote:
        """Work out how many whole Robux a fiat amount buys at the 'b/t' rate.

        Args:
            amount: Fiat amount supplied by the user.

        Returns:
            RobuxQuote with both fiat amounts and the Robux count rounded down.

        Raises:
            RateFetchError: If the exchange rate cannot be obtained.
        """
        if amount.currency == Currency.GBP:
            gbp_amount = amount.magnitude
            usd_amount = await self.convert_gbp_to_usd(gbp_amount)
        else:
            usd_amount = amount.magnitude
            gbp_amount = await self.convert_usd_to_gbp(usd_amount)

        per_robux = _decimal(self.lookup_rate(PriceKind.BUY_THEN_TRANSFER))
        robux = (_decimal(gbp_amount) / per_robux).to_integral_value(ROUND_FLOOR)

        return RobuxQuote(
            source=amount,
            gbp_amount=gbp_amount,
            usd_amount=usd_amount,
            robux_amount=int(robux),
        )
