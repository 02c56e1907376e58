"""Exchange rate providers for GBP/USD conversion.

Two sources are supported:
- FixedRateProvider: a configured GBP to USD constant, reciprocal for USD to GBP
- LiveRateProvider: one ExchangeRate-API request per lookup, no caching

Every failure (network error, timeout, non-200 status, missing or
non-positive rate) is raised as RateFetchError. Providers never fall back to
a stale or default rate.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Protocol

import aiohttp

from ..config import RateConfig
from ..errors import RateFetchError
from ..models import Currency, ExchangeRate

logger = logging.getLogger(__name__)


class RateProvider(Protocol):
    """Protocol for anything that can price one currency in another."""

    async def fetch(self, from_currency: Currency, to_currency: Currency) -> ExchangeRate:
        """Return the rate that converts from_currency into to_currency.

        Args:
            from_currency: Source currency.
            to_currency: Target currency.

        Returns:
            ExchangeRate with a positive rate.

        Raises:
            RateFetchError: If the rate cannot be obtained.
        """
        ...


class FixedRateProvider:
    """Serves a single configured GBP to USD rate in both directions."""

    def __init__(self, gbp_to_usd: float):
        """Initialize fixed provider.

        Args:
            gbp_to_usd: Dollars per pound, must be positive.
        """
        if gbp_to_usd <= 0:
            raise ValueError(f"GBP to USD rate must be positive, got {gbp_to_usd}")
        self.gbp_to_usd = gbp_to_usd

    async def fetch(self, from_currency: Currency, to_currency: Currency) -> ExchangeRate:
        if from_currency == to_currency:
            rate = 1.0
        elif from_currency == Currency.GBP:
            rate = self.gbp_to_usd
        else:
            rate = 1 / self.gbp_to_usd

        return ExchangeRate(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            source="fixed",
        )


class LiveRateProvider:
    """Fetches rates from ExchangeRate-API on every call.

    Each direction is requested on its own; USD to GBP is never derived from
    the GBP to USD quote.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        timeout: float = 10.0,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize live provider.

        Args:
            api_url: Base URL, requests go to <api_url>/latest/<FROM>.
            api_key: Key passed as the 'apikey' query parameter.
            timeout: Total request timeout in seconds.
            session: Shared HTTP session; a short-lived one is opened per
                request when omitted.
        """
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session

    async def fetch(self, from_currency: Currency, to_currency: Currency) -> ExchangeRate:
        if from_currency == to_currency:
            return ExchangeRate(
                from_currency=from_currency, to_currency=to_currency, rate=1.0, source="live"
            )

        if not self.api_key:
            raise RateFetchError(
                from_currency.value,
                to_currency.value,
                "EXCHANGE_RATE_API_KEY environment variable is required",
            )

        logger.info(f"Fetching {from_currency.value}/{to_currency.value} rate from {self.api_url}")
        try:
            if self._session is not None:
                data = await self._request(self._session, from_currency, to_currency)
            else:
                async with aiohttp.ClientSession() as session:
                    data = await self._request(session, from_currency, to_currency)
        except asyncio.TimeoutError as e:
            raise RateFetchError(
                from_currency.value, to_currency.value, "exchange rate request timed out"
            ) from e
        except aiohttp.ClientError as e:
            raise RateFetchError(
                from_currency.value, to_currency.value, f"failed to fetch exchange rate: {e}"
            ) from e

        rate = _extract_rate(data, to_currency)
        if rate is None:
            raise RateFetchError(
                from_currency.value,
                to_currency.value,
                f"exchange rate not found for {from_currency.value} to {to_currency.value}",
            )

        logger.info(f"{from_currency.value}/{to_currency.value} rate: {rate}")
        return ExchangeRate(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            source="live",
            fetched_at=datetime.now(),
        )

    async def _request(
        self, session: aiohttp.ClientSession, from_currency: Currency, to_currency: Currency
    ) -> Any:
        """Perform the GET request and decode the JSON body."""
        url = f"{self.api_url}/latest/{from_currency.value}"
        params = {
            "apikey": self.api_key or "",
            "base": from_currency.value,
            "symbols": to_currency.value,
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with session.get(url, params=params, timeout=timeout) as response:
            if response.status != 200:
                raise RateFetchError(
                    from_currency.value,
                    to_currency.value,
                    f"received non-200 response: {response.status}",
                )
            try:
                return await response.json()
            except ValueError as e:
                raise RateFetchError(
                    from_currency.value, to_currency.value, "failed to decode response"
                ) from e


def _extract_rate(data: Any, to_currency: Currency) -> float | None:
    """Pull rates[<TARGET>] out of a response body.

    Returns:
        The rate if present, numeric and positive, None otherwise.
    """
    if not isinstance(data, dict):
        return None

    rates = data.get("rates")
    if not isinstance(rates, dict):
        return None

    rate = rates.get(to_currency.value)
    if isinstance(rate, bool) or not isinstance(rate, int | float):
        return None

    if rate <= 0:
        logger.warning(f"Received non-positive {to_currency.value} rate: {rate}")
        return None

    return float(rate)


def build_rate_provider(
    rate_config: RateConfig, session: aiohttp.ClientSession | None = None
) -> FixedRateProvider | LiveRateProvider:
    """Create the provider selected by configuration.

    Args:
        rate_config: Exchange-rate settings.
        session: Optional shared HTTP session for the live provider.

    Returns:
        Configured rate provider.
    """
    if rate_config.source == "live":
        if not rate_config.api_key:
            logger.warning("Live exchange rates selected but EXCHANGE_RATE_API_KEY is not set")
        return LiveRateProvider(
            api_url=rate_config.api_url,
            api_key=rate_config.api_key,
            timeout=rate_config.timeout,
            session=session,
        )

    return FixedRateProvider(rate_config.gbp_to_usd)
