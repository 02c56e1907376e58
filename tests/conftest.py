"""Global test configuration and fixtures.

Provides shared fixtures for all test levels: a fixed exchange-rate provider,
the pricing engine built on the default rate table, the formatter and router,
a recording responder and a mocked aiohttp session.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from robux_bot.bot.response_formatter import ResponseFormatter
from robux_bot.bot.router import CommandRouter
from robux_bot.errors import ResponseDeliveryError
from robux_bot.models import (
    CommandOption,
    InteractionEvent,
    OptionType,
    PriceKind,
    RateTable,
    ResponsePayload,
)
from robux_bot.services.currency import FixedRateProvider
from robux_bot.services.pricing import PricingEngine

# Test constants
TEST_BOT_TOKEN = os.getenv("TEST_BOT_TOKEN", "test_bot_token_placeholder")
TEST_BOT_NAME = "Test Robux Bot"
TEST_GBP_TO_USD = 1.22


class RecordingResponder:
    """Responder that keeps every payload it is asked to send."""

    def __init__(self, fail: bool = False):
        self.sent: list[ResponsePayload] = []
        self.fail = fail

    async def send(self, payload: ResponsePayload) -> None:
        self.sent.append(payload)
        if self.fail:
            raise ResponseDeliveryError("platform rejected the message")


def make_event(command_name: str, *values: object, event_id: str = "1") -> InteractionEvent:
    """Build an event whose options carry the given raw values in order."""
    options = [
        CommandOption(name=f"option{index}", type=OptionType.STRING, value=value)
        for index, value in enumerate(values)
    ]
    return InteractionEvent(
        event_id=event_id,
        command_name=command_name,
        options=options,
        user_id=12345,
        username="test_user",
    )


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Keep tests independent of the developer's environment."""
    monkeypatch.setenv("BOT_TOKEN", TEST_BOT_TOKEN)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    for key in (
        "RATE_SOURCE",
        "GBP_TO_USD_RATE",
        "EXCHANGE_RATE_API_KEY",
        "EXCHANGE_RATE_API_URL",
        "EXCHANGE_RATE_TIMEOUT",
        "PRICING_MARKUP_RATE",
        "PRICING_GAMEPASS_BUFFER",
        "PRICING_BUY_THEN_TRANSFER_RATE",
        "PRICING_ASSET_THEN_TRANSFER_RATE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def rate_table():
    """Default GBP-per-Robux rates."""
    return RateTable(
        {
            PriceKind.BUY_THEN_TRANSFER: 0.0045,
            PriceKind.ASSET_THEN_TRANSFER: 0.00675,
        }
    )


@pytest.fixture
def fixed_provider():
    """Exchange-rate provider serving the constant 1.22 GBP to USD rate."""
    return FixedRateProvider(TEST_GBP_TO_USD)


@pytest.fixture
def engine(rate_table, fixed_provider):
    """Pricing engine with the default markup and gamepass buffer."""
    return PricingEngine(rate_table, fixed_provider)


@pytest.fixture
def formatter():
    """Response formatter with a test footer."""
    return ResponseFormatter(bot_name=TEST_BOT_NAME)


@pytest.fixture
def router(engine, formatter):
    """Command router over the default engine."""
    return CommandRouter(engine, formatter)


@pytest.fixture
def responder():
    """Responder recording every payload."""
    return RecordingResponder()


@pytest.fixture
def mock_http_response():
    """Mock aiohttp response with a successful GBP to USD body."""
    response = MagicMock()
    response.status = 200
    response.json = AsyncMock(return_value={"base": "GBP", "rates": {"USD": 1.25}})
    return response


@pytest.fixture
def mock_http_session(mock_http_response):
    """Mock aiohttp session whose get() yields mock_http_response."""
    session = MagicMock()
    session.get.return_value.__aenter__ = AsyncMock(return_value=mock_http_response)
    session.get.return_value.__aexit__ = AsyncMock(return_value=False)
    return session


@pytest.fixture
def failing_responder():
    """Responder whose every delivery is rejected by the platform."""
    return RecordingResponder(fail=True)


@pytest.fixture
def event_factory():
    """Factory building command events from raw option values."""
    return make_event
