"""Tests for ResponseFormatter payloads."""

from robux_bot.bot.response_formatter import ResponseFormatter, format_money, format_robux
from robux_bot.models import (
    ConversionResult,
    Currency,
    CurrencyAmount,
    EmbedPayload,
    ErrorPayload,
    PriceKind,
    RobuxQuote,
)


def test_money_uses_symbol_and_two_decimals() -> None:
    """Fiat amounts carry their symbol and are shown to two decimals."""
    assert format_money(Currency.GBP, 0.675) == "£0.68"
    assert format_money(Currency.USD, 61) == "$61.00"
    assert format_robux(143) == "143 R$"


def test_price_payload_field_order(formatter) -> None:
    """Price payload lists gamepass price, GBP and USD in that order."""
    result = ConversionResult(
        kind=PriceKind.ASSET_THEN_TRANSFER,
        robux_amount=100,
        gamepass_price=144,
        gbp_amount=0.675,
        usd_amount=0.8235,
    )

    payload = formatter.format_price(result)

    assert isinstance(payload, EmbedPayload)
    assert payload.title == "Price Calculation"
    assert payload.description == "Conversion Type: a/t\nAmount of Robux: 100"
    assert [(field.label, field.value) for field in payload.fields] == [
        ("Gamepass Price", "144 R$"),
        ("Amount in GBP", "£0.68"),
        ("Amount in USD", "$0.82"),
    ]
    assert payload.ephemeral is False
    assert payload.footer == "Powered by Test Robux Bot"


def test_conversion_payload_lists_source_first(formatter) -> None:
    """Conversion payload shows the supplied amount before the converted one."""
    payload = formatter.format_conversion(
        CurrencyAmount(currency=Currency.USD, magnitude=61),
        CurrencyAmount(currency=Currency.GBP, magnitude=50),
    )

    assert payload.title == "Currency Conversion"
    assert [(field.label, field.value) for field in payload.fields] == [
        ("Amount in USD", "$61.00"),
        ("Amount in GBP", "£50.00"),
    ]


def test_robux_quote_shows_other_currency(formatter) -> None:
    """Robux payload mentions the amount in the currency the user did not give."""
    quote = RobuxQuote(
        source=CurrencyAmount(currency=Currency.GBP, magnitude=10),
        gbp_amount=10,
        usd_amount=12.2,
        robux_amount=2222,
    )

    payload = formatter.format_robux_quote(quote)

    assert payload.title == "Robux Calculation"
    assert payload.description == "£10.00 affords 2222 R$ ($12.20)"
    assert payload.fields == []


def test_help_is_ephemeral_and_lists_commands(formatter) -> None:
    """Help is visible only to the invoking user and names every command."""
    payload = formatter.format_help()

    assert payload.ephemeral is True
    for command in ("/price", "/convert", "/robux", "/help"):
        assert command in payload.description


def test_help_lists_allowed_option_values(formatter) -> None:
    """Help shows the accepted values of every choice option."""
    lines = formatter.format_help().description.splitlines()

    assert lines[0] == "Here are the available commands and their usage:"
    assert lines[1].startswith("/price <b/t|a/t> <amount>: ")
    assert lines[2].startswith("/convert <GBP|USD> <amount>: ")
    assert lines[3].startswith("/robux <GBP|USD> <amount>: ")
    assert lines[4].startswith("/help: ")


def test_error_payload_is_plain_text(formatter) -> None:
    """Errors are plain text with a marker prefix."""
    payload = formatter.format_error("Invalid type. Use 'b/t' or 'a/t'.")

    assert isinstance(payload, ErrorPayload)
    assert payload.message == "❌ Invalid type. Use 'b/t' or 'a/t'."


def test_no_footer_without_bot_name() -> None:
    """Formatter without a bot name leaves the footer out."""
    payload = ResponseFormatter().format_help()

    assert payload.footer is None
