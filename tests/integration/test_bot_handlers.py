"""Integration tests for Telegram handlers wired to a real router."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.constants import ChatType, ParseMode
from telegram.error import Forbidden, NetworkError

from robux_bot.bot.handlers import (
    TelegramResponder,
    build_event,
    coerce_argument,
    make_command_handler,
    register_command_menu,
    render_payload,
)
from robux_bot.errors import ResponseDeliveryError
from robux_bot.models import EmbedField, EmbedPayload, ErrorPayload, OptionType


def _make_update(update_id: int = 1001, chat_type: str = ChatType.PRIVATE) -> MagicMock:
    update = MagicMock()
    update.update_id = update_id
    update.effective_user = MagicMock(id=12345, username="test_user")
    update.effective_chat = MagicMock(type=chat_type)
    update.effective_message.reply_text = AsyncMock()
    return update


def _make_context(*args: str) -> MagicMock:
    context = MagicMock()
    context.args = list(args)
    context.bot.send_message = AsyncMock()
    return context


def _sent_text(update: MagicMock) -> str:
    call = update.effective_message.reply_text.await_args
    return call.kwargs.get("text") if "text" in call.kwargs else call.args[0]


class TestEventBuilding:
    """Test conversion of Telegram arguments into command events."""

    @pytest.mark.parametrize(
        "raw, declared, expected",
        [
            ("100", OptionType.INTEGER, 100),
            ("100.5", OptionType.INTEGER, 100.5),
            ("12.5", OptionType.NUMBER, 12.5),
            ("abc", OptionType.NUMBER, "abc"),
            ("100", OptionType.STRING, "100"),
        ],
    )
    def test_coerce_argument(self, raw, declared, expected):
        value = coerce_argument(raw, declared)

        assert value == expected
        assert type(value) is type(expected)

    def test_build_event_types_options_by_schema(self):
        update = _make_update(update_id=77)

        event = build_event(update, _make_context("a/t", "100", "extra"), "price")

        assert event.event_id == "77"
        assert event.command_name == "price"
        assert [(option.name, option.value) for option in event.options] == [
            ("type", "a/t"),
            ("amount", 100),
            ("arg3", "extra"),
        ]
        assert event.user_id == 12345
        assert event.username == "test_user"

    def test_build_event_without_arguments(self):
        context = _make_context()
        context.args = None

        event = build_event(_make_update(), context, "help")

        assert event.options == []


class TestRendering:
    """Test rendering payloads as Telegram text."""

    def test_embed_renders_as_markdown(self):
        payload = EmbedPayload(
            title="Price Calculation",
            description="Conversion Type: b/t",
            fields=[EmbedField(label="Gamepass Price", value="100 R$")],
            footer="Powered by robux_bot",
        )

        text, parse_mode = render_payload(payload)

        assert parse_mode == ParseMode.MARKDOWN
        assert text.splitlines() == [
            "*Price Calculation*",
            "Conversion Type: b/t",
            "",
            "Gamepass Price: 100 R$",
            "",
            "_Powered by robux\\_bot_",
        ]

    def test_error_renders_as_plain_text(self):
        text, parse_mode = render_payload(ErrorPayload(message="❌ Insufficient command options"))

        assert text == "❌ Insufficient command options"
        assert parse_mode is None


class TestTelegramResponder:
    """Test delivery through the Telegram API."""

    @pytest.mark.asyncio
    async def test_ephemeral_in_group_goes_to_private_chat(self):
        update = _make_update(chat_type=ChatType.GROUP)
        context = _make_context()

        await TelegramResponder(update, context).send(
            EmbedPayload(title="Available Commands", ephemeral=True)
        )

        context.bot.send_message.assert_awaited_once()
        assert context.bot.send_message.await_args.kwargs["chat_id"] == 12345
        update.effective_message.reply_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ephemeral_falls_back_to_chat_when_private_chat_refused(self):
        update = _make_update(chat_type=ChatType.GROUP)
        context = _make_context()
        context.bot.send_message.side_effect = Forbidden("bot can't initiate conversation")

        await TelegramResponder(update, context).send(
            EmbedPayload(title="Available Commands", ephemeral=True)
        )

        context.bot.send_message.assert_awaited_once()
        update.effective_message.reply_text.assert_awaited_once()
        assert "*Available Commands*" in _sent_text(update)

    @pytest.mark.asyncio
    async def test_ephemeral_in_private_chat_replies(self):
        update = _make_update(chat_type=ChatType.PRIVATE)
        context = _make_context()

        await TelegramResponder(update, context).send(
            EmbedPayload(title="Available Commands", ephemeral=True)
        )

        update.effective_message.reply_text.assert_awaited_once()
        context.bot.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_telegram_error_is_wrapped(self):
        update = _make_update()
        update.effective_message.reply_text.side_effect = NetworkError("connection reset")

        with pytest.raises(ResponseDeliveryError):
            await TelegramResponder(update, _make_context()).send(ErrorPayload(message="❌ x"))


class TestCommandHandlers:
    """Test complete command flow from Telegram update to reply."""

    @pytest.mark.asyncio
    async def test_price_command_full_flow(self, router):
        update = _make_update()
        handler = make_command_handler(router, "price")

        await handler(update, _make_context("a/t", "100"))
        await router.aclose()

        update.effective_message.reply_text.assert_awaited_once()
        text = _sent_text(update)
        assert "*Price Calculation*" in text
        assert "Gamepass Price: 144 R$" in text
        assert "Amount in GBP: £0.68" in text
        assert "Amount in USD: $0.82" in text
        assert update.effective_message.reply_text.await_args.kwargs["parse_mode"] == (
            ParseMode.MARKDOWN
        )

    @pytest.mark.asyncio
    async def test_fractional_robux_amount_is_rounded(self, router):
        update = _make_update()

        await make_command_handler(router, "price")(update, _make_context("b/t", "100.5"))
        await router.aclose()

        assert "Amount of Robux: 101" in _sent_text(update)

    @pytest.mark.asyncio
    async def test_non_numeric_amount_reports_error(self, router):
        update = _make_update()

        await make_command_handler(router, "convert")(update, _make_context("GBP", "ten"))
        await router.aclose()

        assert _sent_text(update) == "❌ Unexpected type str for amount"
        assert update.effective_message.reply_text.await_args.kwargs["parse_mode"] is None

    @pytest.mark.asyncio
    async def test_missing_options_reports_error(self, router):
        update = _make_update()

        await make_command_handler(router, "robux")(update, _make_context("USD"))
        await router.aclose()

        assert _sent_text(update) == "❌ Insufficient command options"

    @pytest.mark.asyncio
    async def test_update_without_message_is_ignored(self, router):
        update = _make_update()
        update.effective_message = None

        await make_command_handler(router, "help")(update, _make_context())

        assert router.in_flight == 0


@pytest.mark.asyncio
async def test_register_command_menu_publishes_all_commands():
    """Every declared command appears in the Telegram command menu."""
    application = MagicMock()
    application.bot.set_my_commands = AsyncMock()

    await register_command_menu(application)

    commands = application.bot.set_my_commands.await_args.args[0]
    assert [command.command for command in commands] == ["price", "convert", "robux", "help"]
