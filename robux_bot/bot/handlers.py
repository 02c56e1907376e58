"""Telegram handlers for the Robux price commands.

Thin adapter between python-telegram-bot and the command router: turns a
Telegram command message into an InteractionEvent typed by the command schema,
and delivers router payloads back to Telegram.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence

from telegram import BotCommand, Update
from telegram.constants import ChatType, ParseMode
from telegram.error import Forbidden, TelegramError
from telegram.ext import Application, ContextTypes
from telegram.helpers import escape_markdown

from ..errors import ResponseDeliveryError
from ..models import (
    CommandOption,
    EmbedPayload,
    InteractionEvent,
    OptionType,
    ResponsePayload,
)
from .router import CommandRouter
from .schema import COMMANDS, COMMANDS_BY_NAME, CommandSpec

logger = logging.getLogger(__name__)

TelegramCallback = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]


def coerce_argument(raw: str, declared: OptionType) -> object:
    """Type a raw text argument according to its declared option type.

    Numeric options become int when the text is an integer literal and float
    when it is any other number. Text that is not a number is passed through
    unchanged so the option parser can report it.

    Args:
        raw: Argument text as typed by the user.
        declared: Option type from the command schema.

    Returns:
        The typed value.
    """
    if declared == OptionType.STRING:
        return raw

    try:
        return int(raw)
    except ValueError:
        pass

    try:
        return float(raw)
    except ValueError:
        return raw


def build_options(spec: CommandSpec | None, args: Sequence[str]) -> list[CommandOption]:
    """Build the ordered option list for a command from its text arguments.

    Arguments beyond the declared options are kept as string options so the
    list always mirrors what the user typed.
    """
    declared = spec.options if spec else ()
    options: list[CommandOption] = []
    for index, raw in enumerate(args):
        if index < len(declared):
            option = declared[index]
            options.append(
                CommandOption(
                    name=option.name,
                    type=option.type,
                    value=coerce_argument(raw, option.type),
                )
            )
        else:
            options.append(
                CommandOption(name=f"arg{index + 1}", type=OptionType.STRING, value=raw)
            )
    return options


def build_event(
    update: Update, context: ContextTypes.DEFAULT_TYPE, command_name: str
) -> InteractionEvent:
    """Convert a Telegram command update into an InteractionEvent.

    Args:
        update: Telegram update carrying the command message.
        context: Handler context with the parsed command arguments.
        command_name: Command the handler was registered for.

    Returns:
        Platform-neutral command event.
    """
    user = update.effective_user
    return InteractionEvent(
        event_id=str(update.update_id),
        command_name=command_name,
        options=build_options(COMMANDS_BY_NAME.get(command_name), context.args or []),
        user_id=user.id if user else None,
        username=user.username if user else None,
    )


def render_payload(payload: ResponsePayload) -> tuple[str, str | None]:
    """Render a payload as Telegram message text.

    Structured payloads become Markdown with a bold title, the description,
    one line per field and an italic footer. Error payloads stay plain text.

    Returns:
        Message text and the parse mode to send it with.
    """
    if not isinstance(payload, EmbedPayload):
        return payload.message, None

    lines = [f"*{escape_markdown(payload.title)}*"]
    if payload.description:
        lines.append(escape_markdown(payload.description))
    if payload.fields:
        lines.append("")
        lines.extend(
            f"{escape_markdown(field.label)}: {escape_markdown(field.value)}"
            for field in payload.fields
        )
    if payload.footer:
        lines.append("")
        lines.append(f"_{escape_markdown(payload.footer)}_")

    return "\n".join(lines), ParseMode.MARKDOWN


class TelegramResponder:
    """Delivers router payloads for one Telegram update.

    Ephemeral payloads go to the invoking user's private chat, which is the
    closest Telegram has to a reply only the invoker can see. Telegram refuses
    private messages to users who never started the bot; those users get the
    payload as a normal reply in the chat where they asked.
    """

    def __init__(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        self.update = update
        self.context = context

    async def send(self, payload: ResponsePayload) -> None:
        text, parse_mode = render_payload(payload)
        message = self.update.effective_message
        chat = self.update.effective_chat
        user = self.update.effective_user

        try:
            if (
                isinstance(payload, EmbedPayload)
                and payload.ephemeral
                and user is not None
                and (chat is None or chat.type != ChatType.PRIVATE)
            ):
                try:
                    await self.context.bot.send_message(
                        chat_id=user.id, text=text, parse_mode=parse_mode
                    )
                    return
                except Forbidden as e:
                    logger.info(f"Private reply to user {user.id} refused ({e}); replying in chat")

            if message is not None:
                await message.reply_text(text, parse_mode=parse_mode)
            else:
                raise ResponseDeliveryError(f"Update {self.update.update_id} has no message")
        except TelegramError as e:
            raise ResponseDeliveryError(str(e)) from e


def make_command_handler(router: CommandRouter, command_name: str) -> TelegramCallback:
    """Create the Telegram callback for one command.

    The callback returns as soon as the event is submitted; the router owns
    the task that answers it.
    """

    async def handle_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if update.effective_message is None:
            return

        event = build_event(update, context, command_name)
        logger.debug(f"Received /{command_name} with {len(event.options)} option(s)")
        router.submit(event, TelegramResponder(update, context))

    return handle_command


async def register_command_menu(application: Application) -> None:
    """Publish the command list shown in Telegram's command menu."""
    commands = [BotCommand(command.name, command.description) for command in COMMANDS]
    try:
        await application.bot.set_my_commands(commands)
        logger.info(f"Registered {len(commands)} bot commands")
    except TelegramError as e:
        logger.warning(f"Failed to register bot commands: {e}")
