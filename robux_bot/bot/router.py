"""Command routing for inbound slash-style commands.

Maps a command name to its handler and runs option parsing, pricing and
formatting for it. Every command error becomes an error payload here, and
every event is answered through a single-use response slot so it can never
be answered twice.
"""

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from typing import Protocol

from ..errors import CommandError, ResponseDeliveryError
from ..models import EmbedPayload, InteractionEvent, ResponsePayload
from ..services.pricing import PricingEngine
from .messages import ERROR_UNEXPECTED
from .options import parse_currency_options, parse_price_options
from .response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)

CommandHandler = Callable[[InteractionEvent], Awaitable[EmbedPayload]]


class Responder(Protocol):
    """Platform boundary that delivers a payload for one event."""

    async def send(self, payload: ResponsePayload) -> None:
        """Deliver the payload.

        Raises:
            ResponseDeliveryError: If the platform rejects the message.
        """
        ...


class ResponseSlot:
    """Single-use permission to answer one event."""

    def __init__(self, event_id: str, responder: Responder):
        self.event_id = event_id
        self._responder = responder
        self._used = False

    @property
    def used(self) -> bool:
        """Whether the event has already been answered."""
        return self._used

    async def respond(self, payload: ResponsePayload) -> bool:
        """Send the payload if the slot is still free.

        Delivery failures are logged only; the slot counts as used either way.

        Returns:
            True if this call consumed the slot, False if it was already used.
        """
        if self._used:
            logger.warning(f"Event {self.event_id} already answered; dropping second response")
            return False

        self._used = True
        try:
            await self._responder.send(payload)
        except ResponseDeliveryError as e:
            logger.error(f"Failed to deliver response for event {self.event_id}: {e}")
        return True


class CommandRouter:
    """Routes commands to handlers and owns one task per inbound event.

    Attributes:
        engine: Pricing engine used by the price, convert and robux commands.
        formatter: Builds success and error payloads.
    """

    def __init__(
        self,
        engine: PricingEngine,
        formatter: ResponseFormatter,
        max_tracked_events: int = 1024,
    ):
        self.engine = engine
        self.formatter = formatter
        self._handlers: dict[str, CommandHandler] = {
            "price": self._handle_price,
            "convert": self._handle_convert,
            "robux": self._handle_robux,
            "help": self._handle_help,
        }
        self._slots: OrderedDict[str, ResponseSlot] = OrderedDict()
        self._max_tracked_events = max_tracked_events
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def commands(self) -> tuple[str, ...]:
        """Names of the commands this router answers."""
        return tuple(self._handlers)

    @property
    def in_flight(self) -> int:
        """Number of submitted events still being handled."""
        return len(self._tasks)

    def open_slot(self, event: InteractionEvent, responder: Responder) -> ResponseSlot:
        """Return the response slot of an event, creating it on first use.

        A redelivered event gets its original slot back, so an event that was
        already answered stays answered.
        """
        slot = self._slots.get(event.event_id)
        if slot is None:
            slot = ResponseSlot(event.event_id, responder)
            self._slots[event.event_id] = slot
            while len(self._slots) > self._max_tracked_events:
                self._slots.popitem(last=False)
        return slot

    async def dispatch(self, event: InteractionEvent, responder: Responder) -> bool:
        """Handle one command event to completion.

        Unknown command names are ignored without a response.

        Args:
            event: Inbound command event.
            responder: Platform boundary for this event.

        Returns:
            True if the command was recognised, False if it was ignored.
        """
        handler = self._handlers.get(event.command_name)
        if handler is None:
            logger.debug(f"Ignoring unknown command: {event.command_name}")
            return False

        slot = self.open_slot(event, responder)
        if slot.used:
            logger.warning(f"Event {event.event_id} for /{event.command_name} already answered")
            return True

        payload: ResponsePayload
        try:
            payload = await handler(event)
        except CommandError as e:
            logger.info(f"/{event.command_name} from user {event.user_id} failed: {e.message}")
            payload = self.formatter.format_error(e.message)
        except Exception:
            logger.exception(f"Unexpected error handling /{event.command_name}")
            payload = self.formatter.format_error(ERROR_UNEXPECTED)

        await slot.respond(payload)
        return True

    def submit(self, event: InteractionEvent, responder: Responder) -> "asyncio.Task[bool]":
        """Schedule an event on its own task.

        The task is tracked until it finishes; failures are logged from its
        completion callback and aclose() waits for whatever is still running.

        Returns:
            The task handling the event.
        """
        task = asyncio.create_task(
            self.dispatch(event, responder), name=f"command-{event.command_name}-{event.event_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: "asyncio.Task[bool]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Command task {task.get_name()} was cancelled")
            return

        error = task.exception()
        if error is not None:
            logger.error(f"Command task {task.get_name()} failed", exc_info=error)

    async def aclose(self) -> None:
        """Wait for all submitted events to finish."""
        if not self._tasks:
            return
        logger.info(f"Waiting for {len(self._tasks)} command(s) to finish")
        await asyncio.gather(*self._tasks, return_exceptions=True)

    # === Handlers ===

    async def _handle_price(self, event: InteractionEvent) -> EmbedPayload:
        request = parse_price_options(event.options)
        result = await self.engine.quote(request)
        return self.formatter.format_price(result)

    async def _handle_convert(self, event: InteractionEvent) -> EmbedPayload:
        amount = parse_currency_options(event.options)
        converted = await self.engine.convert(amount)
        return self.formatter.format_conversion(amount, converted)

    async def _handle_robux(self, event: InteractionEvent) -> EmbedPayload:
        amount = parse_currency_options(event.options)
        quote = await self.engine.robux_for(amount)
        return self.formatter.format_robux_quote(quote)

    async def _handle_help(self, event: InteractionEvent) -> EmbedPayload:
        return self.formatter.format_help()
