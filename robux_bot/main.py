"""Application entry point.

Initializes and runs the Telegram bot. Handles both webhook mode (for
production deployment on Railway) and polling mode (for local development).
Configures logging, wires the command router and registers one command
handler per declared command.
"""

import logging

from telegram.ext import Application, CommandHandler

from .bot.handlers import make_command_handler, register_command_menu
from .bot.schema import COMMANDS
from .config import config
from .core.container import Container

# Logging
logging.basicConfig(
    format="%(asctime)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.bot.log_level.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)


def create_container() -> Container:
    """Build the DI container from the loaded configuration."""
    return Container(
        pricing=config.pricing,
        rates=config.rates,
        bot_name=config.bot.bot_name,
    )


def main() -> None:
    """Main application entry point.

    Initializes the Telegram bot application with proper configuration,
    registers command handlers, and starts the bot in either webhook mode
    (production) or polling mode (development).

    Raises:
        RuntimeError: If BOT_TOKEN environment variable is not set.
    """
    if not config.bot.bot_token:
        raise RuntimeError("Set BOT_TOKEN environment variable")

    container = create_container()
    router = container.command_router()
    logger.info(
        f"Pricing with {container.rate_table()} using {config.rates.source} exchange rates"
    )

    # Create application
    app = Application.builder().token(config.bot.bot_token).build()

    async def post_init(application: Application) -> None:
        await register_command_menu(application)

    async def post_shutdown(application: Application) -> None:
        await router.aclose()
        logger.info("All pending commands finished")

    app.post_init = post_init
    app.post_shutdown = post_shutdown

    # Add handlers
    for command in COMMANDS:
        app.add_handler(CommandHandler(command.name, make_command_handler(router, command.name)))

    # Run in webhook or polling mode
    if config.bot.use_webhook:
        path = f"/{config.bot.bot_token}"
        webhook_url = f"https://{config.bot.webhook_domain}{path}"
        logger.info(f"Starting webhook at https://{config.bot.webhook_domain}/<token>")

        app.run_webhook(
            listen=config.bot.listen_host,
            port=config.bot.port,
            url_path=path,
            webhook_url=webhook_url,
        )
    else:
        logger.warning("No public domain found; falling back to long-polling")
        app.run_polling()


if __name__ == "__main__":
    main()
