"""Application entry point.

Main module that initializes and runs the Telegram bot in long-polling mode.
Configures logging, validates startup settings, wires the DI container and
registers the command handlers.
"""

import asyncio
import logging

from telegram.ext import Application, ContextTypes

from .config import Config, config
from .core.container import Container

logger = logging.getLogger(__name__)


def check_startup_config(app_config: Config) -> None:
    """Refuse to start with settings the bot cannot run without.

    Raises:
        RuntimeError: If TELEGRAM_BOT_TOKEN is not set, or an authorized chat
            is required but AUTHORIZED_CHAT_ID is not set.
    """
    if not app_config.bot.bot_token:
        raise RuntimeError("Set TELEGRAM_BOT_TOKEN environment variable")

    if app_config.bot.require_authorized_chat and app_config.bot.authorized_chat_id is None:
        raise RuntimeError("Set AUTHORIZED_CHAT_ID environment variable")


async def log_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log exceptions that escaped a handler, e.g. a failed Telegram send."""
    logger.error(
        f"Unhandled error while processing update {update}: {context.error}",
        exc_info=context.error,
    )


def build_container(app_config: Config) -> Container:
    """Create the DI container loaded with the application configuration."""
    container = Container()
    container.config.from_dict(app_config.to_dict())
    return container


def build_application(app_config: Config, container: Container) -> Application:
    """Build the Telegram application around the container.

    Polling pushes updates onto a bounded queue, which the application
    consumes one update at a time. AWS clients and the command handlers are
    set up in ``post_init``, after start-up, and the clients are closed on
    shutdown.

    Args:
        app_config: Application configuration.
        container: Wired DI container.

    Returns:
        Application whose handlers are registered once it is initialized.
    """

    async def post_init(application: Application) -> None:
        container.init_resources()
        logger.info("AWS clients initialized")
        container.dispatcher().register(application)

    async def post_shutdown(application: Application) -> None:
        container.shutdown_resources()
        logger.info("AWS clients closed")

    app = (
        Application.builder()
        .token(app_config.bot.bot_token)
        .update_queue(asyncio.Queue(maxsize=app_config.bot.update_queue_size))
        .concurrent_updates(False)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    app.add_error_handler(log_error)
    return app


def main() -> None:
    """Main application entry point.

    Initializes logging, checks configuration, builds the application and
    starts long-polling until SIGINT or SIGTERM.

    Raises:
        RuntimeError: If required startup settings are missing.
    """
    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(message)s",
        level=config.bot.log_level.upper(),
    )

    check_startup_config(config)

    if config.bot.authorized_chat_id is None:
        logger.warning("AUTHORIZED_CHAT_ID is not set; every chat may issue commands")

    container = build_container(config)
    app = build_application(config, container)

    logger.info("Telegram bot is running...")
    app.run_polling()


if __name__ == "__main__":
    main()
