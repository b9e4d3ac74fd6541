"""Telegram command handlers.

The dispatcher owns the provisioner and config store it delegates to and is
registered on the Telegram application by ``main``. Every handler answers in
the chat it was called from. Provisioning and config failures are reported
in the chat; only a failed send escapes to the application error handler.
"""

import asyncio
import logging

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from ..exceptions import CommandUsageError, MissingPrerequisiteError
from ..services.config_store import ConfigStore, derive_config_key
from ..services.provisioner import Provisioner, validate_function_name
from .messages import (
    ALIVE_MESSAGE,
    CONFIG_NOT_FOUND_MESSAGE,
    CONFIG_UPDATE_ERROR_MESSAGE,
    CONFIG_UPDATED_MESSAGE,
    CREATED_MESSAGE,
    CREATING_MESSAGE,
    FUNCTION_URL_MESSAGE,
    NEWLAMBDA_USAGE,
    NOT_AUTHORIZED_MESSAGE,
    NOT_STORED_MESSAGE,
    PREREQUISITE_MISSING_MESSAGE,
    PROVISIONING_ERROR_MESSAGE,
    STORED_MESSAGE,
    UNKNOWN_ENDPOINT,
    UPDATECONFIG_USAGE,
)

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Routes chat commands to the provisioner and the config store.

    Responsibilities:
    - Gate every update on the authorized chat, when one is configured
    - /newlambda: provision a function and report progress step by step
    - /updateconfig: validate arguments and update an existing record
    - Answer anything else with a liveness message
    """

    def __init__(
        self,
        provisioner: Provisioner,
        config_store: ConfigStore,
        authorized_chat_id: int | None = None,
        store_enabled: bool = True,
    ):
        """Initialize dispatcher.

        Args:
            provisioner: Service creating Lambda functions.
            config_store: Store of config records.
            authorized_chat_id: Only chat allowed to use the bot, None allows all.
            store_enabled: Record new functions in the config store.
        """
        self.provisioner = provisioner
        self.config_store = config_store
        self.authorized_chat_id = authorized_chat_id
        self.store_enabled = store_enabled

    def register(self, application: Application) -> None:
        """Add the command handlers and the liveness fallback to the application."""
        application.add_handler(CommandHandler("newlambda", self.newlambda))
        application.add_handler(CommandHandler("updateconfig", self.updateconfig))
        application.add_handler(MessageHandler(filters.ALL, self.liveness))

    def is_authorized(self, chat_id: int) -> bool:
        """Check a chat against the authorized chat id.

        Args:
            chat_id: Telegram chat id.

        Returns:
            True if no gate is configured or the chat matches it.
        """
        if self.authorized_chat_id is None:
            return True
        return chat_id == self.authorized_chat_id

    async def _send(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, text: str) -> None:
        await context.bot.send_message(chat_id=chat_id, text=text)

    async def _admit(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> int | None:
        """Return the chat id of an authorized update, replying to rejected ones."""
        if not update.effective_chat:
            return None

        chat_id = update.effective_chat.id
        if not self.is_authorized(chat_id):
            logger.warning(f"Rejected update from unauthorized chat {chat_id}")
            await self._send(context, chat_id, NOT_AUTHORIZED_MESSAGE)
            return None

        return chat_id

    async def newlambda(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /newlambda [name].

        Provisions a function and reports, in order: creation, the public URL
        and whether the config record was stored.

        Args:
            update: Telegram update object containing message data.
            context: Bot context with the command arguments.
        """
        chat_id = await self._admit(update, context)
        if chat_id is None:
            return

        logger.info(f"Received /newlambda command from {chat_id}")

        try:
            function_name = None
            if context.args:
                function_name = validate_function_name(context.args[0])
            self.provisioner.check_prerequisites()
        except CommandUsageError as e:
            await self._send(context, chat_id, NEWLAMBDA_USAGE.format(error=e))
            return
        except MissingPrerequisiteError as e:
            logger.error(f"Cannot provision: {e}")
            await self._send(
                context, chat_id, PREREQUISITE_MISSING_MESSAGE.format(error=e, hint=e.hint)
            )
            return

        await self._send(context, chat_id, CREATING_MESSAGE)

        async def report_created(created_name: str) -> None:
            await self._send(context, chat_id, CREATED_MESSAGE.format(function_name=created_name))

        try:
            provisioned = await self.provisioner.provision(function_name, on_created=report_created)
            await self._send(
                context,
                chat_id,
                FUNCTION_URL_MESSAGE.format(function_url=provisioned.function_url),
            )

            if not self.store_enabled:
                return

            stored = await asyncio.to_thread(
                self.config_store.write, provisioned.function_url, provisioned.function_name
            )
            if stored:
                key = derive_config_key(provisioned.function_url)
                await self._send(context, chat_id, STORED_MESSAGE.format(key=key))
            else:
                await self._send(context, chat_id, NOT_STORED_MESSAGE)

        except MissingPrerequisiteError as e:
            logger.error(f"Cannot provision: {e}")
            await self._send(
                context, chat_id, PREREQUISITE_MISSING_MESSAGE.format(error=e, hint=e.hint)
            )
        except Exception as e:
            logger.exception(f"Error creating Lambda function: {e}")
            await self._send(context, chat_id, PROVISIONING_ERROR_MESSAGE.format(error=e))

    async def updateconfig(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /updateconfig <key-or-url> <value>.

        Args:
            update: Telegram update object containing message data.
            context: Bot context with the command arguments.
        """
        chat_id = await self._admit(update, context)
        if chat_id is None:
            return

        args = context.args or []
        if len(args) != 2:
            await self._send(context, chat_id, UPDATECONFIG_USAGE)
            return

        try:
            key = derive_config_key(args[0])
            value = int(args[1])
        except ValueError:
            await self._send(context, chat_id, UPDATECONFIG_USAGE)
            return

        logger.info(f"Received /updateconfig {key} {value} from {chat_id}")

        try:
            record = await asyncio.to_thread(self.config_store.update, key, value)

            if record is None:
                await self._send(context, chat_id, CONFIG_NOT_FOUND_MESSAGE.format(key=key))
                return

            await self._send(
                context,
                chat_id,
                CONFIG_UPDATED_MESSAGE.format(
                    key=record.key,
                    value=record.value,
                    endpoint=record.endpoint or UNKNOWN_ENDPOINT,
                ),
            )

        except Exception as e:
            logger.exception(f"Error updating config '{key}': {e}")
            await self._send(context, chat_id, CONFIG_UPDATE_ERROR_MESSAGE.format(error=e))

    async def liveness(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Answer any other message to show the bot is running."""
        chat_id = await self._admit(update, context)
        if chat_id is None:
            return

        await self._send(context, chat_id, ALIVE_MESSAGE)
