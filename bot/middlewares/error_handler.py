"""
Global Error Handler Middleware.

Catches unhandled exceptions and notifies admins.
Sends friendly message to users - never shows technical details.
"""

import traceback
from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware, Bot
from aiogram.types import CallbackQuery, Message, TelegramObject, Update, User
from loguru import logger

from app.config.settings import settings
from bot.messages.error_messages import GENERIC_ERROR


class ErrorHandlerMiddleware(BaseMiddleware):
    """
    Global error handler middleware.

    - Logs all exceptions
    - Notifies admins with technical details
    - Sends friendly message to user (no technical info!)
    """

    def _get_user(self, event: TelegramObject) -> User | None:
        """Extract user from event."""
        if isinstance(event, Update):
            if event.message:
                return event.message.from_user
            if event.callback_query:
                return event.callback_query.from_user
        elif isinstance(event, Message | CallbackQuery):
            return event.from_user
        return None

    async def _notify_admin(
        self, bot: Bot, user: User | None, error: Exception
    ) -> None:
        """Send technical details to the first configured admin."""
        admin_ids = settings.get_admin_ids()
        if not admin_ids:
            return

        error_trace = traceback.format_exc()[-800:]
        error_trace_escaped = (
            error_trace
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
        )
        user_info = "Unknown"
        if user:
            user_info = f"@{user.username}" if user.username else f"ID: {user.id}"

        error_msg = str(error)[:200].replace("<", "&lt;").replace(">", "&gt;")
        text = (
            f"🚨 <b>CRITICAL ERROR</b>\n\n"
            f"👤 User: {user_info}\n"
            f"❌ Exception: <code>{type(error).__name__}</code>\n"
            f"📝 Message: <code>{error_msg}</code>\n\n"
            f"<pre>{error_trace_escaped}</pre>"
        )
        try:
            await bot.send_message(
                chat_id=admin_ids[0],
                text=text[:4096],
                parse_mode="HTML",
            )
        except Exception as notify_error:
            logger.error(f"Failed to notify admin: {notify_error}")

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Execute middleware."""
        try:
            return await handler(event, data)
        except Exception as e:
            logger.exception(f"Unhandled exception: {e}")

            bot: Bot | None = data.get("bot")
            user = self._get_user(event)

            if bot and user:
                try:
                    await bot.send_message(chat_id=user.id, text=GENERIC_ERROR)
                except Exception as user_notify_error:
                    logger.warning(f"Failed to notify user: {user_notify_error}")

            if bot:
                await self._notify_admin(bot, user, e)

            return None
