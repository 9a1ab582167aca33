"""
Database middleware.

Opens one database session per update and hands it to handlers.
Commits after a successful handler, rolls back on database errors.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject, Update
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from bot.messages.error_messages import DATABASE_ERROR


class DatabaseMiddleware(BaseMiddleware):
    """Database middleware - provides a session to handlers."""

    def __init__(self, session_pool: async_sessionmaker) -> None:
        """
        Initialize database middleware.

        Args:
            session_pool: SQLAlchemy async session maker
        """
        super().__init__()
        self.session_pool = session_pool

    async def _send_database_error_message(self, event: TelegramObject) -> None:
        """
        Send database error message to user.

        Args:
            event: Telegram event
        """
        message = event.message if isinstance(event, Update) else event
        if not isinstance(message, Message):
            return

        try:
            await message.answer(DATABASE_ERROR)
        except Exception as e:
            logger.warning(f"Failed to send error message to user: {e}")

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """
        Provide database session to handler.

        Args:
            handler: Next handler
            event: Telegram event
            data: Handler data

        Returns:
            Handler result or None on database error
        """
        async with self.session_pool() as session:
            data["session"] = session
            try:
                result = await handler(event, data)
                await session.commit()
                return result
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"Database error in handler: {e}",
                    extra={"error_type": type(e).__name__},
                )
                await self._send_database_error_message(event)
                return None
