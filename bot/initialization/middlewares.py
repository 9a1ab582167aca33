"""
Bot Initialization - Middlewares Module.

Module: middlewares.py
Registers all bot middlewares in the correct order.
Order is critical for proper request processing.
"""

from aiogram import Dispatcher
from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from bot.middlewares.database import DatabaseMiddleware
from bot.middlewares.error_handler import ErrorHandlerMiddleware


def register_middlewares(
    dp: Dispatcher, session_pool: async_sessionmaker
) -> None:
    """
    Register all middlewares.

    Middleware order is critical:
    1. Error handler (outermost, sees everything)
    2. Database

    Args:
        dp: Dispatcher instance
        session_pool: Session factory for DatabaseMiddleware
    """
    dp.update.middleware(ErrorHandlerMiddleware())
    dp.update.middleware(DatabaseMiddleware(session_pool=session_pool))

    logger.info("Middlewares registered successfully")
