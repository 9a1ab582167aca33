"""
Bot Initialization - Handlers Module.

Module: handlers.py
Registers all bot handlers.
"""

from aiogram import Dispatcher
from loguru import logger


def register_all_handlers(dp: Dispatcher) -> None:
    """Register all user handlers."""
    from bot.handlers import start

    dp.include_router(start.router)

    logger.info("Handlers registered successfully")
