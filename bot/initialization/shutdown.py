"""
Bot Initialization - Shutdown Module.

Module: shutdown.py
Handles graceful shutdown of the bot.
Stops the health server and closes database connections.
"""

from aiohttp import web
from loguru import logger

from app.http_health_server import stop_health_server


async def shutdown_handler(health_runner: web.AppRunner | None = None) -> None:
    """Handle graceful shutdown."""
    logger.info("Graceful shutdown initiated...")

    if health_runner is not None:
        await stop_health_server(health_runner)

    # Close database connections
    try:
        from app.config.database import engine
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning(f"Error closing database: {e}")

    logger.info("Graceful shutdown complete")
