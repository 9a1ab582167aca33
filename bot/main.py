"""
Bot main entry point.

Initializes and runs the Telegram bot with aiogram 3.x.

Initialization is delegated to modular components in the
bot/initialization/ directory.
"""

import asyncio
import sys
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from loguru import logger


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.database import async_session_maker  # noqa: E402
from app.config.settings import settings  # noqa: E402
from app.http_health_server import start_health_server  # noqa: E402
from bot.initialization.handlers import register_all_handlers  # noqa: E402
from bot.initialization.logging import setup_logging  # noqa: E402
from bot.initialization.middlewares import register_middlewares  # noqa: E402
from bot.initialization.shutdown import shutdown_handler  # noqa: E402


async def main() -> None:
    """Initialize and run the bot."""
    setup_logging()

    # No global parse_mode: dynamic texts with underscores would break
    # Markdown, handlers set it explicitly where needed.
    bot = Bot(
        token=settings.telegram_bot_token,
        default=DefaultBotProperties(),
    )
    dp = Dispatcher()

    register_middlewares(dp, async_session_maker)
    register_all_handlers(dp)

    # Test bot connection
    try:
        bot_info = await bot.get_me()
        logger.info(f"Bot connected: @{bot_info.username} (ID: {bot_info.id})")

        # Referral links need the bot username
        if not settings.telegram_bot_username:
            settings.telegram_bot_username = bot_info.username
            logger.info(f"Set bot username to: {bot_info.username}")
    except Exception as e:
        logger.error(f"Failed to connect to Telegram API: {e}")
        raise

    health_runner = None
    try:
        health_runner = await start_health_server(
            host=settings.health_check_host,
            port=settings.health_check_port,
        )
    except OSError as e:
        logger.warning(f"Failed to start health check server: {e}")

    try:
        logger.info("Starting polling...")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    except Exception as e:
        logger.exception(f"Polling error: {e}")
        raise
    finally:
        await shutdown_handler(health_runner)
        await bot.session.close()


def run() -> None:
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"Bot crashed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
