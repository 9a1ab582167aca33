"""
Start handler.

Handles /start command: player onboarding and referral attribution.
"""

from typing import Any

from aiogram import Bot, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import CommandObject, CommandStart
from aiogram.types import Message
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.services.avatar_service import AvatarService
from app.services.onboarding_service import ArrivalProfile, OnboardingService
from app.services.referral import (
    build_referral_link,
    get_reward_rules,
    notify_referral_credit,
)
from app.utils.exceptions import PlayerStoreError
from bot.keyboards.inline import launch_game_keyboard
from bot.messages import START_FAILED, format_launch_invitation


router = Router()


@router.message(CommandStart())
async def cmd_start(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    bot: Bot,
) -> None:
    """
    Handle /start command with referral token support.

    Args:
        message: Telegram message
        command: Parsed command (args holds the referral token)
        session: Database session
        bot: Bot instance
    """
    if not message.from_user:
        return

    from_user = message.from_user
    referral_token = command.args.strip() if command.args else None

    logger.debug(
        f"Start: user_id={from_user.id}, ref={referral_token}"
    )

    profile = ArrivalProfile(
        telegram_id=from_user.id,
        first_name=from_user.first_name,
        last_name=from_user.last_name,
        username=from_user.username,
    )
    service = OnboardingService(
        session, AvatarService(bot), rules=get_reward_rules()
    )

    try:
        result = await service.onboard(profile, referral_token)
    except PlayerStoreError as e:
        logger.error(
            f"/start failed: {e}",
            extra={"player_id": profile.player_id},
        )
        await _safe_answer(message, START_FAILED)
        return

    referral_link = build_referral_link(
        settings.telegram_bot_username, result.player.id
    )
    await _safe_answer(
        message,
        format_launch_invitation(referral_link),
        parse_mode="Markdown",
        reply_markup=launch_game_keyboard(settings.web_app_url, referral_link),
    )

    if result.credit:
        await notify_referral_credit(bot, result.credit)


async def _safe_answer(message: Message, text: str, **kwargs: Any) -> None:
    """Reply to the player; delivery failures are logged only."""
    try:
        await message.answer(text, **kwargs)
    except TelegramAPIError as e:
        logger.warning(
            f"Failed to reply to /start: {e}",
            extra={"chat_id": message.chat.id},
        )
