"""
Avatar service.

Resolves a player's avatar from the Telegram profile photo, falling back to
a generated identicon. Resolution is best effort and never fails the caller.
"""

from typing import TYPE_CHECKING

from loguru import logger

from app.config.business_constants import (
    AVATAR_PLACEHOLDER_URL,
    TELEGRAM_FILE_URL,
)


if TYPE_CHECKING:
    from aiogram import Bot


def placeholder_avatar_url(player_id: str) -> str:
    """Deterministic placeholder avatar for a player."""
    return AVATAR_PLACEHOLDER_URL.format(seed=player_id)


class AvatarService:
    """Best-effort avatar resolver backed by the Telegram Bot API."""

    def __init__(self, bot: "Bot") -> None:
        """
        Initialize avatar service.

        Args:
            bot: Telegram bot instance
        """
        self.bot = bot

    async def resolve(self, telegram_id: int) -> str:
        """
        Get avatar URL for a Telegram user.

        Args:
            telegram_id: Telegram user ID

        Returns:
            Profile photo URL, or placeholder if the user has no photo or
            the Bot API call failed
        """
        player_id = str(telegram_id)

        try:
            photos = await self.bot.get_user_profile_photos(
                telegram_id, limit=1
            )
            if not photos.total_count or not photos.photos:
                return placeholder_avatar_url(player_id)

            # Largest size of the newest photo
            file_id = photos.photos[0][-1].file_id
            file = await self.bot.get_file(file_id)
            if not file.file_path:
                return placeholder_avatar_url(player_id)

            return TELEGRAM_FILE_URL.format(
                token=self.bot.token, file_path=file.file_path
            )

        except Exception as e:
            logger.warning(
                f"Using fallback avatar for user {player_id}",
                extra={"telegram_id": telegram_id, "error": str(e)},
            )
            return placeholder_avatar_url(player_id)
