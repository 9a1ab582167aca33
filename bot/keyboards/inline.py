"""
Inline keyboards for the game launch message.
"""

from urllib.parse import urlencode

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, WebAppInfo
from aiogram.utils.keyboard import InlineKeyboardBuilder

from bot.messages.user_messages import (
    INVITE_FRIEND_BUTTON,
    LAUNCH_GAME_BUTTON,
    SHARE_TEXT,
)


def build_share_url(referral_link: str) -> str:
    """Telegram share dialog prefilled with the referral link."""
    query = urlencode({"url": referral_link, "text": SHARE_TEXT})
    return f"https://t.me/share/url?{query}"


def launch_game_keyboard(
    web_app_url: str, referral_link: str
) -> InlineKeyboardMarkup:
    """
    Keyboard under the /start reply.

    Args:
        web_app_url: Game Web App URL
        referral_link: Player's own referral link

    Returns:
        InlineKeyboardMarkup with launch and invite buttons
    """
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(
            text=LAUNCH_GAME_BUTTON,
            web_app=WebAppInfo(url=web_app_url),
        )
    )
    builder.row(
        InlineKeyboardButton(
            text=INVITE_FRIEND_BUTTON,
            url=build_share_url(referral_link),
        )
    )

    return builder.as_markup()
