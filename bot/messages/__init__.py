"""
Bot Messages Module
Contains all message templates and formatting functions for the bot
"""

from bot.messages.error_messages import (
    DATABASE_ERROR,
    GENERIC_ERROR,
    START_FAILED,
)
from bot.messages.user_messages import (
    INTRO_MESSAGE,
    INVITE_FRIEND_BUTTON,
    LAUNCH_GAME_BUTTON,
    SHARE_TEXT,
    format_launch_invitation,
)

__all__ = [
    # Errors
    "DATABASE_ERROR",
    "GENERIC_ERROR",
    "START_FAILED",
    # User messages
    "INTRO_MESSAGE",
    "INVITE_FRIEND_BUTTON",
    "LAUNCH_GAME_BUTTON",
    "SHARE_TEXT",
    "format_launch_invitation",
]
