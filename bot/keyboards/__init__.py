"""
Keyboards.

Telegram inline keyboards.
"""

from bot.keyboards.inline import build_share_url, launch_game_keyboard

__all__ = [
    "build_share_url",
    "launch_game_keyboard",
]
