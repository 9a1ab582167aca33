"""
User-facing message templates and formatting functions.

This module contains all user-facing messages and helper functions
for formatting data in a consistent way across the bot.
"""

# ============================================================================
# MESSAGE TEMPLATES
# ============================================================================

INTRO_MESSAGE = (
    "🔥 Это *EagleZone* — кликер нового уровня.\n\n"
    "💸 Тут можно реально получить $EAGLE, но вход только по коду.\n\n"
    "🚀 У тебя есть код? Тогда вперед:"
)

REFERRAL_LINK_MESSAGE = (
    "\n\n👥 Твоя ссылка для друзей:\n"
    "`{referral_link}`"
)

SHARE_TEXT = "Залетай в EagleZone по моему коду 🦅"

# ============================================================================
# BUTTONS
# ============================================================================

LAUNCH_GAME_BUTTON = "🚀 Запустить игру"
INVITE_FRIEND_BUTTON = "📨 Пригласить друга"


# ============================================================================
# FORMATTERS
# ============================================================================

def format_launch_invitation(referral_link: str) -> str:
    """
    Format /start reply with the player's own referral link.

    Args:
        referral_link: Link that names this player as referrer

    Returns:
        Markdown message text
    """
    return INTRO_MESSAGE + REFERRAL_LINK_MESSAGE.format(
        referral_link=referral_link
    )
