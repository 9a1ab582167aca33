"""
Formatters utility.

Utility functions for formatting player data in the app layer.
"""


def build_display_name(
    first_name: str | None, last_name: str | None, player_id: str
) -> str:
    """
    Build player display name from Telegram profile fields.

    Args:
        first_name: Telegram first name
        last_name: Telegram last name
        player_id: Player ID for the fallback name

    Returns:
        "First Last", or "Игрок {player_id}" if both are empty
    """
    parts = [p.strip() for p in (first_name, last_name) if p and p.strip()]
    return " ".join(parts) or f"Игрок {player_id}"


def format_username(username: str | None) -> str | None:
    """
    Format Telegram handle as @username.

    Args:
        username: Telegram username with or without @

    Returns:
        "@username" or None
    """
    if not username:
        return None
    return f"@{username.lstrip('@')}"
