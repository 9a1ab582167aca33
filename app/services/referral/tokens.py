"""
Referral token parsing and link building.

Token format: "ref" followed by an optional "_" or "-" and the numeric
player id, e.g. ref_123456789. Anything else means "no referrer".
"""

import re

from loguru import logger

from app.config.business_constants import REFERRAL_PREFIX, REFERRAL_SEPARATOR


_TOKEN_RE = re.compile(
    rf"^{re.escape(REFERRAL_PREFIX)}[_-]?(?P<player_id>\d{{1,20}})$"
)


def parse_referral_token(
    token: str | None, arriving_id: str | None = None
) -> str | None:
    """
    Extract referrer id from /start argument.

    Supports formats:
    - ref123456
    - ref_123456
    - ref-123456

    Args:
        token: Raw /start argument
        arriving_id: Player who sent /start; a token naming this
            player is ignored

    Returns:
        Referrer player id, or None for missing, malformed or
        self-referencing tokens
    """
    if not token:
        return None

    match = _TOKEN_RE.match(token.strip())
    if not match:
        logger.info(
            "Malformed referral token ignored",
            extra={"token": token[:64]},
        )
        return None

    # Normalise leading zeros so "ref_007" and "ref_7" name the same player
    referrer_id = str(int(match.group("player_id")))

    if arriving_id is not None and referrer_id == arriving_id:
        logger.info(
            "Self-referral ignored",
            extra={"player_id": arriving_id},
        )
        return None

    return referrer_id


def build_referral_token(player_id: str) -> str:
    """Token other players use to name this player as referrer."""
    return f"{REFERRAL_PREFIX}{REFERRAL_SEPARATOR}{player_id}"


def build_referral_link(bot_username: str | None, player_id: str) -> str:
    """
    Generate referral link for player.

    Args:
        bot_username: Bot username (without @)
        player_id: Player ID

    Returns:
        Referral link in format: https://t.me/{bot}?start=ref_{id}
    """
    username = (bot_username or "bot").lstrip("@")
    return f"https://t.me/{username}?start={build_referral_token(player_id)}"
