"""
Referral notifications.

Handles notifications for referral events.
"""

from typing import TYPE_CHECKING

from loguru import logger

from app.config.business_constants import TOKEN_SYMBOL


if TYPE_CHECKING:
    from aiogram import Bot

    from app.services.referral.credit_manager import ReferralCredit


def format_referral_credit_message(credit: "ReferralCredit") -> str:
    """
    Build referrer notification text.

    Args:
        credit: Applied referral credit

    Returns:
        Message text
    """
    reward = credit.reward
    text = (
        f"🎉 Новый друг ({credit.friend_name}) присоединился по вашему коду!\n"
        f"Вы получили +{reward.invite_bonus} {TOKEN_SYMBOL}!"
    )
    if reward.completed_batch:
        text += (
            f"\n\n🏆 Уже {reward.total_referrals} друзей! "
            f"Бонус за приглашения: +{reward.batch_bonus} {TOKEN_SYMBOL}"
        )
    return text


async def notify_referral_credit(
    bot: "Bot",
    credit: "ReferralCredit",
) -> bool:
    """
    Notify referrer about a new friend and the reward credited.

    Delivery failures are logged and not retried.

    Args:
        bot: Telegram bot instance
        credit: Applied referral credit

    Returns:
        True if notification sent successfully
    """
    try:
        await bot.send_message(
            credit.referrer_telegram_id,
            format_referral_credit_message(credit),
        )

        logger.info(
            "Referral credit notification sent",
            extra={
                "referrer_id": credit.referrer_id,
                "friend_id": credit.friend_id,
            },
        )
        return True

    except Exception as e:
        logger.warning(
            "Failed to send referral credit notification",
            extra={
                "referrer_id": credit.referrer_id,
                "error": str(e),
            },
        )
        return False
