"""
Referral credit management module.

Records a new friend on the referrer and pays the referral reward as one
optimistic compare-and-swap update of the referrer row.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import REFERRAL_CREDIT_MAX_ATTEMPTS
from app.models.player import Player
from app.repositories.player_repository import PlayerRepository
from app.services.referral.config import ReferralRewardRules
from app.services.referral.reward_calculator import (
    ReferralReward,
    calculate_referral_reward,
)
from app.utils.exceptions import ReferralCreditConflictError


@dataclass(frozen=True)
class ReferralCredit:
    """A referral credit that was applied to a referrer."""

    referrer_id: str
    referrer_telegram_id: int
    friend_id: str
    friend_name: str
    reward: ReferralReward


class ReferralCreditManager:
    """Applies referral credits to referrer records."""

    def __init__(
        self,
        session: AsyncSession,
        rules: ReferralRewardRules | None = None,
        max_attempts: int = REFERRAL_CREDIT_MAX_ATTEMPTS,
    ) -> None:
        """
        Initialize credit manager.

        Args:
            session: Database session
            rules: Reward rules (defaults to business constants)
            max_attempts: Version conflicts tolerated before giving up
        """
        self.session = session
        self.player_repo = PlayerRepository(session)
        self.rules = rules or ReferralRewardRules()
        self.max_attempts = max_attempts

    async def apply_credit(
        self, referrer_id: str, friend_id: str, friend_name: str
    ) -> ReferralCredit | None:
        """
        Credit referrer for a newly referred friend.

        Reads the referrer, computes the new counters and writes them back
        only if the referrer version is unchanged. On a version conflict
        the referrer is read again and the credit recomputed.

        Args:
            referrer_id: Referrer player ID
            friend_id: Newly referred player ID
            friend_name: Friend display name for the notification

        Returns:
            Applied credit, or None if the referrer does not exist or the
            friend was already credited

        Raises:
            ReferralCreditConflictError: If every attempt lost the race
        """
        if referrer_id == friend_id:
            return None

        for attempt in range(1, self.max_attempts + 1):
            referrer = await self.player_repo.get(referrer_id)

            if referrer is None:
                logger.info(
                    "Referrer not found, referral credit skipped",
                    extra={"referrer_id": referrer_id, "friend_id": friend_id},
                )
                return None

            if referrer.has_friend(friend_id):
                logger.info(
                    "Friend already credited",
                    extra={"referrer_id": referrer_id, "friend_id": friend_id},
                )
                return None

            reward = calculate_referral_reward(
                referrer.total_referrals, self.rules
            )

            # Balances are incremented in SQL so game writes to
            # token_balance that do not bump the version are kept.
            updated = await self.player_repo.compare_and_update(
                referrer_id,
                referrer.version,
                friends=[*referrer.friends, friend_id],
                total_referrals=reward.total_referrals,
                referral_rewards=Player.referral_rewards + reward.total,
                token_balance=Player.token_balance + reward.total,
            )

            if updated:
                logger.info(
                    "Referral credit applied",
                    extra={
                        "referrer_id": referrer_id,
                        "friend_id": friend_id,
                        "total_referrals": reward.total_referrals,
                        "invite_bonus": reward.invite_bonus,
                        "batch_bonus": reward.batch_bonus,
                        "attempt": attempt,
                    },
                )
                return ReferralCredit(
                    referrer_id=referrer_id,
                    referrer_telegram_id=referrer.telegram_id,
                    friend_id=friend_id,
                    friend_name=friend_name,
                    reward=reward,
                )

            logger.debug(
                "Referrer changed concurrently, retrying credit",
                extra={"referrer_id": referrer_id, "attempt": attempt},
            )

        logger.warning(
            "Referral credit gave up after version conflicts",
            extra={
                "referrer_id": referrer_id,
                "friend_id": friend_id,
                "attempts": self.max_attempts,
            },
        )
        raise ReferralCreditConflictError(
            f"Referrer {referrer_id} kept changing, credit not applied",
            player_id=referrer_id,
        )
