"""
Referral program configuration.

Reward rules are read from settings so deployments can tune them; the
defaults live in app.config.business_constants.
"""

from dataclasses import dataclass

from app.config.business_constants import (
    FRIENDS_PER_REWARD,
    INVITE_BONUS,
    REWARD_AMOUNT,
)


@dataclass(frozen=True)
class ReferralRewardRules:
    """Integer reward rules for one referral credit."""

    invite_bonus: int = INVITE_BONUS
    friends_per_reward: int = FRIENDS_PER_REWARD
    reward_amount: int = REWARD_AMOUNT

    def __post_init__(self) -> None:
        if self.invite_bonus < 0 or self.reward_amount < 0:
            raise ValueError("Referral rewards must be non-negative")
        if self.friends_per_reward <= 0:
            raise ValueError("friends_per_reward must be positive")


def get_reward_rules() -> ReferralRewardRules:
    """Build reward rules from application settings."""
    from app.config.settings import settings

    return ReferralRewardRules(
        invite_bonus=settings.invite_bonus,
        friends_per_reward=settings.friends_per_reward,
        reward_amount=settings.reward_amount,
    )
