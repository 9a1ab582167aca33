"""
Referral reward calculator.

Pure integer arithmetic for a single referral credit.
"""

from dataclasses import dataclass

from app.services.referral.config import ReferralRewardRules


@dataclass(frozen=True)
class ReferralReward:
    """Reward produced by one new friend."""

    invite_bonus: int
    batch_bonus: int
    total_referrals: int

    @property
    def total(self) -> int:
        """Amount added to both token balance and referral rewards."""
        return self.invite_bonus + self.batch_bonus

    @property
    def completed_batch(self) -> bool:
        """True if this friend completed a batch of friends."""
        return self.batch_bonus > 0


def lifetime_batch_bonus(
    total_referrals: int, rules: ReferralRewardRules
) -> int:
    """
    Cumulative batch bonus earned for a referral count.

    Formula: floor(total_referrals / friends_per_reward) * reward_amount

    Args:
        total_referrals: Number of referred friends
        rules: Reward rules

    Returns:
        Lifetime batch bonus
    """
    return (total_referrals // rules.friends_per_reward) * rules.reward_amount


def calculate_referral_reward(
    previous_total: int, rules: ReferralRewardRules | None = None
) -> ReferralReward:
    """
    Calculate reward for the friend that raises the count by one.

    The batch bonus is the increase of the lifetime batch bonus, so it is
    paid exactly once, on the increment that reaches a multiple of
    friends_per_reward.

    Args:
        previous_total: Referral count before this friend
        rules: Reward rules (defaults to business constants)

    Returns:
        ReferralReward for this credit

    Raises:
        ValueError: If previous_total is negative

    Example:
        >>> calculate_referral_reward(9).total
        10500
        >>> calculate_referral_reward(8).total
        500
    """
    if previous_total < 0:
        raise ValueError("Referral count cannot be negative")

    rules = rules or ReferralRewardRules()
    new_total = previous_total + 1
    batch_bonus = (
        lifetime_batch_bonus(new_total, rules)
        - lifetime_batch_bonus(previous_total, rules)
    )

    return ReferralReward(
        invite_bonus=rules.invite_bonus,
        batch_bonus=batch_bonus,
        total_referrals=new_total,
    )
