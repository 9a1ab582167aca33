"""
Referral services package.

Contains modular services for referral processing:
- config: Reward rules (invite bonus, batch size, batch reward)
- tokens: Referral token parsing and link building
- reward_calculator: Integer reward arithmetic
- credit_manager: Applies a credit to the referrer record
- referral_notifications: Handles notifications
"""

from app.services.referral.config import ReferralRewardRules, get_reward_rules
from app.services.referral.credit_manager import (
    ReferralCredit,
    ReferralCreditManager,
)
from app.services.referral.referral_notifications import (
    format_referral_credit_message,
    notify_referral_credit,
)
from app.services.referral.reward_calculator import (
    ReferralReward,
    calculate_referral_reward,
)
from app.services.referral.tokens import (
    build_referral_link,
    build_referral_token,
    parse_referral_token,
)


__all__ = [
    # Configuration
    "ReferralRewardRules",
    "get_reward_rules",
    # Tokens
    "build_referral_link",
    "build_referral_token",
    "parse_referral_token",
    # Rewards
    "ReferralReward",
    "calculate_referral_reward",
    # Credit
    "ReferralCredit",
    "ReferralCreditManager",
    # Notifications
    "format_referral_credit_message",
    "notify_referral_credit",
]
