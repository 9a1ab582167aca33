"""
Exception types for onboarding and referral processing.

Store failures propagate to the handler as PlayerStoreError. Attribution
conflicts, dangling and malformed referral tokens are not exceptions: the
services report them through return values and logs.
"""


class PlayerStoreError(Exception):
    """Raised when the player store cannot be read or written."""

    def __init__(self, message: str, player_id: str | None = None) -> None:
        super().__init__(message)
        self.player_id = player_id


class PlayerAlreadyExistsError(PlayerStoreError):
    """Raised when creating a player whose id is already taken."""


class ReferralCreditConflictError(PlayerStoreError):
    """Raised when a referrer update keeps losing the version race."""

