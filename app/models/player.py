"""
Player model.

Represents a Telegram user who started the EagleZone game bot.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.config.business_constants import (
    DEFAULT_CLICK_POWER,
    DEFAULT_ENERGY,
    DEFAULT_MAX_ENERGY,
)
from app.models.base import Base


class Player(Base):
    """Player model - one row per Telegram identity."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint(
            'token_balance >= 0', name='check_player_token_balance_non_negative'
        ),
        CheckConstraint(
            'total_referrals >= 0',
            name='check_player_total_referrals_non_negative'
        ),
        CheckConstraint(
            'referral_rewards >= 0',
            name='check_player_referral_rewards_non_negative'
        ),
        CheckConstraint(
            'referred_by IS NULL OR referred_by <> id',
            name='check_player_no_self_referral'
        ),
    )

    # Primary key: Telegram user id as string
    id: Mapped[str] = mapped_column(String(32), primary_key=True)

    # Telegram data
    telegram_id: Mapped[int] = mapped_column(
        BigInteger, unique=True, index=True, nullable=False
    )
    username: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    display_name: Mapped[str] = mapped_column(
        String(255), nullable=False
    )
    avatar_url: Mapped[str | None] = mapped_column(
        String(1024), nullable=True
    )

    # Game state (owned by the web app, only initialised here)
    token_balance: Mapped[int] = mapped_column(
        BigInteger, default=0, nullable=False
    )
    click_power: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_CLICK_POWER, nullable=False
    )
    energy: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_ENERGY, nullable=False
    )
    max_energy: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_MAX_ENERGY, nullable=False
    )
    last_click_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    # Referral
    # Not a foreign key: a token may name a player who never started the bot
    referred_by: Mapped[str | None] = mapped_column(
        String(32), nullable=True, index=True
    )
    total_referrals: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    referral_rewards: Mapped[int] = mapped_column(
        BigInteger, default=0, nullable=False
    )
    friends: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False
    )

    # Optimistic concurrency counter, bumped by every conditional update
    version: Mapped[int] = mapped_column(
        Integer, default=1, nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    @classmethod
    def new(
        cls,
        player_id: str,
        telegram_id: int,
        display_name: str,
        avatar_url: str | None = None,
        username: str | None = None,
        referred_by: str | None = None,
    ) -> "Player":
        """
        Build a first-time player with zeroed counters.

        Args:
            player_id: Stable player identity
            telegram_id: Numeric Telegram user ID
            display_name: Name shown in the game
            avatar_url: Resolved avatar URL
            username: Telegram @handle
            referred_by: Referrer player ID (never the player itself)

        Returns:
            Transient Player instance

        Raises:
            ValueError: If player would refer itself
        """
        if referred_by is not None and referred_by == player_id:
            raise ValueError("Player cannot refer itself")

        now = datetime.now(UTC)
        return cls(
            id=player_id,
            telegram_id=telegram_id,
            username=username,
            display_name=display_name,
            avatar_url=avatar_url,
            token_balance=0,
            click_power=DEFAULT_CLICK_POWER,
            energy=DEFAULT_ENERGY,
            max_energy=DEFAULT_MAX_ENERGY,
            last_click_time=now,
            referred_by=referred_by,
            total_referrals=0,
            referral_rewards=0,
            friends=[],
            version=1,
            created_at=now,
            updated_at=now,
        )

    def has_friend(self, friend_id: str) -> bool:
        """Check whether friend is already attributed to this player."""
        return friend_id in self.friends

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Player(id={self.id}, display_name={self.display_name}, "
            f"total_referrals={self.total_referrals})>"
        )
