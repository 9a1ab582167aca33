"""
Onboarding service.

Handles the /start command on the data side: registers first-time players,
attaches a late referrer to returning players, credits referrers and
backfills missing avatars.
"""

from dataclasses import dataclass
from typing import Literal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.player import Player
from app.repositories.player_repository import PlayerRepository
from app.services.avatar_service import AvatarService
from app.services.referral.config import ReferralRewardRules
from app.services.referral.credit_manager import (
    ReferralCredit,
    ReferralCreditManager,
)
from app.services.referral.tokens import parse_referral_token
from app.utils.exceptions import PlayerAlreadyExistsError, PlayerStoreError
from app.utils.formatters import build_display_name, format_username


# created: first /start; attributed: returning player got a late referrer;
# returning: nothing about attribution changed
OnboardingOutcome = Literal["created", "attributed", "returning"]


@dataclass(frozen=True)
class ArrivalProfile:
    """Telegram identity of the player who sent /start."""

    telegram_id: int
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None

    @property
    def player_id(self) -> str:
        """Player ID derived from Telegram ID."""
        return str(self.telegram_id)

    @property
    def display_name(self) -> str:
        """Display name with deterministic fallback."""
        return build_display_name(
            self.first_name, self.last_name, self.player_id
        )


@dataclass(frozen=True)
class OnboardingResult:
    """Outcome of one onboarding event."""

    player: Player
    outcome: OnboardingOutcome
    credit: ReferralCredit | None = None

    @property
    def is_new_player(self) -> bool:
        """True if this event created the player."""
        return self.outcome == "created"


class OnboardingService:
    """
    Onboarding service.

    One instance serves one update and owns its session transaction:
    onboard() commits on success and rolls back on any store failure, so a
    failed event never leaves a half-applied referral credit behind.
    """

    def __init__(
        self,
        session: AsyncSession,
        avatar_service: AvatarService,
        rules: ReferralRewardRules | None = None,
    ) -> None:
        """
        Initialize onboarding service.

        Args:
            session: Database session
            avatar_service: Avatar resolver
            rules: Referral reward rules
        """
        self.session = session
        self.avatar_service = avatar_service
        self.player_repo = PlayerRepository(session)
        self.credit_manager = ReferralCreditManager(session, rules=rules)

    async def onboard(
        self,
        profile: ArrivalProfile,
        referral_token: str | None = None,
    ) -> OnboardingResult:
        """
        Process /start for a player.

        Args:
            profile: Arriving player's Telegram identity
            referral_token: Raw /start argument, if any

        Returns:
            OnboardingResult with the player's current record and the
            referral credit applied, if any

        Raises:
            PlayerStoreError: If the database could not be read or written
        """
        try:
            result = await self._onboard(profile, referral_token)
            await self.session.commit()
        except PlayerStoreError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"Onboarding failed on database error: {e}",
                extra={
                    "player_id": profile.player_id,
                    "error_type": type(e).__name__,
                },
            )
            raise PlayerStoreError(
                "Player store unavailable", player_id=profile.player_id
            ) from e

        logger.info(
            "Onboarding completed",
            extra={
                "player_id": profile.player_id,
                "outcome": result.outcome,
                "credited_referrer": (
                    result.credit.referrer_id if result.credit else None
                ),
            },
        )
        return result

    async def _onboard(
        self, profile: ArrivalProfile, referral_token: str | None
    ) -> OnboardingResult:
        player_id = profile.player_id
        referrer_id = parse_referral_token(referral_token, arriving_id=player_id)

        player = await self.player_repo.get(player_id)

        if player is None:
            result = await self._register(profile, referrer_id)
            if result is not None:
                return result

            # Another event created the player first
            player = await self.player_repo.get(player_id)
            if player is None:
                raise PlayerStoreError(
                    "Player missing after concurrent creation",
                    player_id=player_id,
                )

        if player.referred_by is None and referrer_id is not None:
            return await self._attach_referrer(player, referrer_id)

        return await self._welcome_back(player, profile)

    async def _register(
        self, profile: ArrivalProfile, referrer_id: str | None
    ) -> OnboardingResult | None:
        """Create first-time player; None if it already exists."""
        avatar_url = await self.avatar_service.resolve(profile.telegram_id)

        player = Player.new(
            player_id=profile.player_id,
            telegram_id=profile.telegram_id,
            display_name=profile.display_name,
            avatar_url=avatar_url,
            username=format_username(profile.username),
            referred_by=referrer_id,
        )

        try:
            await self.player_repo.create(player)
        except PlayerAlreadyExistsError:
            return None

        logger.info(
            "Player registered",
            extra={
                "player_id": player.id,
                "has_referrer": referrer_id is not None,
            },
        )

        credit = None
        if referrer_id is not None:
            credit = await self.credit_manager.apply_credit(
                referrer_id, player.id, player.display_name
            )

        return OnboardingResult(player=player, outcome="created", credit=credit)

    async def _attach_referrer(
        self, player: Player, referrer_id: str
    ) -> OnboardingResult:
        """Late attribution of a player who first started without a token."""
        attached = await self.player_repo.set_referred_by_if_absent(
            player.id, referrer_id
        )
        if not attached:
            logger.info(
                "Late attribution lost to a concurrent event",
                extra={"player_id": player.id, "referrer_id": referrer_id},
            )
            current = await self.player_repo.get(player.id)
            return OnboardingResult(player=current or player, outcome="returning")

        # Skipped by the credit manager when the referrer never started the bot
        credit = await self.credit_manager.apply_credit(
            referrer_id, player.id, player.display_name
        )
        current = await self.player_repo.get(player.id)

        logger.info(
            "Referrer attached to returning player",
            extra={
                "player_id": player.id,
                "referrer_id": referrer_id,
                "credited": credit is not None,
            },
        )
        return OnboardingResult(
            player=current or player, outcome="attributed", credit=credit
        )

    async def _welcome_back(
        self, player: Player, profile: ArrivalProfile
    ) -> OnboardingResult:
        """Returning player: only a missing avatar is filled in."""
        if not player.avatar_url:
            avatar_url = await self.avatar_service.resolve(profile.telegram_id)
            if await self.player_repo.backfill_avatar(player.id, avatar_url):
                logger.debug(
                    "Avatar backfilled",
                    extra={"player_id": player.id},
                )
                player = await self.player_repo.get(player.id) or player

        return OnboardingResult(player=player, outcome="returning")
