"""
Player repository.

Data access layer for Player model.

Every mutation of an existing player is a conditional UPDATE: the caller
states what it expects the row to look like and learns from the row count
whether its write landed. Nothing here reads a row and writes it back
unconditionally.
"""

from datetime import UTC, datetime
from typing import Any

from loguru import logger
from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.player import Player
from app.repositories.base import BaseRepository
from app.utils.exceptions import PlayerAlreadyExistsError


class PlayerRepository(BaseRepository[Player]):
    """Player repository with conditional updates."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize player repository."""
        super().__init__(Player, session)

    async def get(self, player_id: str) -> Player | None:
        """
        Get current state of a player.

        Always goes to the database so decisions are made on committed
        state, not on a copy cached earlier in the session.

        Args:
            player_id: Player ID

        Returns:
            Player or None
        """
        return await self.get_by_id(player_id, fresh=True)

    async def create(self, player: Player) -> Player:
        """
        Insert a new player.

        Args:
            player: Player built with Player.new()

        Returns:
            Persisted player

        Raises:
            PlayerAlreadyExistsError: If the id is already taken. The
                session is rolled back in that case.
        """
        try:
            return await self.add(player)
        except IntegrityError as e:
            await self.session.rollback()
            logger.info(
                "Player already exists",
                extra={"player_id": player.id, "error": str(e.orig)},
            )
            raise PlayerAlreadyExistsError(
                f"Player {player.id} already exists", player_id=player.id
            ) from e

    async def compare_and_update(
        self, player_id: str, expected_version: int, **values: Any
    ) -> bool:
        """
        Update player only if nobody changed it since it was read.

        Args:
            player_id: Player ID
            expected_version: Version seen by the caller
            **values: Columns to set

        Returns:
            True if the row was updated, False on version conflict
        """
        stmt = (
            update(Player)
            .where(
                Player.id == player_id,
                Player.version == expected_version,
            )
            .values(
                **values,
                version=Player.version + 1,
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        updated = result.rowcount == 1

        if not updated:
            logger.debug(
                "Player version conflict",
                extra={
                    "player_id": player_id,
                    "expected_version": expected_version,
                },
            )
        return updated

    async def set_referred_by_if_absent(
        self, player_id: str, referrer_id: str
    ) -> bool:
        """
        Attach referrer once (first writer wins).

        Args:
            player_id: Player being attributed
            referrer_id: Referrer player ID

        Returns:
            True if this call set referred_by, False if it was already set
        """
        if player_id == referrer_id:
            return False

        stmt = (
            update(Player)
            .where(
                Player.id == player_id,
                Player.referred_by.is_(None),
            )
            .values(
                referred_by=referrer_id,
                version=Player.version + 1,
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def backfill_avatar(self, player_id: str, avatar_url: str) -> bool:
        """
        Set avatar only if player still has none.

        Args:
            player_id: Player ID
            avatar_url: Resolved avatar URL

        Returns:
            True if avatar was written
        """
        stmt = (
            update(Player)
            .where(
                Player.id == player_id,
                or_(Player.avatar_url.is_(None), Player.avatar_url == ""),
            )
            .values(
                avatar_url=avatar_url,
                version=Player.version + 1,
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
