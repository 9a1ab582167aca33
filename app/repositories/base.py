"""
Base repository.

Generic data access operations for all repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic operations.

    Provides async database operations for any SQLAlchemy model.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class PlayerRepository(BaseRepository[Player]):
            def __init__(self, session: AsyncSession):
                super().__init__(Player, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(
        self, id: Any, fresh: bool = False
    ) -> ModelType | None:
        """
        Get entity by primary key.

        Args:
            id: Entity ID
            fresh: Reload from the database even if the entity is
                already in the session identity map

        Returns:
            Entity or None if not found
        """
        if not fresh:
            return await self.session.get(self.model, id)

        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, entity: ModelType) -> ModelType:
        """
        Persist a new entity.

        Args:
            entity: Transient entity

        Returns:
            The same entity, flushed
        """
        self.session.add(entity)
        await self.session.flush()
        return entity
