"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Минимальные переменные окружения для тестов
# Используем корректный формат токена Telegram бота для валидации
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456789:ABCdefGHIjklMNOpqrsTUVwxyz123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ADMIN_TELEGRAM_IDS", "")

# Добавить корень проекта в PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from collections.abc import AsyncIterator, Awaitable, Callable  # noqa: E402
from types import SimpleNamespace  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config.database import build_engine, build_session_maker  # noqa: E402
from app.models import Base, Player  # noqa: E402


TEST_AVATAR_URL = "https://example.com/avatar.png"


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with the schema created."""
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Database session for a single test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def create_player(
    session_maker: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Player]]:
    """
    Factory that commits a player in its own session.

    Keyword overrides are applied on top of Player.new() defaults.
    """

    async def _create(telegram_id: int, **overrides: Any) -> Player:
        player = Player.new(
            player_id=str(telegram_id),
            telegram_id=telegram_id,
            display_name=overrides.pop("display_name", f"Player {telegram_id}"),
            avatar_url=overrides.pop("avatar_url", TEST_AVATAR_URL),
        )
        for key, value in overrides.items():
            setattr(player, key, value)

        async with session_maker() as s:
            s.add(player)
            await s.commit()
        return player

    return _create


@pytest.fixture
def mock_avatar_service() -> AsyncMock:
    """AvatarService stand-in that always resolves to a fixed URL."""
    service = AsyncMock()
    service.resolve = AsyncMock(return_value=TEST_AVATAR_URL)
    return service


@pytest.fixture
def mock_bot() -> AsyncMock:
    """Mock Telegram Bot."""
    bot = AsyncMock()
    bot.token = "123456789:ABCdefGHIjklMNOpqrsTUVwxyz123456789"
    bot.send_message = AsyncMock()
    bot.get_user_profile_photos = AsyncMock(
        return_value=SimpleNamespace(total_count=0, photos=[])
    )
    bot.get_file = AsyncMock()
    bot.session = AsyncMock()
    bot.session.close = AsyncMock()
    return bot
