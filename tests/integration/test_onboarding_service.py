"""Integration tests for OnboardingService."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.models import Player
from app.repositories.player_repository import PlayerRepository
from app.services.onboarding_service import ArrivalProfile, OnboardingService
from app.utils.exceptions import PlayerStoreError


ALICE = ArrivalProfile(telegram_id=100, first_name="Alice")
BOB = ArrivalProfile(telegram_id=200, first_name="Bob", username="bob")
AVATAR_URL = "https://example.com/avatar.png"


async def _load(session_maker, player_id):
    async with session_maker() as s:
        return await s.get(Player, player_id)


async def _player_count(session_maker):
    async with session_maker() as s:
        return await s.scalar(select(func.count()).select_from(Player))


def _db_down():
    return OperationalError("SELECT", {}, Exception("database is locked"))


class TestFirstArrival:
    """Test first /start of a player."""

    @pytest.mark.asyncio
    async def test_two_players_from_empty_store(
        self, session, session_maker, mock_avatar_service
    ):
        """A starts without a token, then B joins with A's link."""
        first = await OnboardingService(session, mock_avatar_service).onboard(
            ALICE
        )

        assert first.outcome == "created"
        alice = await _load(session_maker, "100")
        assert alice.referred_by is None
        assert alice.total_referrals == 0
        assert alice.referral_rewards == 0
        assert alice.token_balance == 0

        second = await OnboardingService(session, mock_avatar_service).onboard(
            BOB, "ref_100"
        )

        assert second.outcome == "created"
        assert second.credit.referrer_id == "100"
        bob = await _load(session_maker, "200")
        assert bob.referred_by == "100"
        alice = await _load(session_maker, "100")
        assert alice.total_referrals == 1
        assert alice.friends == ["200"]
        assert alice.referral_rewards == 500
        assert alice.token_balance == 500

    @pytest.mark.asyncio
    async def test_without_token(
        self, session, session_maker, mock_avatar_service
    ):
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB)

        assert result.outcome == "created"
        assert result.is_new_player
        assert result.credit is None
        bob = await _load(session_maker, "200")
        assert bob.telegram_id == 200
        assert bob.display_name == "Bob"
        assert bob.username == "@bob"
        assert bob.avatar_url == AVATAR_URL
        assert bob.token_balance == 0
        assert bob.click_power == 1
        assert bob.energy == bob.max_energy == 500
        assert bob.referred_by is None
        assert bob.friends == []

    @pytest.mark.asyncio
    async def test_fallback_display_name(
        self, session, session_maker, mock_avatar_service
    ):
        service = OnboardingService(session, mock_avatar_service)

        await service.onboard(ArrivalProfile(telegram_id=300))

        player = await _load(session_maker, "300")
        assert player.display_name == "Игрок 300"

    @pytest.mark.asyncio
    async def test_referred_friend_credits_referrer(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(100)
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB, "ref_100")

        assert result.outcome == "created"
        assert result.credit.referrer_id == "100"
        assert result.credit.friend_name == "Bob"
        assert result.credit.reward.total == 500
        bob = await _load(session_maker, "200")
        assert bob.referred_by == "100"
        alice = await _load(session_maker, "100")
        assert alice.friends == ["200"]
        assert alice.total_referrals == 1
        assert alice.token_balance == 500
        assert alice.referral_rewards == 500

    @pytest.mark.asyncio
    async def test_self_referral_ignored(
        self, session, session_maker, mock_avatar_service
    ):
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(ALICE, "ref_100")

        assert result.outcome == "created"
        assert result.credit is None
        alice = await _load(session_maker, "100")
        assert alice.referred_by is None
        assert alice.friends == []

    @pytest.mark.asyncio
    async def test_dangling_token_recorded(
        self, session, session_maker, mock_avatar_service
    ):
        """Unknown referrer is remembered but nobody is credited."""
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB, "ref_999")

        assert result.outcome == "created"
        assert result.credit is None
        bob = await _load(session_maker, "200")
        assert bob.referred_by == "999"
        assert await _load(session_maker, "999") is None
        assert await _player_count(session_maker) == 1

    @pytest.mark.asyncio
    async def test_malformed_token_ignored(
        self, session, session_maker, mock_avatar_service
    ):
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB, "promo2024")

        assert result.outcome == "created"
        bob = await _load(session_maker, "200")
        assert bob.referred_by is None


class TestReturningPlayer:
    """Test /start of a player who already exists."""

    @pytest.mark.asyncio
    async def test_replay_is_idempotent(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(100)
        await OnboardingService(session, mock_avatar_service).onboard(
            BOB, "ref_100"
        )

        result = await OnboardingService(session, mock_avatar_service).onboard(
            BOB, "ref_100"
        )

        assert result.outcome == "returning"
        assert result.credit is None
        alice = await _load(session_maker, "100")
        assert alice.total_referrals == 1
        assert alice.token_balance == 500
        assert await _player_count(session_maker) == 2

    @pytest.mark.asyncio
    async def test_returning_player_keeps_state(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(200, display_name="Bob", token_balance=4200)
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(
            ArrivalProfile(telegram_id=200, first_name="Robert")
        )

        assert result.outcome == "returning"
        bob = await _load(session_maker, "200")
        assert bob.display_name == "Bob"
        assert bob.token_balance == 4200
        mock_avatar_service.resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_late_attribution(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(100)
        await create_player(200)
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB, "ref_100")

        assert result.outcome == "attributed"
        assert result.credit.reward.total == 500
        assert result.player.referred_by == "100"
        alice = await _load(session_maker, "100")
        assert alice.friends == ["200"]
        assert alice.token_balance == 500

    @pytest.mark.asyncio
    async def test_first_referrer_wins(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(100)
        await create_player(300)
        await create_player(200, referred_by="100")
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB, "ref_300")

        assert result.outcome == "returning"
        assert result.credit is None
        bob = await _load(session_maker, "200")
        assert bob.referred_by == "100"
        carol = await _load(session_maker, "300")
        assert carol.total_referrals == 0
        assert carol.token_balance == 0

    @pytest.mark.asyncio
    async def test_late_attribution_to_unknown_referrer(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        """Unknown referrer is recorded once, nobody is credited."""
        await create_player(200)
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB, "ref_999")

        assert result.outcome == "attributed"
        assert result.credit is None
        bob = await _load(session_maker, "200")
        assert bob.referred_by == "999"
        assert await _player_count(session_maker) == 1

    @pytest.mark.asyncio
    async def test_unknown_referrer_blocks_later_attribution(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(100)
        await create_player(200)
        await OnboardingService(session, mock_avatar_service).onboard(
            BOB, "ref_999"
        )

        result = await OnboardingService(session, mock_avatar_service).onboard(
            BOB, "ref_100"
        )

        assert result.outcome == "returning"
        assert result.credit is None
        alice = await _load(session_maker, "100")
        assert alice.total_referrals == 0

    @pytest.mark.asyncio
    async def test_mutual_referral_allowed(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        """A friend may later refer the player who invited them."""
        await create_player(100)
        await OnboardingService(session, mock_avatar_service).onboard(
            BOB, "ref_100"
        )

        result = await OnboardingService(session, mock_avatar_service).onboard(
            ALICE, "ref_200"
        )

        assert result.outcome == "attributed"
        alice = await _load(session_maker, "100")
        assert alice.referred_by == "200"
        bob = await _load(session_maker, "200")
        assert bob.friends == ["100"]

    @pytest.mark.asyncio
    async def test_missing_avatar_backfilled(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(200, avatar_url=None)
        service = OnboardingService(session, mock_avatar_service)

        result = await service.onboard(BOB)

        assert result.outcome == "returning"
        assert result.player.avatar_url == AVATAR_URL
        bob = await _load(session_maker, "200")
        assert bob.avatar_url == AVATAR_URL

    @pytest.mark.asyncio
    async def test_existing_avatar_kept(
        self, session, session_maker, create_player, mock_avatar_service
    ):
        await create_player(200, avatar_url="https://example.com/old.png")
        service = OnboardingService(session, mock_avatar_service)

        await service.onboard(BOB)

        bob = await _load(session_maker, "200")
        assert bob.avatar_url == "https://example.com/old.png"
        mock_avatar_service.resolve.assert_not_awaited()


class TestFailures:
    """Test store failures and races."""

    @pytest.mark.asyncio
    async def test_store_unavailable(
        self, session, mock_avatar_service, monkeypatch
    ):
        service = OnboardingService(session, mock_avatar_service)
        monkeypatch.setattr(
            service.player_repo, "get", AsyncMock(side_effect=_db_down())
        )

        with pytest.raises(PlayerStoreError) as exc_info:
            await service.onboard(BOB)

        assert exc_info.value.player_id == "200"

    @pytest.mark.asyncio
    async def test_failed_credit_rolls_back_registration(
        self, session, session_maker, create_player, mock_avatar_service,
        monkeypatch,
    ):
        """A failure after the insert leaves neither the friend nor a credit."""
        await create_player(100)
        service = OnboardingService(session, mock_avatar_service)
        monkeypatch.setattr(
            service.credit_manager,
            "apply_credit",
            AsyncMock(side_effect=_db_down()),
        )

        with pytest.raises(PlayerStoreError):
            await service.onboard(BOB, "ref_100")

        assert await _load(session_maker, "200") is None
        alice = await _load(session_maker, "100")
        assert alice.total_referrals == 0
        assert alice.token_balance == 0

    @pytest.mark.asyncio
    async def test_creation_race_falls_back_to_existing(
        self, session, session_maker, create_player, mock_avatar_service,
        monkeypatch,
    ):
        """Player created by a concurrent event is treated as returning."""
        await create_player(100)
        await create_player(200)
        service = OnboardingService(session, mock_avatar_service)
        real_get = service.player_repo.get
        calls = 0

        async def get_missing_once(player_id):
            nonlocal calls
            calls += 1
            if calls == 1:
                return None
            return await real_get(player_id)

        monkeypatch.setattr(service.player_repo, "get", get_missing_once)

        result = await service.onboard(BOB, "ref_100")

        assert result.outcome == "attributed"
        assert await _player_count(session_maker) == 2
        alice = await _load(session_maker, "100")
        assert alice.total_referrals == 1

    @pytest.mark.asyncio
    async def test_late_attribution_race_lost(
        self, session, session_maker, create_player, mock_avatar_service,
        monkeypatch,
    ):
        """Event that loses the referred_by write credits nobody."""
        await create_player(100)
        await create_player(300)
        await create_player(200)
        service = OnboardingService(session, mock_avatar_service)
        real_set = service.player_repo.set_referred_by_if_absent

        async def set_after_competitor(player_id, referrer_id):
            # Another /start of the same player commits first
            async with session_maker() as other:
                await PlayerRepository(other).set_referred_by_if_absent(
                    player_id, "300"
                )
                await other.commit()
            return await real_set(player_id, referrer_id)

        monkeypatch.setattr(
            service.player_repo,
            "set_referred_by_if_absent",
            set_after_competitor,
        )

        result = await service.onboard(BOB, "ref_100")

        assert result.outcome == "returning"
        assert result.credit is None
        assert result.player.referred_by == "300"
        bob = await _load(session_maker, "200")
        assert bob.referred_by == "300"
        alice = await _load(session_maker, "100")
        assert alice.total_referrals == 0
        assert alice.token_balance == 0
        assert alice.friends == []
