"""Unit tests for the rate limiter adapters."""

from unittest.mock import Mock, patch

import pytest

from app.adapters.rate_limit.factory import create_rate_limiter
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from app.adapters.rate_limit.limits_store import LimitsRateLimiter
from app.core.errors import ConfigurationAppError


class TestInMemorySlidingWindow:
    @pytest.mark.asyncio
    async def test_allows_up_to_limit_in_window(self) -> None:
        clock = Mock(return_value=1000.0)
        limiter = InMemorySlidingWindowRateLimiter(limit=3, window_seconds=60, clock=clock)

        assert (await limiter.limit("k")).success is True
        assert (await limiter.limit("k")).success is True
        result = await limiter.limit("k")
        assert result.success is True
        assert result.remaining == 0

    @pytest.mark.asyncio
    async def test_blocks_when_over_limit(self) -> None:
        clock = Mock(return_value=1000.0)
        limiter = InMemorySlidingWindowRateLimiter(limit=2, window_seconds=60, clock=clock)

        await limiter.limit("k")
        clock.return_value = 1030.0
        await limiter.limit("k")

        blocked = await limiter.limit("k")
        assert blocked.success is False
        assert blocked.remaining == 0
        # The first event leaves the window at 1060
        assert blocked.reset_at == 1060
        assert blocked.retry_after_seconds == 30

    @pytest.mark.asyncio
    async def test_window_trails_current_time(self) -> None:
        clock = Mock(return_value=1000.0)
        limiter = InMemorySlidingWindowRateLimiter(limit=2, window_seconds=60, clock=clock)

        await limiter.limit("k")  # t=1000
        clock.return_value = 1050.0
        await limiter.limit("k")  # t=1050

        # Only the t=1000 event has aged out
        clock.return_value = 1060.0
        assert (await limiter.limit("k")).success is True
        assert (await limiter.limit("k")).success is False

        clock.return_value = 1110.0
        assert (await limiter.limit("k")).success is True

    @pytest.mark.asyncio
    async def test_blocked_attempts_do_not_consume_budget(self) -> None:
        clock = Mock(return_value=1000.0)
        limiter = InMemorySlidingWindowRateLimiter(limit=1, window_seconds=10, clock=clock)

        await limiter.limit("k")
        for _ in range(5):
            assert (await limiter.limit("k")).success is False

        clock.return_value = 1010.0
        assert (await limiter.limit("k")).success is True

    @pytest.mark.asyncio
    async def test_isolated_by_key(self) -> None:
        clock = Mock(return_value=1000.0)
        limiter = InMemorySlidingWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

        assert (await limiter.limit("k1")).success is True
        assert (await limiter.limit("k1")).success is False
        assert (await limiter.limit("k2")).success is True

    @pytest.mark.asyncio
    async def test_reset_clears_state(self) -> None:
        limiter = InMemorySlidingWindowRateLimiter(limit=1, window_seconds=60, clock=Mock(return_value=1.0))

        await limiter.limit("k")
        limiter.reset()

        assert (await limiter.limit("k")).success is True

    @pytest.mark.asyncio
    async def test_empty_identifier_is_rejected(self) -> None:
        limiter = InMemorySlidingWindowRateLimiter(limit=1, window_seconds=60)

        with pytest.raises(ValueError):
            await limiter.limit("")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0, "window_seconds": 60},
        {"limit": 1, "window_seconds": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemorySlidingWindowRateLimiter(**kwargs)
    with pytest.raises(ValueError):
        LimitsRateLimiter(**kwargs)


def test_key_is_namespaced() -> None:
    limiter = InMemorySlidingWindowRateLimiter(limit=1, window_seconds=60, prefix="posts")

    assert limiter.build_key("user_alice") == "posts:user_alice"


class TestLimitsRateLimiter:
    @pytest.mark.asyncio
    async def test_three_per_window_then_blocked(self) -> None:
        limiter = LimitsRateLimiter(limit=3, window_seconds=60, storage_uri="async+memory://")

        results = [await limiter.limit("user_alice") for _ in range(4)]

        assert [r.success for r in results] == [True, True, True, False]
        assert results[0].remaining == 2
        assert results[3].remaining == 0
        assert 0 < results[3].retry_after_seconds <= 60

    @pytest.mark.asyncio
    async def test_authors_do_not_share_budget(self) -> None:
        limiter = LimitsRateLimiter(limit=1, window_seconds=60, storage_uri="async+memory://")

        assert (await limiter.limit("user_alice")).success is True
        assert (await limiter.limit("user_alice")).success is False
        assert (await limiter.limit("user_bob")).success is True

    @pytest.mark.asyncio
    async def test_reset_clears_store(self) -> None:
        limiter = LimitsRateLimiter(limit=1, window_seconds=60, storage_uri="async+memory://")

        await limiter.limit("user_alice")
        await limiter.reset()

        assert (await limiter.limit("user_alice")).success is True

    def test_sync_storage_uri_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            LimitsRateLimiter(limit=1, window_seconds=60, storage_uri="memory://")

    @pytest.mark.asyncio
    async def test_close_leaves_storage_to_limits(self) -> None:
        limiter = LimitsRateLimiter(limit=1, window_seconds=60, storage_uri="async+memory://")
        await limiter.limit("user_alice")

        assert await limiter.close() is None


class TestFactory:
    @patch("app.adapters.rate_limit.factory.settings")
    def test_memory_backend(self, mock_settings) -> None:
        mock_settings.app.rate_limit_backend = "memory"
        mock_settings.app.rate_limit_requests = 3
        mock_settings.app.rate_limit_window_seconds = 60
        mock_settings.app.rate_limit_key_prefix = "ratelimit"

        limiter = create_rate_limiter()

        assert isinstance(limiter, InMemorySlidingWindowRateLimiter)
        assert limiter.window_seconds == 60

    @patch("app.adapters.rate_limit.factory.settings")
    def test_storage_backend(self, mock_settings) -> None:
        mock_settings.app.rate_limit_backend = "storage"
        mock_settings.app.rate_limit_requests = 3
        mock_settings.app.rate_limit_window_seconds = 60
        mock_settings.app.rate_limit_storage_uri = "async+memory://"
        mock_settings.app.rate_limit_key_prefix = "ratelimit"

        assert isinstance(create_rate_limiter(), LimitsRateLimiter)

    @patch("app.adapters.rate_limit.factory.settings")
    def test_unknown_backend(self, mock_settings) -> None:
        mock_settings.app.rate_limit_backend = "carrier-pigeon"

        with pytest.raises(ConfigurationAppError) as exc_info:
            create_rate_limiter()

        assert exc_info.value.code == "rate_limit_unknown_backend"

    @patch("app.adapters.rate_limit.factory.settings")
    def test_sync_storage_uri_is_a_configuration_error(self, mock_settings) -> None:
        mock_settings.app.rate_limit_backend = "storage"
        mock_settings.app.rate_limit_requests = 3
        mock_settings.app.rate_limit_window_seconds = 60
        mock_settings.app.rate_limit_storage_uri = "redis://localhost:6379"
        mock_settings.app.rate_limit_key_prefix = "ratelimit"

        with pytest.raises(ConfigurationAppError) as exc_info:
            create_rate_limiter()

        assert exc_info.value.code == "rate_limit_invalid_storage_uri"
