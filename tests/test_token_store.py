try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import asyncio

import pytest

from music_swiper.client import MemoryStorage, TokenRefreshError, TokenStatus, TokenStore
from music_swiper.client.token_store import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    TOKEN_EXPIRY_KEY,
)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingRefresher:
    def __init__(self, *, fail: bool = False, delay: float = 0.0) -> None:
        self.calls: list[str] = []
        self.fail = fail
        self.delay = delay

    async def refresh_access_token(self, refresh_token: str):
        self.calls.append(refresh_token)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise TokenRefreshError("gateway said no")
        return f"refreshed-{len(self.calls)}", 3600


def _store(refresher=None, clock=None, storage=None):
    return TokenStore(
        storage or MemoryStorage(),
        refresher or CountingRefresher(),
        clock=clock or FakeClock(),
    )


def test_store_then_read_back_immediately():
    clock = FakeClock()
    store = _store(clock=clock)

    state = store.store_tokens("at", "rt", 3600)
    tokens = store.get_stored_tokens()

    assert state.status is TokenStatus.VALID
    assert tokens.access_token == "at"
    assert tokens.refresh_token == "rt"
    assert tokens.token_expiry == int(clock.now * 1000) + 3_600_000
    assert store.is_token_expired() is False


def test_expiry_is_strictly_after_deadline():
    clock = FakeClock()
    store = _store(clock=clock)
    store.store_tokens("at", "rt", 60)

    clock.now += 60
    assert store.is_token_expired() is False
    clock.now += 0.01
    assert store.is_token_expired() is True


def test_missing_or_unreadable_expiry_counts_as_expired():
    storage = MemoryStorage({ACCESS_TOKEN_KEY: "at", TOKEN_EXPIRY_KEY: "soon"})
    store = _store(storage=storage)

    assert store.get_stored_tokens().token_expiry is None
    assert store.is_token_expired() is True
    assert _store().is_token_expired() is True


def test_clear_tokens_removes_everything():
    storage = MemoryStorage()
    store = _store(storage=storage)
    store.store_tokens("at", "rt", 3600)

    state = store.clear_tokens()

    assert state.status is TokenStatus.ABSENT
    for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, TOKEN_EXPIRY_KEY):
        assert storage.get_item(key) is None


@pytest.mark.asyncio
async def test_valid_token_is_returned_without_refresh():
    refresher = CountingRefresher()
    store = _store(refresher=refresher)
    store.store_tokens("at", "rt", 3600)

    assert await store.get_valid_token() == "at"
    assert refresher.calls == []


@pytest.mark.asyncio
async def test_no_tokens_means_no_token_and_no_refresh():
    refresher = CountingRefresher()

    assert await _store(refresher=refresher).get_valid_token() is None
    assert refresher.calls == []


@pytest.mark.asyncio
async def test_expired_token_is_refreshed_once():
    clock = FakeClock()
    refresher = CountingRefresher()
    store = _store(refresher=refresher, clock=clock)
    store.store_tokens("at", "rt", 60)
    clock.now += 120

    token = await store.get_valid_token()

    assert token == "refreshed-1"
    assert refresher.calls == ["rt"]
    assert store.get_stored_tokens().refresh_token == "rt"
    assert store.get_stored_tokens().token_expiry == int(clock.now * 1000) + 3_600_000
    assert await store.get_valid_token() == "refreshed-1"
    assert refresher.calls == ["rt"]


@pytest.mark.asyncio
async def test_expired_token_without_refresh_token_yields_none():
    clock = FakeClock()
    storage = MemoryStorage(
        {ACCESS_TOKEN_KEY: "at", TOKEN_EXPIRY_KEY: str(int(clock.now * 1000) - 1)}
    )
    refresher = CountingRefresher()
    store = _store(refresher=refresher, clock=clock, storage=storage)

    assert await store.get_valid_token() is None
    assert refresher.calls == []


@pytest.mark.asyncio
async def test_failed_refresh_yields_none():
    clock = FakeClock()
    refresher = CountingRefresher(fail=True)
    store = _store(refresher=refresher, clock=clock)
    store.store_tokens("at", "rt", 60)
    clock.now += 120

    assert await store.get_valid_token() is None
    assert refresher.calls == ["rt"]


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_refresh():
    clock = FakeClock()
    refresher = CountingRefresher(delay=0.01)
    store = _store(refresher=refresher, clock=clock)
    store.store_tokens("at", "rt", 60)
    clock.now += 120

    tokens = await asyncio.gather(*(store.get_valid_token() for _ in range(5)))

    assert tokens == ["refreshed-1"] * 5
    assert refresher.calls == ["rt"]


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_failed_refresh():
    clock = FakeClock()
    refresher = CountingRefresher(fail=True, delay=0.01)
    store = _store(refresher=refresher, clock=clock)
    store.store_tokens("at", "rt", 60)
    clock.now += 120

    tokens = await asyncio.gather(*(store.get_valid_token() for _ in range(5)))

    assert tokens == [None] * 5
    assert refresher.calls == ["rt"]

    # A later call is a new attempt, not a replay of the failure.
    assert await store.get_valid_token() is None
    assert refresher.calls == ["rt", "rt"]


@pytest.mark.asyncio
async def test_forced_refresh_always_calls_gateway():
    refresher = CountingRefresher()
    store = _store(refresher=refresher)
    store.store_tokens("at", "rt", 3600)

    assert await store.refresh_access_token() == "refreshed-1"
    assert refresher.calls == ["rt"]
