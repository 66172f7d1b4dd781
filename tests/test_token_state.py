try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from music_swiper.client.token_state import (
    ClockChecked,
    RefreshFailed,
    RefreshSucceeded,
    TokensCleared,
    TokenState,
    TokenStatus,
    TokensStored,
    advance,
    state_from_storage,
)


def test_storing_tokens_makes_state_valid():
    state = advance(TokenState.absent(), TokensStored(5_000))

    assert state == TokenState.valid(5_000)
    assert state.is_valid


@pytest.mark.parametrize(
    "now_ms, status",
    [(4_999, TokenStatus.VALID), (5_000, TokenStatus.VALID), (5_001, TokenStatus.EXPIRED)],
)
def test_clock_expires_only_strictly_after_deadline(now_ms, status):
    state = advance(TokenState.valid(5_000), ClockChecked(now_ms))

    assert state.status is status


def test_clock_does_not_touch_absent_or_expired_states():
    assert advance(TokenState.absent(), ClockChecked(10)) == TokenState.absent()
    expired = TokenState.expired(1)
    assert advance(expired, ClockChecked(10)) is expired


def test_refresh_outcomes():
    expired = TokenState.expired(1_000)

    assert advance(expired, RefreshSucceeded(9_000)) == TokenState.valid(9_000)
    assert advance(expired, RefreshFailed()) == TokenState.absent()


def test_clearing_from_any_state_is_absent():
    for state in (TokenState.absent(), TokenState.valid(1), TokenState.expired(1)):
        assert advance(state, TokensCleared()) == TokenState.absent()


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        advance(TokenState.absent(), object())  # type: ignore[arg-type]


def test_state_from_storage():
    assert state_from_storage(None, 10, 0).status is TokenStatus.ABSENT
    assert state_from_storage("", 10, 0).status is TokenStatus.ABSENT
    assert state_from_storage("at", None, 0).status is TokenStatus.EXPIRED
    assert state_from_storage("at", 10, 10) == TokenState.valid(10)
    assert state_from_storage("at", 10, 11) == TokenState.expired(10)
