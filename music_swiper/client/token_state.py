"""
Access token validity as an explicit state machine.

States are ``ABSENT``, ``VALID`` until some instant, and ``EXPIRED``. Expiry
is detected lazily: nothing changes until a ``ClockChecked`` event reports a
time strictly past the expiry instant.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class TokenStatus(str, Enum):
    ABSENT = "absent"
    VALID = "valid"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TokenState:
    status: TokenStatus
    expires_at_ms: Optional[int] = None

    @classmethod
    def absent(cls) -> "TokenState":
        return cls(TokenStatus.ABSENT)

    @classmethod
    def valid(cls, expires_at_ms: int) -> "TokenState":
        return cls(TokenStatus.VALID, expires_at_ms)

    @classmethod
    def expired(cls, expires_at_ms: Optional[int] = None) -> "TokenState":
        return cls(TokenStatus.EXPIRED, expires_at_ms)

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


@dataclass(frozen=True)
class TokensStored:
    expires_at_ms: int


@dataclass(frozen=True)
class ClockChecked:
    now_ms: int


@dataclass(frozen=True)
class RefreshSucceeded:
    expires_at_ms: int


@dataclass(frozen=True)
class RefreshFailed:
    pass


@dataclass(frozen=True)
class TokensCleared:
    pass


TokenEvent = Union[TokensStored, ClockChecked, RefreshSucceeded, RefreshFailed, TokensCleared]


def advance(state: TokenState, event: TokenEvent) -> TokenState:
    """Return the state that follows ``state`` once ``event`` has happened."""
    if isinstance(event, (TokensStored, RefreshSucceeded)):
        return TokenState.valid(event.expires_at_ms)
    if isinstance(event, (RefreshFailed, TokensCleared)):
        return TokenState.absent()
    if isinstance(event, ClockChecked):
        if state.status is TokenStatus.VALID and state.expires_at_ms is not None:
            if event.now_ms > state.expires_at_ms:
                return TokenState.expired(state.expires_at_ms)
        return state
    raise TypeError(f"Unknown token event: {event!r}")


def state_from_storage(
    access_token: Optional[str], expires_at_ms: Optional[int], now_ms: int
) -> TokenState:
    """Derive the current state from persisted values as observed at ``now_ms``."""
    if not access_token:
        return TokenState.absent()
    if expires_at_ms is None:
        return TokenState.expired()
    return advance(TokenState.valid(expires_at_ms), ClockChecked(now_ms))


__all__ = [
    "ClockChecked",
    "RefreshFailed",
    "RefreshSucceeded",
    "TokenEvent",
    "TokenState",
    "TokenStatus",
    "TokensCleared",
    "TokensStored",
    "advance",
    "state_from_storage",
]
