"""
Client-side token lifecycle.

``TokenStore`` keeps the access token, refresh token and absolute expiry in a
``TokenStorage`` backend and hands out a usable access token on demand,
refreshing it through the gateway once it has expired.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Protocol, Tuple

from music_swiper.client.errors import TokenRefreshError
from music_swiper.client.storage import TokenStorage
from music_swiper.client.token_state import (
    RefreshFailed,
    RefreshSucceeded,
    TokensCleared,
    TokenState,
    TokenStatus,
    TokensStored,
    advance,
    state_from_storage,
)
from music_swiper.models.tokens import StoredTokens

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
TOKEN_EXPIRY_KEY = "token_expiry"


class TokenRefresher(Protocol):
    def refresh_access_token(self, refresh_token: str) -> Awaitable[Tuple[str, int]]: ...


class TokenStore:
    """Persist tokens and serve a valid access token, refreshing at most once at a time."""

    def __init__(
        self,
        storage: TokenStorage,
        refresher: TokenRefresher,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._refresher = refresher
        self._clock = clock
        self._refresh_lock = asyncio.Lock()
        # Bumped after every refresh attempt, successful or not.
        self._refresh_generation = 0

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def store_tokens(
        self, access_token: str, refresh_token: str, expires_in: int
    ) -> TokenState:
        """Save a fresh token triple; expiry is computed from the current clock."""
        expires_at_ms = self._now_ms() + int(expires_in) * 1000
        self._storage.set_item(ACCESS_TOKEN_KEY, access_token)
        self._storage.set_item(REFRESH_TOKEN_KEY, refresh_token)
        self._storage.set_item(TOKEN_EXPIRY_KEY, str(expires_at_ms))
        return advance(self.state(), TokensStored(expires_at_ms))

    def get_stored_tokens(self) -> StoredTokens:
        raw_expiry = self._storage.get_item(TOKEN_EXPIRY_KEY)
        try:
            expiry = int(raw_expiry) if raw_expiry is not None else None
        except ValueError:
            logger.warning("Ignoring unreadable token expiry %r", raw_expiry)
            expiry = None
        return StoredTokens(
            access_token=self._storage.get_item(ACCESS_TOKEN_KEY),
            refresh_token=self._storage.get_item(REFRESH_TOKEN_KEY),
            token_expiry=expiry,
        )

    def clear_tokens(self) -> TokenState:
        """Forget every stored token (logout)."""
        for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, TOKEN_EXPIRY_KEY):
            self._storage.remove_item(key)
        return advance(self.state(), TokensCleared())

    def state(self) -> TokenState:
        stored = self.get_stored_tokens()
        return state_from_storage(stored.access_token, stored.token_expiry, self._now_ms())

    def is_token_expired(self) -> bool:
        expiry = self.get_stored_tokens().token_expiry
        if expiry is None:
            return True
        return self._now_ms() > expiry

    async def refresh_access_token(self) -> Optional[str]:
        """Force a refresh; returns the new access token or ``None`` on failure."""
        async with self._refresh_lock:
            state = await self._refresh(self.state())
            self._refresh_generation += 1
        return self._token_for(state)

    async def get_valid_token(self) -> Optional[str]:
        """
        Return an access token that has not expired, or ``None``.

        A valid stored token is returned without any network call. An expired
        one is refreshed exactly once, even when several callers ask at the
        same moment: late callers wait for the in-flight refresh and reuse
        its outcome, a failed one included.
        """
        state = self.state()
        if state.status is not TokenStatus.EXPIRED:
            return self._token_for(state)

        generation = self._refresh_generation
        async with self._refresh_lock:
            state = self.state()
            if generation != self._refresh_generation:
                return self._token_for(state)
            if state.status is TokenStatus.EXPIRED:
                state = await self._refresh(state)
                self._refresh_generation += 1
        return self._token_for(state)

    def _token_for(self, state: TokenState) -> Optional[str]:
        if not state.is_valid:
            return None
        return self.get_stored_tokens().access_token

    async def _refresh(self, state: TokenState) -> TokenState:
        refresh_token = self.get_stored_tokens().refresh_token
        if not refresh_token:
            logger.info("No refresh token stored; login required")
            return advance(state, RefreshFailed())

        try:
            access_token, expires_in = await self._refresher.refresh_access_token(
                refresh_token
            )
        except TokenRefreshError:
            logger.warning("Access token refresh failed", exc_info=True)
            return advance(state, RefreshFailed())

        expires_at_ms = self._now_ms() + int(expires_in) * 1000
        self._storage.set_item(ACCESS_TOKEN_KEY, access_token)
        self._storage.set_item(TOKEN_EXPIRY_KEY, str(expires_at_ms))
        logger.debug("Access token refreshed")
        return advance(state, RefreshSucceeded(expires_at_ms))


__all__ = [
    "ACCESS_TOKEN_KEY",
    "REFRESH_TOKEN_KEY",
    "TOKEN_EXPIRY_KEY",
    "TokenRefresher",
    "TokenStore",
]
