"""Client library: token lifecycle plus calls to the gateway."""

from .api import AuthGatewayClient, SwiperApiClient, tokens_from_callback_url
from .cipher import StorageCipherError, TokenCipher
from .errors import (
    NotAuthenticatedError,
    SwiperApiError,
    SwiperClientError,
    TokenRefreshError,
)
from .storage import MemoryStorage, SQLiteStorage, TokenStorage
from .token_state import TokenState, TokenStatus, advance, state_from_storage
from .token_store import TokenStore

__all__ = [
    "AuthGatewayClient",
    "MemoryStorage",
    "NotAuthenticatedError",
    "SQLiteStorage",
    "StorageCipherError",
    "SwiperApiClient",
    "SwiperApiError",
    "SwiperClientError",
    "TokenCipher",
    "TokenRefreshError",
    "TokenState",
    "TokenStatus",
    "TokenStorage",
    "TokenStore",
    "advance",
    "state_from_storage",
    "tokens_from_callback_url",
]
