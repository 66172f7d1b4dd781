"""
Encryption at rest for values kept in persistent client storage.

The key is stretched from a user passphrase with PBKDF2 so that a short
``SWIPER_STORAGE_SECRET`` does not map directly onto a Fernet key. Encrypted
values carry a ``enc:`` prefix; anything without it was written before
encryption was switched on and is returned as-is until it is next rewritten.
"""

from __future__ import annotations

import base64
import os
from typing import Mapping, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

STORAGE_SECRET_ENV = "SWIPER_STORAGE_SECRET"
ENCRYPTED_PREFIX = "enc:"

_DEFAULT_SALT = b"music-swiper/client-storage"
_KDF_ITERATIONS = 390_000


class StorageCipherError(ValueError):
    """Raised when a stored value cannot be decrypted with the configured secret."""


def _derive_key(secret: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=_KDF_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode("utf-8")))


class TokenCipher:
    """Fernet cipher for token values, keyed from a passphrase."""

    def __init__(self, *, secret: str, salt: bytes = _DEFAULT_SALT) -> None:
        if not secret:
            raise ValueError("A storage secret must be provided.")
        self._fernet = Fernet(_derive_key(secret, salt))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Optional["TokenCipher"]:
        """Build a cipher from ``SWIPER_STORAGE_SECRET``, or ``None`` when it is unset."""
        environ = os.environ if environ is None else environ
        secret = environ.get(STORAGE_SECRET_ENV)
        return cls(secret=secret) if secret else None

    def encrypt(self, plaintext: str) -> str:
        token = self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")
        return f"{ENCRYPTED_PREFIX}{token}"

    def decrypt(self, stored: str) -> str:
        if not stored.startswith(ENCRYPTED_PREFIX):
            return stored
        try:
            plaintext = self._fernet.decrypt(stored[len(ENCRYPTED_PREFIX):].encode("ascii"))
        except InvalidToken as exc:
            raise StorageCipherError(
                "Stored value could not be decrypted; was the storage secret changed?"
            ) from exc
        return plaintext.decode("utf-8")


__all__ = ["ENCRYPTED_PREFIX", "STORAGE_SECRET_ENV", "StorageCipherError", "TokenCipher"]
