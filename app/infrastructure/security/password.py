"""Password hashing for local sign-in (bcrypt over a SHA-256 pre-hash).

Bcrypt truncates inputs at 72 bytes; the pre-hash gives a fixed-length input
so long passphrases are compared in full.
"""

import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def get_password_hash(password: str) -> str:
    """Return bcrypt hash of password."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Return True if plain_password matches hashed_password.

    A missing hash (account without local password) still costs one bcrypt
    comparison so unknown and password-less accounts answer in similar time.
    """
    target = hashed_password or _DUMMY_HASH
    try:
        matched = bcrypt.checkpw(_prehash(plain_password), target.encode("utf-8"))
    except (ValueError, TypeError):
        return False
    return bool(matched) and hashed_password is not None


_DUMMY_HASH = get_password_hash("moneyflow-dummy-password")
