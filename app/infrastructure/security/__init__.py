"""Security: token verification and password hashing."""

from app.infrastructure.security.identity import (
    ClerkTokenVerifier,
    IdentityVerifier,
    VerifiedToken,
)
from app.infrastructure.security.jwt import create_access_token, verify_token
from app.infrastructure.security.password import get_password_hash, verify_password

__all__ = [
    "ClerkTokenVerifier",
    "IdentityVerifier",
    "VerifiedToken",
    "create_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
