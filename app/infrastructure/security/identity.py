"""Bearer token verification: hosted identity provider (Clerk JWKS) with local JWT fallback.

Hosted tokens are RS256 JWTs signed by keys published at the provider's JWKS
URL. Keys are fetched with the shared httpx client and kept in process for
jwks_cache_ttl_seconds; an unknown key id forces one refresh (key rotation).
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx
from jose import JWTError, jwt

from app.core.config import Settings
from app.infrastructure.security.jwt import verify_token as verify_local_token

logger = logging.getLogger(__name__)

PROVIDER_HOSTED = "clerk"
PROVIDER_LOCAL = "local"


@dataclass(frozen=True)
class VerifiedToken:
    """Subject of a verified bearer token and which provider issued it."""

    subject: str
    provider: str
    claims: dict[str, Any]


class ClerkTokenVerifier:
    """Verifies RS256 tokens issued by the hosted identity provider."""

    def __init__(
        self,
        issuer: str,
        jwks_url: str,
        http_client: httpx.AsyncClient,
        cache_ttl_seconds: int = 3600,
    ) -> None:
        self.issuer = issuer
        self.jwks_url = jwks_url
        self.http_client = http_client
        self.cache_ttl_seconds = cache_ttl_seconds
        self._keys: dict[str, dict[str, Any]] = {}
        self._fetched_at: float | None = None
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        return (
            self._fetched_at is not None
            and time.monotonic() - self._fetched_at < self.cache_ttl_seconds
        )

    async def _refresh_keys(self) -> None:
        async with self._lock:
            try:
                response = await self.http_client.get(self.jwks_url, timeout=10.0)
                response.raise_for_status()
                body = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("JWKS fetch failed from %s: %s", self.jwks_url, e)
                raise ValueError("Signing keys unavailable") from e
            self._keys = {k["kid"]: k for k in body.get("keys", []) if "kid" in k}
            self._fetched_at = time.monotonic()
            logger.debug("JWKS refreshed: %d keys", len(self._keys))

    async def _get_key(self, kid: str) -> dict[str, Any]:
        if not self._is_fresh():
            await self._refresh_keys()
        key = self._keys.get(kid)
        if key is None:
            await self._refresh_keys()
            key = self._keys.get(kid)
        if key is None:
            raise ValueError("Unknown signing key")
        return key

    async def verify(self, token: str) -> dict[str, Any]:
        """Return the verified claims.

        Raises:
            ValueError: On bad signature, wrong issuer, expiry, or missing sub.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise ValueError(f"Invalid token: {e!s}") from e
        kid = header.get("kid")
        if not kid:
            raise ValueError("Token header missing kid")
        key = await self._get_key(kid)
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=["RS256"],
                issuer=self.issuer,
                options={"verify_aud": False, "require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {e!s}") from e
        return claims


class IdentityVerifier:
    """Routes a bearer token to the hosted verifier or to local JWT verification.

    Tokens carrying an RS256 header go to the hosted provider when it is
    configured; everything else is checked as a local token.
    """

    def __init__(
        self, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> None:
        self.hosted: ClerkTokenVerifier | None = None
        if settings.hosted_identity_enabled and http_client is not None:
            self.hosted = ClerkTokenVerifier(
                issuer=settings.clerk_issuer or "",
                jwks_url=settings.clerk_jwks_url or "",
                http_client=http_client,
                cache_ttl_seconds=settings.jwks_cache_ttl_seconds,
            )

    async def verify(self, token: str) -> VerifiedToken:
        """Verify token and return its subject.

        Raises:
            ValueError: If no verifier accepts the token.
        """
        if self.hosted is not None and _algorithm_of(token) == "RS256":
            claims = await self.hosted.verify(token)
            return VerifiedToken(claims["sub"], PROVIDER_HOSTED, claims)
        claims = verify_local_token(token)
        return VerifiedToken(claims["sub"], PROVIDER_LOCAL, claims)


def _algorithm_of(token: str) -> str | None:
    try:
        return jwt.get_unverified_header(token).get("alg")
    except JWTError:
        return None
