"""Local JWT issuing and verification (fallback when no hosted identity provider is used).

Uses app.core.config for secret, algorithm and token lifetime.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.utils.datetime import utc_now

LOCAL_TOKEN_ISSUER = "moneyflow"


def create_access_token(
    user_id: str,
    extra_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token whose subject is user_id.

    Args:
        user_id: Local user id placed in the sub claim.
        extra_claims: Optional additional claims (must not override sub/exp/iss).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = utc_now()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, Any] = dict(extra_claims or {})
    to_encode.update(
        {"sub": user_id, "iss": LOCAL_TOKEN_ISSUER, "iat": now, "exp": now + ttl}
    )
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a locally issued JWT. Returns the payload.

    Raises:
        ValueError: If token is invalid, expired, from another issuer, or missing sub.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            issuer=LOCAL_TOKEN_ISSUER,
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
