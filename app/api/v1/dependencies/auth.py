"""Authentication dependencies: bearer token to Identity (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import Identity
from app.application.services.identity_service import IdentityService
from app.core.config import get_settings
from app.domain.exceptions import AuthenticationException
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import (
    MembershipRepository,
    UserRepository,
)
from app.infrastructure.security.identity import IdentityVerifier
from app.infrastructure.security.jwt import create_access_token
from app.infrastructure.security.password import verify_password

_http_bearer = HTTPBearer(auto_error=False)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    """Verifier built at startup (app.state); built on demand when lifespan did not run."""
    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        http_client = getattr(request.app.state, "http_client", None)
        verifier = IdentityVerifier(get_settings(), http_client)
    return verifier


async def get_identity_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
) -> IdentityService:
    """Identity service for token authentication and local sign-in."""
    return IdentityService(
        user_repo=UserRepository(db),
        membership_repo=MembershipRepository(db),
        verifier=verifier,
        password_checker=verify_password,
        token_issuer=create_access_token,
    )


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
) -> Identity:
    """Return the authenticated caller; raise 401 if the token is missing or invalid."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Not authenticated")
    return await identity_service.authenticate(credentials.credentials)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
