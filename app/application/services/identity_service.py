"""Identity service: bearer token to Identity, and local username/password sign-in."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from app.application.dtos.user import Identity, UserResult
from app.application.interfaces.repositories import (
    IMembershipRepository,
    IUserRepository,
)
from app.application.interfaces.services import ITokenVerifier
from app.domain.exceptions import AuthenticationException

logger = logging.getLogger(__name__)

PROVIDER_HOSTED = "clerk"


class IdentityService:
    """Turns credentials into the Identity the authorization model consumes."""

    def __init__(
        self,
        user_repo: IUserRepository,
        membership_repo: IMembershipRepository,
        verifier: ITokenVerifier | None = None,
        password_checker: Callable[[str, str | None], bool] | None = None,
        token_issuer: Callable[[str], str] | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._membership_repo = membership_repo
        self._verifier = verifier
        self._password_checker = password_checker
        self._token_issuer = token_issuer

    async def _load_user(self, subject: str, provider: str) -> UserResult | None:
        if provider == PROVIDER_HOSTED:
            return await self._user_repo.get_by_external_id(subject)
        return await self._user_repo.get_user(subject)

    async def authenticate(self, token: str) -> Identity:
        """Verify token and load the caller with their organization memberships.

        Raises:
            AuthenticationException: Invalid token, unknown or inactive user.
        """
        if self._verifier is None:
            raise AuthenticationException("Token verification is not configured")
        try:
            verified = await self._verifier.verify(token)
        except ValueError as e:
            logger.debug("Token rejected: %s", e)
            raise AuthenticationException("Invalid or expired token") from None
        user = await self._load_user(verified.subject, verified.provider)
        if user is None or not user.is_active:
            raise AuthenticationException("Unknown or inactive user")
        organization_ids = await self._membership_repo.list_organization_ids_for_user(
            user.id
        )
        return Identity(
            user_id=user.id,
            is_super_admin=user.is_super_admin,
            organization_ids=frozenset(organization_ids),
        )

    async def get_user(self, user_id: str) -> UserResult:
        user = await self._user_repo.get_user(user_id)
        if user is None:
            raise AuthenticationException("Unknown or inactive user")
        return user

    async def login(self, username: str, password: str) -> tuple[str, UserResult]:
        """Check a local password and issue an access token.

        Raises:
            AuthenticationException: Wrong username or password, or inactive user.
        """
        if self._password_checker is None or self._token_issuer is None:
            raise AuthenticationException("Local sign-in is not configured")
        found = await self._user_repo.get_credentials(username)
        user, hashed = found if found is not None else (None, None)
        matched = await asyncio.to_thread(self._password_checker, password, hashed)
        if not matched or user is None:
            logger.info("Failed local sign-in for username %r", username)
            raise AuthenticationException("Invalid username or password")
        if not user.is_active:
            raise AuthenticationException("Unknown or inactive user")
        return self._token_issuer(user.id), user
