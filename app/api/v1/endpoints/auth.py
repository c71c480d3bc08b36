"""Auth API: local sign-in and current user.

Hosted sign-in happens at the identity provider; its tokens are accepted by
every authenticated route without passing through /login.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentIdentity, get_identity_service
from app.application.services.identity_service import IdentityService
from app.core.limiter import check_login_rate_per_username, limit_auth
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Authenticate with username and password; return a local JWT."""
    check_login_rate_per_username(body.username)
    token, _ = await identity_service.login(body.username, body.password)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: CurrentIdentity,
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Return the authenticated user."""
    user = await identity_service.get_user(identity.user_id)
    return UserResponse.model_validate(user)
