"""User repository. Read methods return UserResult (DTO); password hash stays here."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    return UserResult(
        id=u.id,
        username=u.username,
        email=u.email,
        full_name=u.full_name,
        is_super_admin=u.is_super_admin,
        is_active=u.is_active,
        external_id=u.external_id,
        current_organization_id=u.current_organization_id,
    )


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_user(self, user_id: str) -> UserResult | None:
        row = await self.get_by_id(user_id)
        return _user_to_result(row) if row else None

    async def get_by_external_id(self, external_id: str) -> UserResult | None:
        result = await self.db.execute(
            select(User).where(User.external_id == external_id)
        )
        row = result.scalar_one_or_none()
        return _user_to_result(row) if row else None

    async def get_credentials(self, username: str) -> tuple[UserResult, str | None] | None:
        """Return (user, hashed_password) for a local sign-in, or None."""
        result = await self.db.execute(select(User).where(User.username == username))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return _user_to_result(row), row.hashed_password

    async def create_user(
        self,
        username: str,
        email: str,
        *,
        hashed_password: str | None = None,
        full_name: str | None = None,
        external_id: str | None = None,
        is_super_admin: bool = False,
    ) -> UserResult:
        user = User(
            username=username,
            email=email,
            hashed_password=hashed_password,
            full_name=full_name,
            external_id=external_id,
            is_super_admin=is_super_admin,
        )
        created = await self.create(user)
        return _user_to_result(created)

    async def set_current_organization(
        self, user_id: str, organization_id: str | None
    ) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(current_organization_id=organization_id)
        )
