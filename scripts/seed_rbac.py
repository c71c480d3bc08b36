"""Seed the permission catalog and the system role templates (idempotent).

Usage:
    python -m scripts.seed_rbac [<super_admin_username> <super_admin_email>]

With a username and email, also creates that super admin when it does not
exist yet; the password is read from SEED_SUPER_ADMIN_PASSWORD. Requires
Postgres. All imports use app.*.
"""

import asyncio
import os
import sys

from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security.password import get_password_hash
from app.infrastructure.services import RbacSeedService


async def _ensure_super_admin(session, username: str, email: str) -> None:
    user_repo = UserRepository(session)
    if await user_repo.get_credentials(username) is not None:
        print(f"User {username} already exists; left unchanged")
        return
    password = os.environ.get("SEED_SUPER_ADMIN_PASSWORD", "")
    if len(password) < 8:
        print("SEED_SUPER_ADMIN_PASSWORD must be at least 8 characters", file=sys.stderr)
        sys.exit(1)
    user = await user_repo.create_user(
        username,
        email,
        hashed_password=get_password_hash(password),
        is_super_admin=True,
    )
    print(f"Created super admin {user.username} ({user.id})")


async def main() -> None:
    """Seed RBAC and optionally a super admin."""
    args = sys.argv[1:]
    if len(args) not in (0, 2):
        print(
            "Usage: python -m scripts.seed_rbac [<super_admin_username> <super_admin_email>]",
            file=sys.stderr,
        )
        sys.exit(1)

    get_settings()
    factory = get_session_factory()
    try:
        async with factory() as session:
            async with session.begin():
                permissions, roles = await RbacSeedService(session).seed()
                print(f"Seeded {permissions} permission(s) and {roles} system role(s)")
                if args:
                    await _ensure_super_admin(session, args[0], args[1])
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
