"""Session aliases and read repository dependencies (composition root).

Read dependencies share the request's get_db session; write services are
built on the get_db_transactional session so one request commits atomically.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    BranchRepository,
    CustomerRepository,
    LoanRepository,
    PermissionRepository,
)

ReadSession = Annotated[AsyncSession, Depends(get_db)]
WriteSession = Annotated[AsyncSession, Depends(get_db_transactional)]


async def get_permission_repo(db: ReadSession) -> PermissionRepository:
    """Permission catalog repository for read operations."""
    return PermissionRepository(db)


async def get_branch_repo(db: ReadSession) -> BranchRepository:
    return BranchRepository(db)


async def get_customer_repo(db: ReadSession) -> CustomerRepository:
    return CustomerRepository(db)


async def get_loan_repo(db: ReadSession) -> LoanRepository:
    return LoanRepository(db)
