"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IBranchRepository,
    ICustomerRepository,
    ILoanRepository,
    IMembershipRepository,
    IOrganizationRepository,
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
    IUserRoleAssignmentRepository,
)
from app.application.interfaces.services import (
    ICacheService,
    IPermissionResolver,
    ITokenVerifier,
    IVerifiedToken,
)

__all__ = [
    "IBranchRepository",
    "ICacheService",
    "ICustomerRepository",
    "ILoanRepository",
    "IMembershipRepository",
    "IOrganizationRepository",
    "IPermissionRepository",
    "IPermissionResolver",
    "ITokenVerifier",
    "IRolePermissionRepository",
    "IRoleRepository",
    "IUserRepository",
    "IUserRoleAssignmentRepository",
    "IVerifiedToken",
]
