"""Domain exceptions for the Moneyflow application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class MoneyflowException(Exception):
    """Base exception for all Moneyflow application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the API error handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(MoneyflowException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(MoneyflowException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationDenied(MoneyflowException):
    """Raised when the caller may not perform the operation.

    The response never says why: no permission name, no hierarchy level.
    Pass ``reason`` for the server log only.
    """

    GENERIC_MESSAGE = "Insufficient permission"

    def __init__(self, reason: str | None = None) -> None:
        """Initialize with an optional log-only reason.

        Args:
            reason: Internal explanation (e.g. missing permission). Not rendered.
        """
        self.reason = reason
        super().__init__(self.GENERIC_MESSAGE, "PERMISSION_DENIED")


class CrossTenantAccessException(AuthorizationDenied):
    """Raised when a record or organization outside the active tenant is touched."""

    def __init__(self, resource_type: str, resource_id: str, tenant_id: str | None) -> None:
        """Initialize with the offending resource and the active tenant.

        Args:
            resource_type: Type of resource (e.g. 'customer', 'organization').
            resource_id: The ID that belongs to another tenant.
            tenant_id: The tenant the request was scoped to.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.tenant_id = tenant_id
        super().__init__(
            f"{resource_type} {resource_id} is outside tenant {tenant_id}"
        )


class ResourceNotFoundException(MoneyflowException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'permission').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(MoneyflowException):
    """Raised when an operation is blocked by existing state (e.g. active references)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "CONFLICT", details)


class OrganizationAlreadyExistsException(ConflictException):
    """Raised when creating an organization whose code already exists."""

    def __init__(self, code: str) -> None:
        super().__init__(
            f"Organization with code '{code}' already exists",
            {"code": code},
        )


class TenantUnresolvedException(MoneyflowException):
    """Raised by the client when a tenant-scoped call is made with no resolved tenant."""

    def __init__(self, message: str = "No organization is selected for this session") -> None:
        super().__init__(message, "TENANT_UNRESOLVED")


class SqlNotConfiguredException(MoneyflowException):
    """Raised when an operation requires Postgres but the backend is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
