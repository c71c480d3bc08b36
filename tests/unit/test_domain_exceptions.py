"""Tests for domain exceptions (error_code, message, details) and their HTTP status."""

import pytest

from app.core.exception_handlers import status_for_error_code
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationDenied,
    ConflictException,
    CrossTenantAccessException,
    MoneyflowException,
    OrganizationAlreadyExistsException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    TenantUnresolvedException,
    ValidationException,
)


def test_moneyflow_exception_default_error_code() -> None:
    """Base MoneyflowException uses class name as error_code when not provided."""
    exc = MoneyflowException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "MoneyflowException"
    assert exc.details == {}


def test_to_dict_shape() -> None:
    exc = MoneyflowException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception_with_and_without_field() -> None:
    assert ValidationException("Invalid", field="name").details == {"field": "name"}
    assert ValidationException("Invalid").details == {}


def test_authorization_denied_hides_reason() -> None:
    """The reason is kept for logs only; the rendered body is generic."""
    exc = AuthorizationDenied(reason="missing roles:delete at level 4")
    assert exc.reason == "missing roles:delete at level 4"
    body = exc.to_dict()
    assert body == {
        "error": "PERMISSION_DENIED",
        "message": "Insufficient permission",
        "details": {},
    }


def test_cross_tenant_is_a_denial_with_generic_body() -> None:
    exc = CrossTenantAccessException("customer", "cust-1", "org-a")
    assert isinstance(exc, AuthorizationDenied)
    assert exc.resource_id == "cust-1"
    assert "cust-1" not in str(exc.to_dict())


def test_organization_already_exists_is_conflict() -> None:
    exc = OrganizationAlreadyExistsException("alpha")
    assert isinstance(exc, ConflictException)
    assert exc.details == {"code": "alpha"}


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (ValidationException("x"), 400),
        (AuthenticationException(), 401),
        (AuthorizationDenied(), 403),
        (CrossTenantAccessException("loan", "l1", "org-a"), 403),
        (ResourceNotFoundException("role", "r1"), 404),
        (ConflictException("busy"), 409),
        (TenantUnresolvedException(), 409),
        (SqlNotConfiguredException(), 503),
    ],
)
def test_error_code_status(exc: MoneyflowException, status: int) -> None:
    assert status_for_error_code(exc.error_code) == status


def test_unmapped_error_code_is_400() -> None:
    assert status_for_error_code("SOMETHING_NEW") == 400
