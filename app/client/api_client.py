"""Async HTTP client for the Moneyflow API.

Attaches the bearer token and, for tenant-scoped calls, the active tenant
(and branch) headers. Error responses become the same domain exceptions the
server raised, so callers handle one taxonomy on both sides of the wire.
5xx responses raise httpx.HTTPStatusError; transport failures propagate as
httpx.TransportError.
"""

from __future__ import annotations

from typing import Any

import httpx

from app.domain.authorization import UserPermissionsView
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationDenied,
    ConflictException,
    ResourceNotFoundException,
    TenantUnresolvedException,
    ValidationException,
)


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def raise_for_api_error(response: httpx.Response) -> None:
    """Raise the domain exception matching an error response; return on 2xx."""
    if response.is_success:
        return
    body = _error_body(response)
    message = str(body.get("message") or body.get("detail") or response.reason_phrase)
    details = body.get("details") if isinstance(body.get("details"), dict) else {}
    status = response.status_code
    if status in (400, 422):
        raise ValidationException(message, field=details.get("field"))
    if status == 401:
        raise AuthenticationException(message)
    if status == 403:
        raise AuthorizationDenied(reason=f"server returned 403 for {response.request.url.path}")
    if status == 404:
        raise ResourceNotFoundException(
            details.get("resource_type", "resource"),
            details.get("resource_id", response.request.url.path),
        )
    if status == 409:
        raise ConflictException(message, details)
    response.raise_for_status()


class MoneyflowClient:
    """One authenticated session against the API.

    The tenant header is owned by TenantContextResolver through set_tenant;
    other code only reads tenant_id.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        http_client: httpx.AsyncClient | None = None,
        tenant_header: str = "X-Tenant-ID",
        branch_header: str = "X-Branch-ID",
        api_prefix: str = "/api/v1",
    ) -> None:
        self._base_url = base_url.rstrip("/") + api_prefix
        self._token = token
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=10.0)
        self._tenant_header = tenant_header
        self._branch_header = branch_header
        self._tenant_id: str | None = None
        self._branch_id: str | None = None

    @property
    def tenant_id(self) -> str | None:
        return self._tenant_id

    @property
    def branch_id(self) -> str | None:
        return self._branch_id

    def set_tenant(self, tenant_id: str | None, branch_id: str | None = None) -> None:
        self._tenant_id = tenant_id
        self._branch_id = branch_id if tenant_id else None

    def _headers(self, tenant_scoped: bool) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._token}"}
        if tenant_scoped:
            if self._tenant_id is None:
                raise TenantUnresolvedException()
            headers[self._tenant_header] = self._tenant_id
            if self._branch_id:
                headers[self._branch_header] = self._branch_id
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        tenant_scoped: bool = True,
    ) -> Any:
        """Send one request and return the decoded JSON body (None for 204).

        Raises:
            TenantUnresolvedException: Tenant-scoped call with no active tenant.
            MoneyflowException subclasses: 4xx responses (see raise_for_api_error).
            httpx.HTTPStatusError: 5xx responses.
            httpx.TransportError: Connection failures and timeouts.
        """
        response = await self._http.request(
            method,
            f"{self._base_url}{path}",
            headers=self._headers(tenant_scoped),
            json=json,
            params=params,
        )
        raise_for_api_error(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # Organizations (addressed by path id, no tenant header)

    async def list_organizations(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/organizations", tenant_scoped=False)

    async def switch_organization(self, organization_id: str) -> dict[str, Any]:
        return await self.request(
            "POST", f"/organizations/{organization_id}/switch", tenant_scoped=False
        )

    # Authorization

    async def get_my_permissions(self) -> UserPermissionsView:
        data = await self.request("GET", "/users/me/permissions")
        return UserPermissionsView.from_dict(data)

    async def list_users_with_roles(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/users/roles")

    async def list_roles(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/roles")

    async def list_permissions(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/permissions")

    async def assign_role(self, user_id: str, role_id: str) -> dict[str, Any]:
        return await self.request(
            "POST", f"/users/{user_id}/assign-role", json={"role_id": role_id}
        )

    async def remove_role(self, user_id: str) -> None:
        await self.request("DELETE", f"/users/{user_id}/role")

    async def update_role_permissions(
        self, role_id: str, permission_ids: list[str]
    ) -> dict[str, Any]:
        return await self.request(
            "PUT", f"/roles/{role_id}/permissions", json={"permission_ids": permission_ids}
        )

    # Tenant-scoped records

    async def list_customers(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/customers")

    async def list_loans(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/loans")
