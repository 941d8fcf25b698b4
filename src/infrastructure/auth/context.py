from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from uuid import UUID

from src.application.errors import AuthError, PermissionDenied
from src.domain.value_objects.principal import Principal
from src.domain.value_objects.role import Role
from src.domain.value_objects.tenant_id import parse_tenant_id


@dataclass(slots=True)
class AuthContext:
    user_id: UUID
    tenant_id: UUID | None
    role: Role
    claims: dict[str, Any]

    @property
    def principal(self) -> Principal:
        return Principal(user_id=self.user_id, tenant_id=self.tenant_id, role=self.role)


def context_from_claims(
    claims: Mapping[str, Any], requested_tenant: str | None = None
) -> AuthContext:
    """Build the request's auth context from verified token claims.

    Administrators may pick the tenant to act on through the tenant header;
    everyone else is pinned to the tenant carried by their token.
    """
    subject = claims.get("sub")
    if not subject:
        raise AuthError("Token missing subject")
    try:
        user_id = UUID(str(subject))
    except ValueError as exc:
        raise AuthError("Token subject is not a valid UUID") from exc
    try:
        role = Role(str(claims.get("role", "")).upper())
    except ValueError as exc:
        raise AuthError("Token carries an unknown role") from exc
    try:
        tenant_id = parse_tenant_id(claims.get("tenant_id"))
        requested = parse_tenant_id(requested_tenant)
    except ValueError as exc:
        raise PermissionDenied("Invalid tenant identifier") from exc

    if requested is not None:
        if role.spans_tenants():
            tenant_id = requested
        elif requested != tenant_id:
            raise PermissionDenied("User does not belong to tenant")
    return AuthContext(user_id=user_id, tenant_id=tenant_id, role=role, claims=dict(claims))
