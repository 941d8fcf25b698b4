from __future__ import annotations

from typing import Callable
from uuid import UUID

from src.application.errors import PermissionDenied
from src.domain.value_objects.principal import Principal

AccessCheck = Callable[[Principal, UUID | None], bool]


def can_access(principal: Principal, resource_tenant_id: UUID | None) -> bool:
    """Single ownership rule shared by every reconciler and the change feed."""
    if principal.is_admin:
        return True
    return principal.tenant_id is not None and principal.tenant_id == resource_tenant_id


def require_tenant_scope(principal: Principal) -> UUID | None:
    """Tenant a request is confined to; None means "all tenants" (admins only)."""
    if principal.tenant_id is None and not principal.is_admin:
        raise PermissionDenied("Tenant scope required")
    return principal.tenant_id
