from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from src.domain.value_objects.role import Role


@dataclass(slots=True, frozen=True)
class Principal:
    """Authenticated actor as seen by the sync core."""

    user_id: UUID
    tenant_id: UUID | None
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role.spans_tenants()
