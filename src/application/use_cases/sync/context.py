from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from src.application.use_cases.sync.access import AccessCheck, can_access
from src.application.use_cases.sync.catalogs import CatalogDefaults
from src.domain.models.sync import EntityClass, LocalId, SyncResult
from src.domain.value_objects.principal import Principal


@dataclass
class SyncBatchContext:
    """State shared by the operations of one push request."""

    principal: Principal
    defaults: CatalogDefaults = field(default_factory=CatalogDefaults)
    access: AccessCheck = can_access
    server_ids: dict[tuple[EntityClass, str], UUID] = field(default_factory=dict)

    def allows(self, resource_tenant_id: UUID | None) -> bool:
        return self.access(self.principal, resource_tenant_id)

    def acting_tenant(self, requested: UUID | None = None) -> UUID | None:
        if requested is not None and self.principal.is_admin:
            return requested
        return self.principal.tenant_id

    def remember(self, entity_class: EntityClass, local_id: LocalId | None, server_id: UUID) -> None:
        if local_id is None or local_id == "":
            return
        self.server_ids[(entity_class, str(local_id))] = server_id

    def remember_result(self, result: SyncResult) -> None:
        entity_class = EntityClass.parse(result.table)
        if entity_class is None or result.server_id is None:
            return
        self.remember(entity_class, result.local_id, result.server_id)

    def resolve(self, entity_class: EntityClass, ref: LocalId | UUID | None) -> UUID | None:
        """Map a client reference to a server id.

        Local ids handed out earlier in the batch win; anything else must
        already be a server UUID.
        """
        if ref is None or ref == "":
            return None
        mapped = self.server_ids.get((entity_class, str(ref)))
        if mapped is not None:
            return mapped
        if isinstance(ref, UUID):
            return ref
        try:
            return UUID(str(ref))
        except ValueError:
            return None
