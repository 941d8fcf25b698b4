from __future__ import annotations

from uuid import UUID

from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.sync.context import SyncBatchContext
from src.domain.models.animal import Animal
from src.domain.models.sync import EntityClass, LocalId


class NaturalKeyIndex:
    """Tag -> animal lookups, run inside the batch transaction before any write."""

    def __init__(self, uow: UnitOfWork, context: SyncBatchContext) -> None:
        self._uow = uow
        self._context = context

    async def find(self, tenant_id: UUID, tag: str) -> Animal | None:
        return await self._uow.animals.get_by_tag(tenant_id, tag)

    async def owned(self, animal_id: UUID) -> Animal | None:
        animal = await self._uow.animals.get_any(animal_id)
        if animal is None or not self._context.allows(animal.tenant_id):
            return None
        return animal

    async def locate(
        self, reference: LocalId | None = None, tag: str | None = None
    ) -> Animal | None:
        """Resolve an animal by server/local id, or by tag in the acting tenant."""
        if reference is not None and reference != "":
            animal_id = self._context.resolve(EntityClass.ANIMAL_RECORD, reference)
            return await self.owned(animal_id) if animal_id else None
        tenant_id = self._context.acting_tenant()
        if not tag or tenant_id is None:
            return None
        animal = await self.find(tenant_id, tag)
        if animal is None or not self._context.allows(animal.tenant_id):
            return None
        return animal
