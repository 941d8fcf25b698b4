from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.animal import Animal


class AnimalRepository(Protocol):
    async def add(self, animal: Animal) -> Animal: ...

    async def get_any(self, animal_id: UUID) -> Animal | None: ...

    async def get_by_tag(self, tenant_id: UUID, tag: str) -> Animal | None: ...

    async def replace(self, animal_id: UUID, data: dict) -> Animal | None: ...

    async def soft_delete(self, animal_id: UUID) -> bool: ...

    async def changed_since(
        self, tenant_id: UUID | None, since: datetime | None = None
    ) -> list[Animal]: ...
