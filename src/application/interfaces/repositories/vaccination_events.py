from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.vaccination_event import VaccinationEvent


class VaccinationEventsRepository(Protocol):
    async def add(self, event: VaccinationEvent) -> VaccinationEvent: ...

    async def get_with_owner(self, event_id: UUID) -> tuple[VaccinationEvent, UUID] | None: ...

    async def replace(self, event_id: UUID, data: dict) -> VaccinationEvent | None: ...

    async def changed_since(
        self, tenant_id: UUID | None, since: datetime | None = None
    ) -> list[VaccinationEvent]: ...
