from __future__ import annotations

from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.weight_observation import WeightObservation


class WeightObservationsRepository(Protocol):
    async def add(self, observation: WeightObservation) -> WeightObservation: ...

    async def get_with_owner(
        self, observation_id: UUID
    ) -> tuple[WeightObservation, UUID] | None: ...

    async def latest_before(
        self, animal_id: UUID, observed_on: date
    ) -> WeightObservation | None: ...

    async def replace(self, observation_id: UUID, data: dict) -> WeightObservation | None: ...

    async def changed_since(
        self, tenant_id: UUID | None, since: datetime | None = None
    ) -> list[WeightObservation]: ...
