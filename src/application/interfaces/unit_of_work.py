from __future__ import annotations

from typing import Any, AsyncContextManager, Protocol

from src.application.interfaces.repositories.animals import AnimalRepository
from src.application.interfaces.repositories.vaccination_events import (
    VaccinationEventsRepository,
)
from src.application.interfaces.repositories.weight_observations import (
    WeightObservationsRepository,
)
from src.domain.ports.catalogs_repo import CatalogsRepo


class UnitOfWork(Protocol):
    animals: AnimalRepository
    weights: WeightObservationsRepository
    vaccinations: VaccinationEventsRepository
    catalogs: CatalogsRepo

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    # Nested transaction scoping a single sync operation
    def savepoint(self) -> AsyncContextManager[Any]: ...
