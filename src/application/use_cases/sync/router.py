from __future__ import annotations

from typing import Mapping

from src.application.errors import UnsupportedEntityClass
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.sync.context import SyncBatchContext
from src.application.use_cases.sync.reconcilers import (
    AnimalReconciler,
    EntityReconciler,
    VaccinationReconciler,
    WeightReconciler,
)
from src.domain.models.sync import EntityClass, SyncOperation, SyncResult


class OperationRouter:
    def __init__(self, reconcilers: Mapping[EntityClass, EntityReconciler]) -> None:
        self._reconcilers = dict(reconcilers)

    @classmethod
    def for_batch(cls, uow: UnitOfWork, context: SyncBatchContext) -> OperationRouter:
        return cls(
            {
                EntityClass.ANIMAL_RECORD: AnimalReconciler(uow, context),
                EntityClass.WEIGHT_OBSERVATION: WeightReconciler(uow, context),
                EntityClass.VACCINATION_EVENT: VaccinationReconciler(uow, context),
            }
        )

    def route(self, operation: SyncOperation) -> EntityReconciler:
        entity_class = EntityClass.parse(operation.table)
        reconciler = self._reconcilers.get(entity_class) if entity_class else None
        if reconciler is None:
            raise UnsupportedEntityClass(f"Unsupported entity class: {operation.table!r}")
        return reconciler

    async def dispatch(self, operation: SyncOperation) -> SyncResult:
        return await self.route(operation).apply(operation)
