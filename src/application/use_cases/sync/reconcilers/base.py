from __future__ import annotations

from typing import ClassVar
from uuid import UUID

from src.application.errors import UnsupportedAction
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.sync.context import SyncBatchContext
from src.application.use_cases.sync.natural_keys import NaturalKeyIndex
from src.domain.models.sync import EntityClass, SyncAction, SyncOperation, SyncResult

DUPLICATE_NATURAL_KEY = "duplicate_natural_key"
NOT_FOUND = "not_found"
INVALID_REFERENCE = "invalid_reference"


class Rejection(Exception):
    """Foreseeable business failure of one operation, reported as data."""

    def __init__(self, reason: str, message: str, *, server_id: UUID | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.server_id = server_id


class EntityReconciler:
    entity_class: ClassVar[EntityClass]
    supported_actions: ClassVar[frozenset[SyncAction]] = frozenset()

    def __init__(self, uow: UnitOfWork, context: SyncBatchContext) -> None:
        self.uow = uow
        self.context = context
        self.keys = NaturalKeyIndex(uow, context)

    async def apply(self, operation: SyncOperation) -> SyncResult:
        action = SyncAction.parse(operation.action)
        if action is None or action not in self.supported_actions:
            raise UnsupportedAction(
                f"Action {operation.action!r} is not supported for {self.entity_class.value}"
            )
        handler = getattr(self, action.value.lower())
        try:
            return await handler(operation)
        except Rejection as rejection:
            return SyncResult.failed(
                operation, rejection.reason, rejection.message, server_id=rejection.server_id
            )

    def own_id(self, operation: SyncOperation) -> UUID:
        """Server id targeted by an UPDATE/DELETE of this entity class."""
        target = self.context.resolve(self.entity_class, operation.record_id)
        if target is None:
            raise Rejection(NOT_FOUND, f"{self.entity_class.value} record not found")
        return target
