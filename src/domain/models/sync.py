from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID


class EntityClass(str, Enum):
    ANIMAL_RECORD = "animal_records"
    WEIGHT_OBSERVATION = "weight_observations"
    VACCINATION_EVENT = "vaccination_events"

    @classmethod
    def parse(cls, value: str | None) -> EntityClass | None:
        if value in _LEGACY_TABLES:
            return _LEGACY_TABLES[value]
        try:
            return cls(value)
        except ValueError:
            return None


# Table names sent by older field clients
_LEGACY_TABLES = {
    "registro_animal": EntityClass.ANIMAL_RECORD,
    "historico_pesaje": EntityClass.WEIGHT_OBSERVATION,
    "historico_vacuna": EntityClass.VACCINATION_EVENT,
}


class SyncAction(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: str | None) -> SyncAction | None:
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


LocalId = str | int


@dataclass(slots=True, frozen=True)
class SyncOperation:
    """One client intent; consumed once per batch, never stored."""

    table: str
    action: str
    data: dict[str, Any] = field(default_factory=dict)
    record_id: LocalId | None = None


@dataclass(slots=True)
class SyncResult:
    success: bool
    action: str
    table: str
    server_id: UUID | None = None
    local_id: LocalId | None = None
    affected_rows: int | None = None
    error: str | None = None
    message: str | None = None

    @classmethod
    def inserted(cls, operation: SyncOperation, server_id: UUID) -> SyncResult:
        return cls(
            success=True,
            action=SyncAction.INSERT.value,
            table=operation.table,
            server_id=server_id,
            local_id=operation.record_id,
        )

    @classmethod
    def affected(cls, operation: SyncOperation, action: SyncAction, rows: int) -> SyncResult:
        return cls(success=True, action=action.value, table=operation.table, affected_rows=rows)

    @classmethod
    def failed(
        cls,
        operation: SyncOperation,
        error: str,
        message: str | None = None,
        *,
        server_id: UUID | None = None,
    ) -> SyncResult:
        action = SyncAction.parse(operation.action)
        return cls(
            success=False,
            action=action.value if action else str(operation.action),
            table=operation.table,
            server_id=server_id,
            local_id=operation.record_id,
            error=error,
            message=message,
        )


@dataclass(slots=True)
class SyncBatchResult:
    results: list[SyncResult]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def fail_count(self) -> int:
        return sum(1 for result in self.results if not result.success)
