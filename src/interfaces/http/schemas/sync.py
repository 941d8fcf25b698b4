from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.domain.models.sync import SyncOperation
from src.domain.models.weight_observation import WeightKind
from src.utils.datetime_tz import ensure_utc


class SyncOperationIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    table: str = Field(min_length=1)
    action: str = Field(min_length=1)
    record_id: str | int | None = Field(default=None, alias="recordId")
    data: dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> SyncOperation:
        return SyncOperation(
            table=self.table, action=self.action, data=self.data, record_id=self.record_id
        )


class SyncBatchRequest(BaseModel):
    operations: list[SyncOperationIn] = Field(min_length=1)


class SyncResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    success: bool
    action: str
    table: str
    server_id: UUID | None = None
    local_id: str | int | None = None
    affected_rows: int | None = None
    error: str | None = None
    message: str | None = None


class SyncBatchResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    results: list[SyncResultOut]
    success_count: int
    fail_count: int
    timestamp: datetime


class _RecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at", check_fields=False)
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class AnimalRecordOut(_RecordOut):
    id: UUID
    tenant_id: UUID
    tag: str
    birth_weight: Decimal
    breed_id: int
    breed_name: str | None = Field(
        default=None, validation_alias=AliasChoices("breed", "breed_name")
    )
    birth_date: date
    photo_url: str | None = None
    diseases: str | None = None
    notes: str | None = None
    origin: str | None = None
    brand: str | None = None
    category: str | None = None
    location: str | None = None
    calving_number: int | None = None
    precocity: str | None = None
    mating_type: str | None = None
    dam_id: UUID | None = None
    sire_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class WeightObservationOut(_RecordOut):
    id: UUID
    animal_id: UUID
    tag: str
    observed_on: date
    weight_kg: Decimal
    kind: WeightKind
    purchase_cost: Decimal | None = None
    sale_cost: Decimal | None = None
    purchase_price_per_kg: Decimal | None = None
    sale_price_per_kg: Decimal | None = None
    weight_gain: Decimal | None = None
    partial_weight_gain: Decimal | None = None
    value_gain: Decimal | None = None
    months_elapsed: Decimal | None = None
    created_at: datetime
    updated_at: datetime


class VaccinationEventOut(_RecordOut):
    id: UUID
    animal_id: UUID
    administered_on: date
    vaccine_type_id: int
    vaccine_name_id: int
    vaccine_name: str | None = None
    dose: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


SyncRecordOut = AnimalRecordOut | WeightObservationOut | VaccinationEventOut


class SyncPullResponse(BaseModel):
    success: bool = True
    records: list[SyncRecordOut]
    count: int
    timestamp: datetime
    watermark: datetime | None = None


class SyncStatusResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: datetime
