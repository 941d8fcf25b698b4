from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.application.errors import ValidationError
from src.domain.models.vaccination_event import dose_has_unit

Reference = str | int

P = TypeVar("P", bound=BaseModel)


class _Payload(BaseModel):
    model_config = ConfigDict(
        extra="ignore", str_strip_whitespace=True, coerce_numbers_to_str=True
    )

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        # Offline clients send "" for fields the user never filled in
        if isinstance(value, str) and not value.strip():
            return None
        return value


def _date_only(value: Any) -> Any:
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class AnimalPayload(_Payload):
    tag: str = Field(min_length=1, max_length=128)
    birth_weight: Decimal = Field(gt=0)
    breed_id: int
    birth_date: date
    photo_url: str | None = Field(default=None, max_length=1024)
    diseases: str | None = None
    notes: str | None = None
    origin: str | None = Field(default=None, max_length=255)
    brand: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=64)
    location: str | None = Field(default=None, max_length=255)
    calving_number: int | None = Field(default=None, ge=0)
    precocity: str | None = Field(default=None, max_length=64)
    mating_type: str | None = Field(default=None, max_length=64)
    dam_id: Reference | None = None
    sire_id: Reference | None = None
    # Only honoured for administrators acting on behalf of a tenant
    tenant_id: UUID | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def strip_time(cls, value: Any) -> Any:
        return _date_only(value)

    @field_validator("diseases", mode="before")
    @classmethod
    def join_diseases(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            joined = ",".join(str(item).strip() for item in value if str(item).strip())
            return joined or None
        return value


class WeightPayload(_Payload):
    animal_id: Reference | None = None
    tag: str | None = None
    observed_on: date
    weight_kg: Decimal = Field(gt=0)
    kind: str | None = None
    purchase_cost: Decimal | None = None
    sale_cost: Decimal | None = None
    purchase_price_per_kg: Decimal | None = None
    sale_price_per_kg: Decimal | None = None
    weight_gain: Decimal | None = None
    partial_weight_gain: Decimal | None = None
    value_gain: Decimal | None = None
    months_elapsed: Decimal | None = None

    @field_validator("observed_on", mode="before")
    @classmethod
    def strip_time(cls, value: Any) -> Any:
        return _date_only(value)


class VaccinationPayload(_Payload):
    animal_id: Reference | None = None
    tag: str | None = None
    administered_on: date
    vaccine_type_id: int | None = None
    vaccine_name_id: int | None = None
    dose: str | None = Field(default=None, max_length=64)
    notes: str | None = None

    @field_validator("administered_on", mode="before")
    @classmethod
    def strip_time(cls, value: Any) -> Any:
        return _date_only(value)

    @field_validator("dose")
    @classmethod
    def validate_dose(cls, value: str | None) -> str | None:
        if value is not None and not dose_has_unit(value):
            raise ValueError('Dose must include a quantity and a unit (e.g. "3 ml")')
        return value


def parse_payload(model: type[P], data: Mapping[str, Any]) -> P:
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in error['loc']) or 'data'}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ValidationError("; ".join(problems)) from exc
