from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass(slots=True)
class Animal:
    id: UUID
    tenant_id: UUID
    tag: str
    birth_weight: Decimal
    breed_id: int
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

    # Genealogy fields
    dam_id: UUID | None = None
    sire_id: UUID | None = None

    # Denormalized catalog name, only populated on change-feed reads
    breed: str | None = None

    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        tenant_id: UUID,
        tag: str,
        birth_weight: Decimal,
        breed_id: int,
        birth_date: date,
        photo_url: str | None = None,
        diseases: str | None = None,
        notes: str | None = None,
        origin: str | None = None,
        brand: str | None = None,
        category: str | None = None,
        location: str | None = None,
        calving_number: int | None = None,
        precocity: str | None = None,
        mating_type: str | None = None,
        dam_id: UUID | None = None,
        sire_id: UUID | None = None,
    ) -> Animal:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            tenant_id=tenant_id,
            tag=tag,
            birth_weight=birth_weight,
            breed_id=breed_id,
            birth_date=birth_date,
            photo_url=photo_url,
            diseases=diseases,
            notes=notes,
            origin=origin,
            brand=brand,
            category=category,
            location=location,
            calving_number=calving_number,
            precocity=precocity,
            mating_type=mating_type,
            dam_id=dam_id,
            sire_id=sire_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None
