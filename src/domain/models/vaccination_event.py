from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import UUID, uuid4


@dataclass(slots=True)
class VaccinationEvent:
    id: UUID
    animal_id: UUID
    administered_on: date
    vaccine_type_id: int
    vaccine_name_id: int
    dose: str | None = None
    notes: str | None = None

    # Denormalized catalog name, only populated on change-feed reads
    vaccine_name: str | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        *,
        animal_id: UUID,
        administered_on: date,
        vaccine_type_id: int,
        vaccine_name_id: int,
        dose: str | None = None,
        notes: str | None = None,
    ) -> VaccinationEvent:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            animal_id=animal_id,
            administered_on=administered_on,
            vaccine_type_id=vaccine_type_id,
            vaccine_name_id=vaccine_name_id,
            dose=dose,
            notes=notes,
            created_at=now,
            updated_at=now,
        )


def dose_has_unit(dose: str) -> bool:
    """A dose is expected to read like "3 ml": a quantity and a unit."""
    parts = dose.split()
    return len(parts) >= 2
