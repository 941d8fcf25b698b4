from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import UUID, uuid4

_DAYS_PER_MONTH = Decimal("30.44")


class WeightKind(str, Enum):
    BIRTH = "birth"
    PURCHASE = "purchase"
    SALE = "sale"
    ROUTINE = "routine"

    @classmethod
    def coerce(cls, value: str | None) -> WeightKind:
        """Map a client-supplied kind to a known one, falling back to ROUTINE."""
        if value is None:
            return cls.ROUTINE
        key = str(value).strip().lower()
        if key in _FIELD_ALIASES:
            return _FIELD_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            return cls.ROUTINE


# Labels used by older field clients
_FIELD_ALIASES = {
    "nacimiento": WeightKind.BIRTH,
    "compra": WeightKind.PURCHASE,
    "venta": WeightKind.SALE,
    "seguimiento": WeightKind.ROUTINE,
}


@dataclass(slots=True)
class WeightObservation:
    id: UUID
    animal_id: UUID
    tag: str
    observed_on: date
    weight_kg: Decimal
    kind: WeightKind = WeightKind.ROUTINE

    # Economic fields
    purchase_cost: Decimal | None = None
    sale_cost: Decimal | None = None
    purchase_price_per_kg: Decimal | None = None
    sale_price_per_kg: Decimal | None = None

    # Derived fields
    weight_gain: Decimal | None = None
    partial_weight_gain: Decimal | None = None
    value_gain: Decimal | None = None
    months_elapsed: Decimal | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        *,
        animal_id: UUID,
        tag: str,
        observed_on: date,
        weight_kg: Decimal,
        kind: WeightKind = WeightKind.ROUTINE,
        purchase_cost: Decimal | None = None,
        sale_cost: Decimal | None = None,
        purchase_price_per_kg: Decimal | None = None,
        sale_price_per_kg: Decimal | None = None,
        weight_gain: Decimal | None = None,
        partial_weight_gain: Decimal | None = None,
        value_gain: Decimal | None = None,
        months_elapsed: Decimal | None = None,
    ) -> WeightObservation:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            animal_id=animal_id,
            tag=tag,
            observed_on=observed_on,
            weight_kg=weight_kg,
            kind=kind,
            purchase_cost=purchase_cost,
            sale_cost=sale_cost,
            purchase_price_per_kg=purchase_price_per_kg,
            sale_price_per_kg=sale_price_per_kg,
            weight_gain=weight_gain,
            partial_weight_gain=partial_weight_gain,
            value_gain=value_gain,
            months_elapsed=months_elapsed,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def birth(
        cls, *, animal_id: UUID, tag: str, born_on: date, weight_kg: Decimal
    ) -> WeightObservation:
        return cls.create(
            animal_id=animal_id,
            tag=tag,
            observed_on=born_on,
            weight_kg=weight_kg,
            kind=WeightKind.BIRTH,
        )

    def derive_gains(self, previous: WeightObservation | None) -> None:
        """Fill gain fields left empty by the client, relative to `previous`."""
        if previous is None or previous.observed_on > self.observed_on:
            return
        if self.weight_gain is None:
            self.weight_gain = self.weight_kg - previous.weight_kg
        if self.months_elapsed is None:
            days = (self.observed_on - previous.observed_on).days
            self.months_elapsed = (Decimal(days) / _DAYS_PER_MONTH).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
