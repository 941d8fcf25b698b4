from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError
from src.application.interfaces.repositories.weight_observations import (
    WeightObservationsRepository,
)
from src.domain.models.weight_observation import WeightKind, WeightObservation
from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.db.orm.weight_observation import WeightObservationORM


class WeightObservationsSQLAlchemyRepository(WeightObservationsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: WeightObservationORM) -> WeightObservation:
        return WeightObservation(
            id=orm.id,
            animal_id=orm.animal_id,
            tag=orm.tag,
            observed_on=orm.observed_on,
            weight_kg=orm.weight_kg,
            kind=WeightKind.coerce(orm.kind),
            purchase_cost=orm.purchase_cost,
            sale_cost=orm.sale_cost,
            purchase_price_per_kg=orm.purchase_price_per_kg,
            sale_price_per_kg=orm.sale_price_per_kg,
            weight_gain=orm.weight_gain,
            partial_weight_gain=orm.partial_weight_gain,
            value_gain=orm.value_gain,
            months_elapsed=orm.months_elapsed,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def add(self, observation: WeightObservation) -> WeightObservation:
        orm = WeightObservationORM(
            id=observation.id,
            animal_id=observation.animal_id,
            tag=observation.tag,
            observed_on=observation.observed_on,
            weight_kg=observation.weight_kg,
            kind=observation.kind.value,
            purchase_cost=observation.purchase_cost,
            sale_cost=observation.sale_cost,
            purchase_price_per_kg=observation.purchase_price_per_kg,
            sale_price_per_kg=observation.sale_price_per_kg,
            weight_gain=observation.weight_gain,
            partial_weight_gain=observation.partial_weight_gain,
            value_gain=observation.value_gain,
            months_elapsed=observation.months_elapsed,
            created_at=observation.created_at,
            updated_at=observation.updated_at,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Failed to record weight observation") from exc
        return self._to_domain(orm)

    async def get_with_owner(
        self, observation_id: UUID
    ) -> tuple[WeightObservation, UUID] | None:
        stmt = (
            select(WeightObservationORM, AnimalORM.tenant_id)
            .join(AnimalORM, AnimalORM.id == WeightObservationORM.animal_id)
            .where(WeightObservationORM.id == observation_id)
        )
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        orm, tenant_id = row
        return self._to_domain(orm), tenant_id

    async def latest_before(
        self, animal_id: UUID, observed_on: date
    ) -> WeightObservation | None:
        stmt = (
            select(WeightObservationORM)
            .where(WeightObservationORM.animal_id == animal_id)
            .where(WeightObservationORM.observed_on <= observed_on)
            .order_by(
                WeightObservationORM.observed_on.desc(),
                WeightObservationORM.created_at.desc(),
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def replace(self, observation_id: UUID, data: dict) -> WeightObservation | None:
        values = dict(data)
        if isinstance(values.get("kind"), WeightKind):
            values["kind"] = values["kind"].value
        stmt = (
            update(WeightObservationORM)
            .where(WeightObservationORM.id == observation_id)
            .values(**values)
            .returning(WeightObservationORM)
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def changed_since(
        self, tenant_id: UUID | None, since: datetime | None = None
    ) -> list[WeightObservation]:
        stmt = select(WeightObservationORM).join(
            AnimalORM, AnimalORM.id == WeightObservationORM.animal_id
        )
        if tenant_id is not None:
            stmt = stmt.where(AnimalORM.tenant_id == tenant_id)
        if since is not None:
            stmt = stmt.where(WeightObservationORM.updated_at > since)
        stmt = stmt.order_by(WeightObservationORM.updated_at, WeightObservationORM.id)
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]
