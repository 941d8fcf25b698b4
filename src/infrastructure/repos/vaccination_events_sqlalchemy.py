from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError
from src.application.interfaces.repositories.vaccination_events import (
    VaccinationEventsRepository,
)
from src.domain.models.vaccination_event import VaccinationEvent
from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.db.orm.vaccination_event import VaccinationEventORM
from src.infrastructure.db.orm.vaccine import VaccineNameORM


class VaccinationEventsSQLAlchemyRepository(VaccinationEventsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(
        self, orm: VaccinationEventORM, vaccine_name: str | None = None
    ) -> VaccinationEvent:
        return VaccinationEvent(
            id=orm.id,
            animal_id=orm.animal_id,
            administered_on=orm.administered_on,
            vaccine_type_id=orm.vaccine_type_id,
            vaccine_name_id=orm.vaccine_name_id,
            dose=orm.dose,
            notes=orm.notes,
            vaccine_name=vaccine_name,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def add(self, event: VaccinationEvent) -> VaccinationEvent:
        orm = VaccinationEventORM(
            id=event.id,
            animal_id=event.animal_id,
            administered_on=event.administered_on,
            vaccine_type_id=event.vaccine_type_id,
            vaccine_name_id=event.vaccine_name_id,
            dose=event.dose,
            notes=event.notes,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Failed to record vaccination event") from exc
        return self._to_domain(orm)

    async def get_with_owner(self, event_id: UUID) -> tuple[VaccinationEvent, UUID] | None:
        stmt = (
            select(VaccinationEventORM, AnimalORM.tenant_id)
            .join(AnimalORM, AnimalORM.id == VaccinationEventORM.animal_id)
            .where(VaccinationEventORM.id == event_id)
        )
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        orm, tenant_id = row
        return self._to_domain(orm), tenant_id

    async def replace(self, event_id: UUID, data: dict) -> VaccinationEvent | None:
        stmt = (
            update(VaccinationEventORM)
            .where(VaccinationEventORM.id == event_id)
            .values(**data)
            .returning(VaccinationEventORM)
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def changed_since(
        self, tenant_id: UUID | None, since: datetime | None = None
    ) -> list[VaccinationEvent]:
        stmt = (
            select(VaccinationEventORM, VaccineNameORM.name)
            .join(AnimalORM, AnimalORM.id == VaccinationEventORM.animal_id)
            .outerjoin(VaccineNameORM, VaccineNameORM.id == VaccinationEventORM.vaccine_name_id)
        )
        if tenant_id is not None:
            stmt = stmt.where(AnimalORM.tenant_id == tenant_id)
        if since is not None:
            stmt = stmt.where(VaccinationEventORM.updated_at > since)
        stmt = stmt.order_by(VaccinationEventORM.updated_at, VaccinationEventORM.id)
        result = await self.session.execute(stmt)
        return [self._to_domain(orm, name) for orm, name in result.all()]
