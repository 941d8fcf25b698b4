from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError, InfrastructureError
from src.application.interfaces.repositories.animals import AnimalRepository
from src.domain.models.animal import Animal
from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.db.orm.breed import BreedORM
from src.utils.datetime_tz import utcnow


class AnimalsSQLAlchemyRepository(AnimalRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: AnimalORM, breed: str | None = None) -> Animal:
        return Animal(
            id=orm.id,
            tenant_id=orm.tenant_id,
            tag=orm.tag,
            birth_weight=orm.birth_weight,
            breed_id=orm.breed_id,
            birth_date=orm.birth_date,
            photo_url=orm.photo_url,
            diseases=orm.diseases,
            notes=orm.notes,
            origin=orm.origin,
            brand=orm.brand,
            category=orm.category,
            location=orm.location,
            calving_number=orm.calving_number,
            precocity=orm.precocity,
            mating_type=orm.mating_type,
            dam_id=orm.dam_id,
            sire_id=orm.sire_id,
            breed=breed,
            deleted_at=orm.deleted_at,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def add(self, animal: Animal) -> Animal:
        orm = AnimalORM(
            id=animal.id,
            tenant_id=animal.tenant_id,
            tag=animal.tag,
            birth_weight=animal.birth_weight,
            breed_id=animal.breed_id,
            birth_date=animal.birth_date,
            photo_url=animal.photo_url,
            diseases=animal.diseases,
            notes=animal.notes,
            origin=animal.origin,
            brand=animal.brand,
            category=animal.category,
            location=animal.location,
            calving_number=animal.calving_number,
            precocity=animal.precocity,
            mating_type=animal.mating_type,
            dam_id=animal.dam_id,
            sire_id=animal.sire_id,
            deleted_at=animal.deleted_at,
            created_at=animal.created_at,
            updated_at=animal.updated_at,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Animal tag already exists for tenant") from exc
        return self._to_domain(orm)

    async def get_any(self, animal_id: UUID) -> Animal | None:
        stmt = (
            select(AnimalORM)
            .where(AnimalORM.id == animal_id)
            .where(AnimalORM.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def get_by_tag(self, tenant_id: UUID, tag: str) -> Animal | None:
        stmt = (
            select(AnimalORM)
            .where(AnimalORM.tenant_id == tenant_id)
            .where(AnimalORM.tag == tag)
            .where(AnimalORM.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def replace(self, animal_id: UUID, data: dict) -> Animal | None:
        stmt = (
            update(AnimalORM)
            .where(AnimalORM.id == animal_id)
            .where(AnimalORM.deleted_at.is_(None))
            .values(**data)
            .returning(AnimalORM)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Failed to update animal due to constraint violation") from exc
        orm = result.scalar_one_or_none()
        if not orm:
            return None
        return self._to_domain(orm)

    async def soft_delete(self, animal_id: UUID) -> bool:
        now = utcnow()
        stmt = (
            update(AnimalORM)
            .where(AnimalORM.id == animal_id)
            .where(AnimalORM.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
            .returning(AnimalORM.id)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise InfrastructureError("Failed to delete animal") from exc
        return result.scalar_one_or_none() is not None

    async def changed_since(
        self, tenant_id: UUID | None, since: datetime | None = None
    ) -> list[Animal]:
        stmt = (
            select(AnimalORM, BreedORM.name)
            .outerjoin(BreedORM, BreedORM.id == AnimalORM.breed_id)
            .where(AnimalORM.deleted_at.is_(None))
        )
        if tenant_id is not None:
            stmt = stmt.where(AnimalORM.tenant_id == tenant_id)
        if since is not None:
            stmt = stmt.where(AnimalORM.updated_at > since)
        stmt = stmt.order_by(AnimalORM.updated_at, AnimalORM.id)
        result = await self.session.execute(stmt)
        return [self._to_domain(orm, breed) for orm, breed in result.all()]
