from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.ports.catalogs_repo import CatalogKind, CatalogsRepo
from src.infrastructure.db.orm.breed import BreedORM
from src.infrastructure.db.orm.vaccine import VaccineNameORM, VaccineTypeORM

_TABLES = {
    CatalogKind.BREED: BreedORM,
    CatalogKind.VACCINE_TYPE: VaccineTypeORM,
    CatalogKind.VACCINE_NAME: VaccineNameORM,
}


class CatalogsSQLAlchemyRepository(CatalogsRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def existing_ids(self, kind: CatalogKind, ids: Iterable[int]) -> set[int]:
        wanted = {value for value in ids if value is not None}
        if not wanted:
            return set()
        table = _TABLES[kind]
        res = await self.session.execute(select(table.id).where(table.id.in_(wanted)))
        return set(res.scalars().all())
