from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, AsyncContextManager

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.application.errors import InfrastructureError
from src.application.interfaces.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def create_engine(database_url: str) -> AsyncEngine:
    engine = create_async_engine(database_url, echo=False, future=True)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    return engine


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    # SAVEPOINT requires BEGIN to be emitted by SQLAlchemy, not by the driver.
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


class SQLAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory
        self.session: AsyncSession | None = None
        self.animals = None
        self.weights = None
        self.vaccinations = None
        self.catalogs = None

    async def __aenter__(self) -> UnitOfWork:
        self.session = self._session_factory()
        from src.infrastructure.repos.animals_sqlalchemy import AnimalsSQLAlchemyRepository
        from src.infrastructure.repos.catalogs_sqlalchemy import CatalogsSQLAlchemyRepository
        from src.infrastructure.repos.vaccination_events_sqlalchemy import (
            VaccinationEventsSQLAlchemyRepository,
        )
        from src.infrastructure.repos.weight_observations_sqlalchemy import (
            WeightObservationsSQLAlchemyRepository,
        )

        self.animals = AnimalsSQLAlchemyRepository(self.session)
        self.weights = WeightObservationsSQLAlchemyRepository(self.session)
        self.vaccinations = VaccinationEventsSQLAlchemyRepository(self.session)
        self.catalogs = CatalogsSQLAlchemyRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self.session:
            return
        try:
            if exc:
                await self.session.rollback()
        finally:
            await self.session.close()
            self.session = None
            self.animals = None
            self.weights = None
            self.vaccinations = None
            self.catalogs = None

    def savepoint(self) -> AsyncContextManager[Any]:
        if not self.session:
            raise InfrastructureError("Unit of work is not active")
        return self.session.begin_nested()

    async def commit(self) -> None:
        if not self.session:
            return
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Commit failed, rolling back")
            await self.session.rollback()
            raise InfrastructureError("Failed to persist changes") from exc

    async def rollback(self) -> None:
        if not self.session:
            return
        await self.session.rollback()
