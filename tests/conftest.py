from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///default.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from src.config.settings import Settings
from src.domain.value_objects.principal import Principal
from src.domain.value_objects.role import Role
from src.infrastructure.db.base import Base
from src.infrastructure.db.orm import (  # noqa: F401
    animal,
    breed,
    vaccination_event,
    vaccine,
    weight_observation,
)
from src.infrastructure.db.orm.breed import BreedORM
from src.infrastructure.db.orm.vaccine import VaccineNameORM, VaccineTypeORM
from src.interfaces.http.main import create_app

HeadersFactory = Callable[..., dict[str, str]]


@pytest.fixture()
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture()
def other_tenant_id() -> UUID:
    return uuid4()


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "jwt_secret_key": "test-secret",
            "tenant_header": "X-Tenant-ID",
            "log_level": "INFO",
            "environment": "test",
        }
    )


@pytest.fixture()
def app(test_settings: Settings):
    return create_app(settings=test_settings)


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        engine = app.state.engine
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield client
    await app.state.engine.dispose()


@pytest.fixture()
async def catalogs(app, client) -> None:
    async with app.state.session_factory() as session:
        session.add_all(
            [
                BreedORM(id=1, name="Brahman"),
                BreedORM(id=25, name="Otra raza"),
                VaccineTypeORM(id=1, name="Viral"),
                VaccineTypeORM(id=11, name="Otro tipo"),
                VaccineNameORM(id=1, name="Aftosa"),
                VaccineNameORM(id=23, name="Otra vacuna"),
            ]
        )
        await session.commit()


@pytest.fixture()
def auth_headers(app) -> HeadersFactory:
    def build(
        role: Role = Role.USER,
        tenant_id: UUID | None = None,
        *,
        act_as: UUID | None = None,
    ) -> dict[str, str]:
        token = app.state.jwt_service.create_access_token(
            Principal(user_id=uuid4(), tenant_id=tenant_id, role=role)
        )
        headers = {"Authorization": f"Bearer {token}"}
        if act_as is not None:
            headers["X-Tenant-ID"] = str(act_as)
        return headers

    return build
