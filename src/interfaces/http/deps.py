from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request

from src.application.errors import AuthError, PermissionDenied
from src.application.use_cases.sync.catalogs import CatalogDefaults
from src.config.settings import Settings, get_settings
from src.infrastructure.auth.context import AuthContext
from src.infrastructure.db.session import SQLAlchemyUnitOfWork


async def get_auth_context(request: Request) -> AuthContext:
    context = getattr(request.state, "auth_context", None)
    if context is None:
        raise AuthError("Authentication required")
    return context


async def require_writer(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Pushing mutates farm data; read-only roles may only pull."""
    if not context.role.can_write():
        raise PermissionDenied("Read-only role cannot push changes")
    return context


async def get_uow(request: Request) -> AsyncIterator[SQLAlchemyUnitOfWork]:
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Session factory not configured")
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        yield uow


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_catalog_defaults(settings: Settings = Depends(get_app_settings)) -> CatalogDefaults:
    return CatalogDefaults(
        breed_id=settings.default_breed_id,
        vaccine_type_id=settings.default_vaccine_type_id,
        vaccine_name_id=settings.default_vaccine_name_id,
    )
