from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from src.application.errors import BadRequest, UnsupportedEntityClass
from src.application.use_cases.sync import pull_changes, push_batch
from src.application.use_cases.sync.catalogs import CatalogDefaults
from src.config.settings import Settings
from src.domain.models.sync import EntityClass
from src.infrastructure.auth.context import AuthContext
from src.interfaces.http.deps import (
    get_app_settings,
    get_auth_context,
    get_catalog_defaults,
    get_uow,
    require_writer,
)
from src.interfaces.http.schemas.sync import (
    AnimalRecordOut,
    SyncBatchRequest,
    SyncBatchResponse,
    SyncPullResponse,
    SyncResultOut,
    SyncStatusResponse,
    VaccinationEventOut,
    WeightObservationOut,
)
from src.utils.datetime_tz import utcnow

router = APIRouter(prefix="/sync", tags=["sync"])

_RECORD_SCHEMAS = {
    EntityClass.ANIMAL_RECORD: AnimalRecordOut,
    EntityClass.WEIGHT_OBSERVATION: WeightObservationOut,
    EntityClass.VACCINATION_EVENT: VaccinationEventOut,
}


@router.get("/test", response_model=SyncStatusResponse)
async def connectivity_check() -> SyncStatusResponse:
    """Connectivity check used by clients before attempting a sync."""
    return SyncStatusResponse(message="Sync service reachable", timestamp=utcnow())


@router.post("/batch", response_model=SyncBatchResponse)
async def push(
    payload: SyncBatchRequest,
    context: AuthContext = Depends(require_writer),
    settings: Settings = Depends(get_app_settings),
    defaults: CatalogDefaults = Depends(get_catalog_defaults),
    uow=Depends(get_uow),
) -> SyncBatchResponse:
    if len(payload.operations) > settings.sync_max_operations:
        raise BadRequest(
            f"A batch accepts at most {settings.sync_max_operations} operations",
            details={"received": len(payload.operations)},
        )
    batch = await push_batch.execute(
        uow,
        context.principal,
        [operation.to_domain() for operation in payload.operations],
        defaults=defaults,
    )
    return SyncBatchResponse(
        results=[SyncResultOut.model_validate(result) for result in batch.results],
        success_count=batch.success_count,
        fail_count=batch.fail_count,
        timestamp=batch.timestamp,
    )


@router.get("/{entity_class}", response_model=SyncPullResponse)
async def pull(
    entity_class: str,
    since: datetime | None = Query(default=None),
    context: AuthContext = Depends(get_auth_context),
    uow=Depends(get_uow),
) -> SyncPullResponse:
    parsed = EntityClass.parse(entity_class)
    if parsed is None:
        raise UnsupportedEntityClass(f"Unsupported entity class: {entity_class!r}")
    page = await pull_changes.execute(uow, context.principal, parsed, since)
    schema = _RECORD_SCHEMAS[parsed]
    return SyncPullResponse(
        records=[schema.model_validate(record) for record in page.records],
        count=page.count,
        timestamp=page.timestamp,
        watermark=page.watermark,
    )
