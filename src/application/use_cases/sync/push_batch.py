from __future__ import annotations

import logging
from typing import Sequence

from src.application.errors import AppError, BadRequest, InfrastructureError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.sync.access import AccessCheck, can_access, require_tenant_scope
from src.application.use_cases.sync.catalogs import CatalogDefaults
from src.application.use_cases.sync.context import SyncBatchContext
from src.application.use_cases.sync.router import OperationRouter
from src.domain.models.sync import SyncBatchResult, SyncOperation, SyncResult
from src.domain.value_objects.principal import Principal

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal_error"


async def execute(
    uow: UnitOfWork,
    principal: Principal,
    operations: Sequence[SyncOperation],
    *,
    defaults: CatalogDefaults | None = None,
    access: AccessCheck = can_access,
) -> SyncBatchResult:
    """Apply a client's offline mutations in one transaction.

    Operations run in submission order, each inside its own savepoint so that a
    failing operation leaves no partial writes behind. Failures are reported per
    operation and never abort the batch: the transaction is committed once every
    operation has been tried. Only a failed commit rejects the whole batch.
    """
    if not operations:
        raise BadRequest("At least one operation is required")
    require_tenant_scope(principal)

    context = SyncBatchContext(
        principal=principal, defaults=defaults or CatalogDefaults(), access=access
    )
    router = OperationRouter.for_batch(uow, context)
    results: list[SyncResult] = []
    for position, operation in enumerate(operations):
        result = await _apply_isolated(uow, router, operation, position)
        context.remember_result(result)
        results.append(result)

    try:
        await uow.commit()
    except InfrastructureError:
        logger.error("Sync batch of %d operations rolled back at commit", len(operations))
        raise

    batch = SyncBatchResult(results=results)
    logger.info(
        "Sync batch by %s applied: %d succeeded, %d failed",
        principal.user_id,
        batch.success_count,
        batch.fail_count,
    )
    return batch


async def _apply_isolated(
    uow: UnitOfWork, router: OperationRouter, operation: SyncOperation, position: int
) -> SyncResult:
    try:
        async with uow.savepoint():
            result = await router.dispatch(operation)
    except AppError as exc:
        result = SyncResult.failed(operation, exc.code, exc.message)
    except Exception:
        logger.exception(
            "Sync operation #%d (%s %s) raised", position, operation.action, operation.table
        )
        return SyncResult.failed(operation, INTERNAL_ERROR, "Operation could not be applied")
    if not result.success:
        logger.info(
            "Sync operation #%d (%s %s) rejected: %s",
            position,
            operation.action,
            operation.table,
            result.error,
        )
    return result
