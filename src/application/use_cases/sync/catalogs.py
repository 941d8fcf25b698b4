from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Collection

from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.ports.catalogs_repo import CatalogKind

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CatalogDefaults:
    breed_id: int = 25
    vaccine_type_id: int = 11
    vaccine_name_id: int = 23


def resolve_or_default(catalog: Collection[int], ref: int | None, default: int) -> int:
    if ref is not None and ref in catalog:
        return ref
    return default


async def resolve_reference(
    uow: UnitOfWork, kind: CatalogKind, ref: int | None, default: int
) -> int:
    """Look up `ref` in its catalog, falling back to the "other" sentinel.

    Stale client-side catalogs must not block a sync, so an unknown reference is
    coerced instead of rejected.
    """
    catalog = await uow.catalogs.existing_ids(kind, [ref]) if ref is not None else set()
    resolved = resolve_or_default(catalog, ref, default)
    if resolved != ref:
        logger.warning("Unknown %s %s, using sentinel %s", kind.value, ref, default)
    return resolved
