from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.sync.access import require_tenant_scope
from src.domain.models.animal import Animal
from src.domain.models.sync import EntityClass
from src.domain.models.vaccination_event import VaccinationEvent
from src.domain.models.weight_observation import WeightObservation
from src.domain.value_objects.principal import Principal
from src.utils.datetime_tz import ensure_utc, utcnow

ChangeRecord = Union[Animal, WeightObservation, VaccinationEvent]


@dataclass
class ChangeFeedPage:
    entity_class: EntityClass
    records: list[ChangeRecord]
    timestamp: datetime
    watermark: datetime | None

    @property
    def count(self) -> int:
        return len(self.records)


async def execute(
    uow: UnitOfWork,
    principal: Principal,
    entity_class: EntityClass,
    since: datetime | None = None,
) -> ChangeFeedPage:
    """Rows of `entity_class` changed after `since`, oldest change first.

    Without `since` the tenant's full current state is returned. Soft-deleted
    animals are never part of the feed. The server keeps no cursor: callers
    persist `watermark` themselves.
    """
    tenant_id = require_tenant_scope(principal)
    since_utc = ensure_utc(since) if since is not None else None
    timestamp = utcnow()

    if entity_class is EntityClass.ANIMAL_RECORD:
        records: list[ChangeRecord] = list(await uow.animals.changed_since(tenant_id, since_utc))
    elif entity_class is EntityClass.WEIGHT_OBSERVATION:
        records = list(await uow.weights.changed_since(tenant_id, since_utc))
    else:
        records = list(await uow.vaccinations.changed_since(tenant_id, since_utc))

    watermark = max((ensure_utc(record.updated_at) for record in records), default=since_utc)
    return ChangeFeedPage(
        entity_class=entity_class,
        records=records,
        timestamp=timestamp,
        watermark=watermark,
    )
