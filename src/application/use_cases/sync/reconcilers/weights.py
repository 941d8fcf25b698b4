from __future__ import annotations

from src.application.use_cases.sync.payloads import WeightPayload, parse_payload
from src.application.use_cases.sync.reconcilers.base import NOT_FOUND, EntityReconciler, Rejection
from src.domain.models.sync import EntityClass, SyncAction, SyncOperation, SyncResult
from src.domain.models.weight_observation import WeightKind, WeightObservation
from src.utils.datetime_tz import utcnow

MUTABLE_FIELDS = (
    "observed_on",
    "weight_kg",
    "purchase_cost",
    "sale_cost",
    "purchase_price_per_kg",
    "sale_price_per_kg",
    "weight_gain",
    "partial_weight_gain",
    "value_gain",
    "months_elapsed",
)


class WeightReconciler(EntityReconciler):
    entity_class = EntityClass.WEIGHT_OBSERVATION
    supported_actions = frozenset({SyncAction.INSERT, SyncAction.UPDATE})

    async def insert(self, operation: SyncOperation) -> SyncResult:
        payload = parse_payload(WeightPayload, operation.data)
        animal = await self.keys.locate(reference=payload.animal_id, tag=payload.tag)
        if animal is None:
            raise Rejection(NOT_FOUND, "Animal not found or not owned")

        observation = WeightObservation.create(
            animal_id=animal.id,
            tag=animal.tag,
            observed_on=payload.observed_on,
            weight_kg=payload.weight_kg,
            kind=WeightKind.coerce(payload.kind),
            purchase_cost=payload.purchase_cost,
            sale_cost=payload.sale_cost,
            purchase_price_per_kg=payload.purchase_price_per_kg,
            sale_price_per_kg=payload.sale_price_per_kg,
            weight_gain=payload.weight_gain,
            partial_weight_gain=payload.partial_weight_gain,
            value_gain=payload.value_gain,
            months_elapsed=payload.months_elapsed,
        )
        previous = await self.uow.weights.latest_before(animal.id, payload.observed_on)
        observation.derive_gains(previous)
        created = await self.uow.weights.add(observation)
        return SyncResult.inserted(operation, created.id)

    async def update(self, operation: SyncOperation) -> SyncResult:
        payload = parse_payload(WeightPayload, operation.data)
        observation_id = self.own_id(operation)
        found = await self.uow.weights.get_with_owner(observation_id)
        if found is None or not self.context.allows(found[1]):
            raise Rejection(NOT_FOUND, "Weight observation not found")
        current, _ = found

        data = {name: getattr(payload, name) for name in MUTABLE_FIELDS}
        # kind is never null; an omitted kind keeps the stored one
        data["kind"] = WeightKind.coerce(payload.kind) if payload.kind else current.kind
        data["updated_at"] = utcnow()
        if await self.uow.weights.replace(observation_id, data) is None:
            raise Rejection(NOT_FOUND, "Weight observation not found")
        return SyncResult.affected(operation, SyncAction.UPDATE, 1)
