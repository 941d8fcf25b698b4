from __future__ import annotations

from uuid import UUID

from src.application.errors import ConflictError, ValidationError
from src.application.use_cases.sync.catalogs import resolve_reference
from src.application.use_cases.sync.payloads import AnimalPayload, Reference, parse_payload
from src.application.use_cases.sync.reconcilers.base import (
    DUPLICATE_NATURAL_KEY,
    INVALID_REFERENCE,
    NOT_FOUND,
    EntityReconciler,
    Rejection,
)
from src.domain.models.animal import Animal
from src.domain.models.sync import EntityClass, SyncAction, SyncOperation, SyncResult
from src.domain.models.weight_observation import WeightObservation
from src.domain.ports.catalogs_repo import CatalogKind
from src.utils.datetime_tz import utcnow

# Replaced wholesale by UPDATE; anything omitted from the payload is cleared.
MUTABLE_FIELDS = (
    "birth_weight",
    "birth_date",
    "photo_url",
    "diseases",
    "notes",
    "origin",
    "brand",
    "category",
    "location",
    "calving_number",
    "precocity",
    "mating_type",
)


class AnimalReconciler(EntityReconciler):
    """Applies animal intents.

    INSERT is idempotent on the tag within the acting tenant and has one side
    effect: it records exactly one birth WeightObservation for the new animal.
    DELETE is a soft delete.
    """

    entity_class = EntityClass.ANIMAL_RECORD
    supported_actions = frozenset({SyncAction.INSERT, SyncAction.UPDATE, SyncAction.DELETE})

    async def insert(self, operation: SyncOperation) -> SyncResult:
        payload = parse_payload(AnimalPayload, operation.data)
        tenant_id = self.context.acting_tenant(payload.tenant_id)
        if tenant_id is None:
            raise ValidationError("tenant_id is required when acting without a tenant scope")

        existing = await self.keys.find(tenant_id, payload.tag)
        if existing is not None:
            raise Rejection(
                DUPLICATE_NATURAL_KEY,
                f"Tag {payload.tag} is already registered",
                server_id=existing.id,
            )

        dam_id = await self._parent(payload.dam_id, "dam")
        sire_id = await self._parent(payload.sire_id, "sire")
        breed_id = await resolve_reference(
            self.uow, CatalogKind.BREED, payload.breed_id, self.context.defaults.breed_id
        )
        animal = Animal.create(
            tenant_id=tenant_id,
            tag=payload.tag,
            birth_weight=payload.birth_weight,
            breed_id=breed_id,
            birth_date=payload.birth_date,
            photo_url=payload.photo_url,
            diseases=payload.diseases,
            notes=payload.notes,
            origin=payload.origin,
            brand=payload.brand,
            category=payload.category,
            location=payload.location,
            calving_number=payload.calving_number,
            precocity=payload.precocity,
            mating_type=payload.mating_type,
            dam_id=dam_id,
            sire_id=sire_id,
        )
        created = await self._add_once(animal)
        await self.uow.weights.add(
            WeightObservation.birth(
                animal_id=created.id,
                tag=created.tag,
                born_on=created.birth_date,
                weight_kg=created.birth_weight,
            )
        )
        return SyncResult.inserted(operation, created.id)

    async def update(self, operation: SyncOperation) -> SyncResult:
        payload = parse_payload(AnimalPayload, operation.data)
        target = await self._target(operation, payload.tag)
        dam_id = await self._parent(payload.dam_id, "dam", child_id=target.id)
        sire_id = await self._parent(payload.sire_id, "sire", child_id=target.id)
        breed_id = await resolve_reference(
            self.uow, CatalogKind.BREED, payload.breed_id, self.context.defaults.breed_id
        )
        data = {name: getattr(payload, name) for name in MUTABLE_FIELDS}
        data.update(breed_id=breed_id, dam_id=dam_id, sire_id=sire_id, updated_at=utcnow())
        updated = await self.uow.animals.replace(target.id, data)
        if updated is None:
            raise Rejection(NOT_FOUND, "Animal not found or not owned")
        return SyncResult.affected(operation, SyncAction.UPDATE, 1)

    async def delete(self, operation: SyncOperation) -> SyncResult:
        tag = operation.data.get("tag")
        target = await self._target(operation, tag if isinstance(tag, str) else None)
        if not await self.uow.animals.soft_delete(target.id):
            raise Rejection(NOT_FOUND, "Animal not found or not owned")
        return SyncResult.affected(operation, SyncAction.DELETE, 1)

    async def _target(self, operation: SyncOperation, tag: str | None) -> Animal:
        if operation.record_id is not None and operation.record_id != "":
            animal = await self.keys.locate(reference=operation.record_id)
        else:
            animal = await self.keys.locate(tag=tag)
        if animal is None:
            raise Rejection(NOT_FOUND, "Animal not found or not owned")
        return animal

    async def _parent(
        self, reference: Reference | None, role: str, *, child_id: UUID | None = None
    ) -> UUID | None:
        if reference is None:
            return None
        parent = await self.keys.locate(reference=reference)
        if parent is None or parent.id == child_id:
            raise Rejection(INVALID_REFERENCE, f"Unknown {role} reference {reference!r}")
        return parent.id

    async def _add_once(self, animal: Animal) -> Animal:
        # A concurrent batch may register the same tag between find() and the flush
        try:
            async with self.uow.savepoint():
                return await self.uow.animals.add(animal)
        except ConflictError:
            existing = await self.keys.find(animal.tenant_id, animal.tag)
            if existing is None:
                raise
            raise Rejection(
                DUPLICATE_NATURAL_KEY,
                f"Tag {animal.tag} is already registered",
                server_id=existing.id,
            ) from None
