from __future__ import annotations

from src.application.use_cases.sync.catalogs import resolve_reference
from src.application.use_cases.sync.payloads import VaccinationPayload, parse_payload
from src.application.use_cases.sync.reconcilers.base import NOT_FOUND, EntityReconciler, Rejection
from src.domain.models.sync import EntityClass, SyncAction, SyncOperation, SyncResult
from src.domain.models.vaccination_event import VaccinationEvent
from src.domain.ports.catalogs_repo import CatalogKind
from src.utils.datetime_tz import utcnow


class VaccinationReconciler(EntityReconciler):
    entity_class = EntityClass.VACCINATION_EVENT
    supported_actions = frozenset({SyncAction.INSERT, SyncAction.UPDATE})

    async def insert(self, operation: SyncOperation) -> SyncResult:
        payload = parse_payload(VaccinationPayload, operation.data)
        animal = await self.keys.locate(reference=payload.animal_id, tag=payload.tag)
        if animal is None:
            raise Rejection(NOT_FOUND, "Animal not found or not owned")

        vaccine_type_id, vaccine_name_id = await self._catalog_refs(payload)
        event = VaccinationEvent.create(
            animal_id=animal.id,
            administered_on=payload.administered_on,
            vaccine_type_id=vaccine_type_id,
            vaccine_name_id=vaccine_name_id,
            dose=payload.dose,
            notes=payload.notes,
        )
        created = await self.uow.vaccinations.add(event)
        return SyncResult.inserted(operation, created.id)

    async def update(self, operation: SyncOperation) -> SyncResult:
        payload = parse_payload(VaccinationPayload, operation.data)
        event_id = self.own_id(operation)
        found = await self.uow.vaccinations.get_with_owner(event_id)
        if found is None or not self.context.allows(found[1]):
            raise Rejection(NOT_FOUND, "Vaccination event not found")

        vaccine_type_id, vaccine_name_id = await self._catalog_refs(payload)
        data = {
            "administered_on": payload.administered_on,
            "vaccine_type_id": vaccine_type_id,
            "vaccine_name_id": vaccine_name_id,
            "dose": payload.dose,
            "notes": payload.notes,
            "updated_at": utcnow(),
        }
        if await self.uow.vaccinations.replace(event_id, data) is None:
            raise Rejection(NOT_FOUND, "Vaccination event not found")
        return SyncResult.affected(operation, SyncAction.UPDATE, 1)

    async def _catalog_refs(self, payload: VaccinationPayload) -> tuple[int, int]:
        defaults = self.context.defaults
        vaccine_type_id = await resolve_reference(
            self.uow, CatalogKind.VACCINE_TYPE, payload.vaccine_type_id, defaults.vaccine_type_id
        )
        vaccine_name_id = await resolve_reference(
            self.uow, CatalogKind.VACCINE_NAME, payload.vaccine_name_id, defaults.vaccine_name_id
        )
        return vaccine_type_id, vaccine_name_id
