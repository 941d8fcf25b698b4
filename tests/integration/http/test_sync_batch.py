from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import func, select

from src.application.errors import InfrastructureError
from src.domain.value_objects.role import Role
from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.db.orm.weight_observation import WeightObservationORM
from src.infrastructure.db.session import SQLAlchemyUnitOfWork


def animal_insert(tag: str, local_id: str | int | None = None, **data) -> dict:
    payload = {"tag": tag, "birth_weight": 30, "breed_id": 1, "birth_date": "2024-01-01"}
    payload.update(data)
    return {"table": "animal_records", "action": "INSERT", "recordId": local_id, "data": payload}


async def push(client, headers, *operations) -> dict:
    response = await client.post(
        "/api/v1/sync/batch", json={"operations": list(operations)}, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()


async def pull(client, headers, entity_class: str, since: str | None = None) -> dict:
    params = {"since": since} if since else None
    response = await client.get(f"/api/v1/sync/{entity_class}", params=params, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


async def test_connectivity_check_is_public(client):
    response = await client.get("/api/v1/sync/test")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["timestamp"]


async def test_push_requires_authentication(client):
    response = await client.post("/api/v1/sync/batch", json={"operations": [animal_insert("A1")]})
    assert response.status_code == 401


async def test_push_rejects_viewer(client, catalogs, auth_headers, tenant_id):
    response = await client.post(
        "/api/v1/sync/batch",
        json={"operations": [animal_insert("A1")]},
        headers=auth_headers(Role.VIEWER, tenant_id),
    )
    assert response.status_code == 403


async def test_push_requires_tenant_scope(client, catalogs, auth_headers):
    response = await client.post(
        "/api/v1/sync/batch",
        json={"operations": [animal_insert("A1")]},
        headers=auth_headers(Role.USER, None),
    )
    assert response.status_code == 403


async def test_malformed_batches_are_bad_requests(app, client, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    for body in ({}, {"operations": []}, {"operations": "nope"}):
        response = await client.post("/api/v1/sync/batch", json=body, headers=headers)
        assert response.status_code == 400, body
        assert response.json()["code"] == "bad_request"

    app.state.settings = app.state.settings.model_copy(update={"sync_max_operations": 2})
    response = await client.post(
        "/api/v1/sync/batch",
        json={"operations": [animal_insert("A1"), animal_insert("A2"), animal_insert("A3")]},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"received": 3}


async def test_insert_end_to_end(app, client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    body = await push(client, headers, animal_insert("A1", "local-1", breed_id=999))

    assert body["success"] is True
    assert body["successCount"] == 1
    assert body["failCount"] == 0
    result = body["results"][0]
    assert result["success"] is True
    assert result["action"] == "INSERT"
    assert result["table"] == "animal_records"
    assert result["localId"] == "local-1"
    server_id = result["serverId"]

    animals = await pull(client, headers, "animal_records")
    assert animals["count"] == 1
    record = animals["records"][0]
    assert record["id"] == server_id
    assert record["tag"] == "A1"
    assert record["breed_id"] == 25
    assert record["breed_name"] == "Otra raza"

    weights = await pull(client, headers, "weight_observations")
    assert weights["count"] == 1
    birth = weights["records"][0]
    assert birth["animal_id"] == server_id
    assert birth["kind"] == "birth"
    assert birth["observed_on"] == "2024-01-01"
    assert Decimal(birth["weight_kg"]) == Decimal("30")

    async with app.state.session_factory() as session:
        count = await session.scalar(
            select(func.count())
            .select_from(WeightObservationORM)
            .where(WeightObservationORM.animal_id == UUID(server_id))
        )
    assert count == 1


async def test_insert_is_idempotent_on_tag(client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    first = await push(client, headers, animal_insert("A1", "l-1"))
    server_id = first["results"][0]["serverId"]

    second = await push(client, headers, animal_insert("A1", "l-2"))
    result = second["results"][0]
    assert result["success"] is False
    assert result["error"] == "duplicate_natural_key"
    assert result["serverId"] == server_id
    assert result["localId"] == "l-2"

    animals = await pull(client, headers, "animal_records")
    assert animals["count"] == 1


async def test_same_tag_in_other_tenant_is_independent(
    client, catalogs, auth_headers, tenant_id, other_tenant_id
):
    first = await push(client, auth_headers(Role.USER, tenant_id), animal_insert("A1"))
    other = await push(client, auth_headers(Role.USER, other_tenant_id), animal_insert("A1"))
    assert first["results"][0]["success"] is True
    assert other["results"][0]["success"] is True
    assert first["results"][0]["serverId"] != other["results"][0]["serverId"]


async def test_partial_success_keeps_successful_operations(
    client, catalogs, auth_headers, tenant_id
):
    headers = auth_headers(Role.USER, tenant_id)
    broken = animal_insert("B1")
    del broken["data"]["birth_date"]
    body = await push(client, headers, animal_insert("A1"), broken, animal_insert("A2"))

    assert body["successCount"] == 2
    assert body["failCount"] == 1
    failed = body["results"][1]
    assert failed["success"] is False
    assert failed["error"] == "validation_error"
    assert "birth_date" in failed["message"]

    animals = await pull(client, headers, "animal_records")
    assert sorted(record["tag"] for record in animals["records"]) == ["A1", "A2"]


async def test_failed_insert_leaves_no_partial_writes(
    app, client, catalogs, auth_headers, tenant_id
):
    headers = auth_headers(Role.USER, tenant_id)
    body = await push(client, headers, animal_insert("A1", dam_id=str(uuid4())))
    assert body["results"][0]["error"] == "invalid_reference"

    async with app.state.session_factory() as session:
        animals = await session.scalar(select(func.count()).select_from(AnimalORM))
        weights = await session.scalar(select(func.count()).select_from(WeightObservationORM))
    assert animals == 0
    assert weights == 0


async def test_later_operations_see_earlier_inserts(client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    update = {
        "table": "animal_records",
        "action": "UPDATE",
        "recordId": "local-1",
        "data": {
            "tag": "A1",
            "birth_weight": 32,
            "breed_id": 1,
            "birth_date": "2024-01-01",
            "notes": "moved to north paddock",
        },
    }
    weight = {
        "table": "weight_observations",
        "action": "INSERT",
        "recordId": "w-1",
        "data": {"animal_id": "local-1", "observed_on": "2024-02-01", "weight_kg": 45},
    }
    calf = animal_insert("C1", "local-2", dam_id="local-1")
    body = await push(client, headers, animal_insert("A1", "local-1"), update, weight, calf)

    assert [result["success"] for result in body["results"]] == [True, True, True, True]
    assert body["results"][1]["affectedRows"] == 1

    pulled = await pull(client, headers, "animal_records")
    animals = {record["tag"]: record for record in pulled["records"]}
    assert animals["A1"]["notes"] == "moved to north paddock"
    assert Decimal(animals["A1"]["birth_weight"]) == Decimal("32")
    assert animals["C1"]["dam_id"] == animals["A1"]["id"]


async def test_update_clears_omitted_fields_and_keeps_tag(
    client, catalogs, auth_headers, tenant_id
):
    headers = auth_headers(Role.USER, tenant_id)
    created = await push(client, headers, animal_insert("A1", notes="calm", location="north"))
    server_id = created["results"][0]["serverId"]

    update = {
        "table": "animal_records",
        "action": "update",
        "recordId": server_id,
        "data": {"tag": "RENAMED", "birth_weight": 31, "breed_id": 1, "birth_date": "2024-01-01"},
    }
    body = await push(client, headers, update)
    assert body["results"][0]["success"] is True

    record = (await pull(client, headers, "animal_records"))["records"][0]
    assert record["tag"] == "A1"
    assert record["notes"] is None
    assert record["location"] is None


async def test_update_by_tag_without_record_id(client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    await push(client, headers, animal_insert("A1"))
    update = {
        "table": "animal_records",
        "action": "UPDATE",
        "data": {
            "tag": "A1",
            "birth_weight": 30,
            "breed_id": 1,
            "birth_date": "2024-01-01",
            "brand": "F7",
        },
    }
    body = await push(client, headers, update)
    assert body["results"][0]["success"] is True
    record = (await pull(client, headers, "animal_records"))["records"][0]
    assert record["brand"] == "F7"


async def test_other_tenant_cannot_touch_records(
    client, catalogs, auth_headers, tenant_id, other_tenant_id
):
    owner = auth_headers(Role.USER, tenant_id)
    intruder = auth_headers(Role.USER, other_tenant_id)
    created = await push(client, owner, animal_insert("A1"))
    server_id = created["results"][0]["serverId"]

    update = {
        "table": "animal_records",
        "action": "UPDATE",
        "recordId": server_id,
        "data": {"tag": "A1", "birth_weight": 99, "breed_id": 1, "birth_date": "2024-01-01"},
    }
    delete = {"table": "animal_records", "action": "DELETE", "recordId": server_id}
    weight = {
        "table": "weight_observations",
        "action": "INSERT",
        "data": {"animal_id": server_id, "observed_on": "2024-02-01", "weight_kg": 40},
    }
    body = await push(client, intruder, update, delete, weight)
    assert [result["error"] for result in body["results"]] == ["not_found"] * 3

    record = (await pull(client, owner, "animal_records"))["records"][0]
    assert Decimal(record["birth_weight"]) == Decimal("30")


async def test_admin_can_act_on_any_tenant(client, catalogs, auth_headers, tenant_id):
    created = await push(client, auth_headers(Role.USER, tenant_id), animal_insert("A1"))
    server_id = created["results"][0]["serverId"]

    delete = {"table": "animal_records", "action": "DELETE", "recordId": server_id}
    body = await push(client, auth_headers(Role.ADMIN, None), delete)
    assert body["results"][0]["success"] is True

    inserted = await push(
        client, auth_headers(Role.ADMIN, None, act_as=tenant_id), animal_insert("A2")
    )
    assert inserted["results"][0]["success"] is True
    animals = await pull(client, auth_headers(Role.USER, tenant_id), "animal_records")
    assert [record["tag"] for record in animals["records"]] == ["A2"]


async def test_admin_without_tenant_must_name_one_on_insert(
    client, catalogs, auth_headers, tenant_id
):
    headers = auth_headers(Role.ADMIN, None)
    body = await push(
        client, headers, animal_insert("A1"), animal_insert("A2", tenant_id=str(tenant_id))
    )
    assert body["results"][0]["error"] == "validation_error"
    assert body["results"][1]["success"] is True


async def test_soft_delete_hides_record_and_frees_tag(client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    created = await push(client, headers, animal_insert("A1"))
    server_id = created["results"][0]["serverId"]

    delete = {"table": "animal_records", "action": "DELETE", "recordId": server_id}
    body = await push(client, headers, delete, delete)
    assert body["results"][0]["success"] is True
    assert body["results"][0]["affectedRows"] == 1
    assert body["results"][1]["error"] == "not_found"

    assert (await pull(client, headers, "animal_records"))["count"] == 0

    again = await push(client, headers, animal_insert("A1"))
    assert again["results"][0]["success"] is True
    assert again["results"][0]["serverId"] != server_id


async def test_unsupported_operations_fail_individually(client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    body = await push(
        client,
        headers,
        {"table": "milk_records", "action": "INSERT", "data": {}},
        {"table": "weight_observations", "action": "DELETE", "recordId": str(uuid4())},
        {"table": "animal_records", "action": "UPSERT", "data": {}},
        animal_insert("A1"),
    )
    errors = [result.get("error") for result in body["results"]]
    assert errors == ["unsupported_entity_class", "unsupported_action", "unsupported_action", None]
    assert body["successCount"] == 1


async def test_weight_kind_coercion_and_derived_gains(client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    weight = {
        "table": "weight_observations",
        "action": "INSERT",
        "recordId": "w-1",
        "data": {
            "tag": "A1",
            "observed_on": "2024-03-01T08:30:00",
            "weight_kg": 60,
            "kind": "weird",
        },
    }
    body = await push(client, headers, animal_insert("A1"), weight)
    assert body["successCount"] == 2
    weight_id = body["results"][1]["serverId"]

    records = (await pull(client, headers, "weight_observations"))["records"]
    observation = next(record for record in records if record["id"] == weight_id)
    assert observation["kind"] == "routine"
    assert observation["tag"] == "A1"
    assert Decimal(observation["weight_gain"]) == Decimal("30")
    assert Decimal(observation["months_elapsed"]) == Decimal("1.97")


async def test_weight_update_keeps_kind_when_omitted(client, catalogs, auth_headers, tenant_id):
    headers = auth_headers(Role.USER, tenant_id)
    weight = {
        "table": "weight_observations",
        "action": "INSERT",
        "recordId": "w-1",
        "data": {"tag": "A1", "observed_on": "2024-03-01", "weight_kg": 60, "kind": "sale"},
    }
    update = {
        "table": "weight_observations",
        "action": "UPDATE",
        "recordId": "w-1",
        "data": {"tag": "A1", "observed_on": "2024-03-02", "weight_kg": 61},
    }
    body = await push(client, headers, animal_insert("A1"), weight, update)
    assert body["successCount"] == 3

    records = (await pull(client, headers, "weight_observations"))["records"]
    observation = next(record for record in records if record["observed_on"] == "2024-03-02")
    assert observation["kind"] == "sale"
    assert Decimal(observation["weight_kg"]) == Decimal("61")


async def test_vaccination_catalog_defaults_and_dose_validation(
    client, catalogs, auth_headers, tenant_id
):
    headers = auth_headers(Role.USER, tenant_id)

    def vaccination(dose: str, **extra) -> dict:
        data = {"tag": "A1", "administered_on": "2024-04-01", "dose": dose}
        data.update(extra)
        return {"table": "vaccination_events", "action": "INSERT", "data": data}

    body = await push(
        client,
        headers,
        animal_insert("A1"),
        vaccination("3"),
        vaccination("3 ml", vaccine_type_id=77, vaccine_name_id=88),
        vaccination("5 ml", vaccine_type_id=1, vaccine_name_id=1),
    )
    assert body["results"][1]["error"] == "validation_error"
    assert body["results"][2]["success"] is True
    assert body["results"][3]["success"] is True

    records = (await pull(client, headers, "vaccination_events"))["records"]
    by_dose = {record["dose"]: record for record in records}
    assert set(by_dose) == {"3 ml", "5 ml"}
    assert by_dose["3 ml"]["vaccine_type_id"] == 11
    assert by_dose["3 ml"]["vaccine_name_id"] == 23
    assert by_dose["3 ml"]["vaccine_name"] == "Otra vacuna"
    assert by_dose["5 ml"]["vaccine_name"] == "Aftosa"


async def test_vaccination_update_requires_ownership(
    client, catalogs, auth_headers, tenant_id, other_tenant_id
):
    owner = auth_headers(Role.USER, tenant_id)
    vaccination = {
        "table": "vaccination_events",
        "action": "INSERT",
        "recordId": "v-1",
        "data": {"tag": "A1", "administered_on": "2024-04-01", "dose": "2 ml"},
    }
    body = await push(client, owner, animal_insert("A1"), vaccination)
    event_id = body["results"][1]["serverId"]

    update = {
        "table": "vaccination_events",
        "action": "UPDATE",
        "recordId": event_id,
        "data": {"administered_on": "2024-04-02", "dose": "4 ml", "notes": "booster"},
    }
    rejected = await push(client, auth_headers(Role.USER, other_tenant_id), update)
    assert rejected["results"][0]["error"] == "not_found"

    accepted = await push(client, owner, update)
    assert accepted["results"][0]["success"] is True
    record = (await pull(client, owner, "vaccination_events"))["records"][0]
    assert record["dose"] == "4 ml"
    assert record["notes"] == "booster"


async def test_commit_failure_is_a_top_level_error(
    client, catalogs, auth_headers, tenant_id, monkeypatch
):
    async def failing_commit(self) -> None:
        raise InfrastructureError("Failed to persist changes")

    monkeypatch.setattr(SQLAlchemyUnitOfWork, "commit", failing_commit)
    response = await client.post(
        "/api/v1/sync/batch",
        json={"operations": [animal_insert("A1")]},
        headers=auth_headers(Role.USER, tenant_id),
    )
    assert response.status_code == 500
    assert response.json()["code"] == "infrastructure_error"
