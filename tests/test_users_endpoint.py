# tests/test_users_endpoint.py
from __future__ import annotations

from fastapi.testclient import TestClient

USER_ID = "6b1f9c2e-5a3d-4c1b-9f2e-000000000001"

NEW_USER = {
    "email": "usuario@ejemplo.com",
    "password": "tuPasswordSegura",
    "person": {
        "name": "Juan",
        "lastName": "Pérez",
        "birthDate": "1990-01-01",
        "phoneNumber": "1234567890",
    },
    "roleId": 1,
}


def _seed_users(store) -> None:
    store.seed("person", {"id": 7, "name": "Ana", "last_name": "López"})
    store.seed(
        "user",
        {
            "id": USER_ID,
            "person_id": 7,
            "role_id": 1,
            "active": 1,
            "person": {"id": 7, "name": "Ana", "last_name": "López"},
            "role": {"id": 1, "name": "admin"},
        },
        {"id": "6b1f9c2e-5a3d-4c1b-9f2e-000000000002", "person_id": 8, "role_id": 2, "active": 0},
    )


def test_list_users_returns_active_only(client: TestClient, store) -> None:
    _seed_users(store)

    r = client.get("/api/v1/users")

    assert r.status_code == 200
    body = r.json()
    assert [u["id"] for u in body] == [USER_ID]
    assert body[0]["person"]["lastName"] == "López"
    assert body[0]["roleId"] == 1


def test_get_user_by_uuid(client: TestClient, store) -> None:
    _seed_users(store)

    r = client.get(f"/api/v1/users?id={USER_ID}")

    assert r.status_code == 200
    assert r.json()["role"]["name"] == "admin"


def test_create_user_creates_account_then_rows(client: TestClient, store) -> None:
    def seed_after_procedure(function, params):
        data = params["user_data"]
        store.seed("user", {"id": data["id"], "role_id": data["roleId"], "active": data["active"], "person": data["person"]})

    original_rpc = store.rpc

    def rpc(function, params):
        result = original_rpc(function, params)
        seed_after_procedure(function, params)
        return result

    store.rpc = rpc

    r = client.post("/api/v1/users", json=NEW_USER)

    assert r.status_code == 201
    account_id = store.accounts[0]["id"]
    assert store.accounts[0]["email"] == "usuario@ejemplo.com"
    body = r.json()
    assert body["id"] == account_id
    assert body["person"]["lastName"] == "Pérez"

    _, function, params = [c for c in store.calls if c[0] == "rpc_params"][0]
    assert function == "create_user_with_person"
    assert params["user_data"] == {
        "id": account_id,
        "roleId": 1,
        "active": 1,
        "person": {
            "name": "Juan",
            "last_name": "Pérez",
            "birth_date": "1990-01-01",
            "phone_number": "1234567890",
        },
    }


def test_create_user_stops_when_account_creation_fails(client: TestClient, store, store_failure) -> None:
    store.failures[("create_account", "auth")] = store_failure("User already registered")

    r = client.post("/api/v1/users", json=NEW_USER)

    assert r.status_code == 500
    assert r.json()["message"] == "User already registered"
    assert not any(c[0] == "rpc" for c in store.calls)


def test_create_user_procedure_failure_keeps_account(client: TestClient, store, store_failure) -> None:
    store.failures[("rpc", "create_user_with_person")] = store_failure("violates foreign key")

    r = client.post("/api/v1/users", json=NEW_USER)

    assert r.status_code == 500
    assert len(store.accounts) == 1


def test_create_user_validation(client: TestClient) -> None:
    r = client.post("/api/v1/users", json={"email": "a@b.c", "password": "x"})

    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["subErrors"]}
    assert {"person", "roleId"} <= fields


def test_update_user_person_and_role(client: TestClient, store) -> None:
    _seed_users(store)

    r = client.put(f"/api/v1/users?id={USER_ID}", json={"person": {"lastName": "García"}, "roleId": 2})

    assert r.status_code == 200
    assert store.rows("person")[0]["last_name"] == "García"
    assert store.rows("user")[0]["role_id"] == 2
    assert r.json()["roleId"] == 2


def test_update_user_without_changes_reads_back(client: TestClient, store) -> None:
    _seed_users(store)

    r = client.put(f"/api/v1/users?id={USER_ID}", json={})

    assert r.status_code == 200
    assert not any(c[0] == "update" for c in store.calls)


def test_delete_user_is_soft(client: TestClient, store) -> None:
    _seed_users(store)

    r = client.delete(f"/api/v1/users?id={USER_ID}")

    assert r.status_code == 200
    assert store.rows("user")[0]["active"] == 0
    assert client.get("/api/v1/users").json() == []


def test_get_inactive_user_by_id_is_404(client: TestClient, store) -> None:
    _seed_users(store)

    r = client.get("/api/v1/users?id=6b1f9c2e-5a3d-4c1b-9f2e-000000000002")

    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"


def test_deleted_user_is_no_longer_readable_by_id(client: TestClient, store) -> None:
    _seed_users(store)

    client.delete(f"/api/v1/users?id={USER_ID}")

    assert client.get(f"/api/v1/users?id={USER_ID}").status_code == 404
