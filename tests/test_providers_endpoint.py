# tests/test_providers_endpoint.py
from __future__ import annotations

from fastapi.testclient import TestClient

NEW_PROVIDER = {
    "name": "AUTOZONE",
    "phoneNumber": "8112345678",
    "address": "AV. CONSTITUCION 100",
}


def _seed_providers(store) -> None:
    store.seed(
        "provider",
        {"id": 1, "name": "FRONTERA", "phone_number": "8129710460", "address": "AV. CHAPULTEPEC 2321", "active": True},
        {"id": 2, "name": "RADIADORES DEL NORTE", "phone_number": "8180000000", "address": "CENTRO", "active": True},
        {"id": 3, "name": "OLD SUPPLIER", "phone_number": "0", "address": "-", "active": False},
    )


def test_list_providers_wraps_rows_with_total_count(client: TestClient, store) -> None:
    _seed_providers(store)

    r = client.get("/api/v1/providers")

    assert r.status_code == 200
    body = r.json()
    assert body["totalCount"] == 2
    assert [p["name"] for p in body["providers"]] == ["FRONTERA", "RADIADORES DEL NORTE"]
    assert body["providers"][0]["phoneNumber"] == "8129710460"


def test_list_providers_filters_by_name(client: TestClient, store) -> None:
    _seed_providers(store)

    body = client.get("/api/v1/providers?name=norte").json()

    assert body["totalCount"] == 1
    assert body["providers"][0]["id"] == 2


def test_get_provider_by_id(client: TestClient, store) -> None:
    _seed_providers(store)

    r = client.get("/api/v1/providers?id=1")

    assert r.status_code == 200
    assert r.json()["address"] == "AV. CHAPULTEPEC 2321"


def test_create_provider(client: TestClient, store) -> None:
    _seed_providers(store)

    r = client.post("/api/v1/providers", json=NEW_PROVIDER)

    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "AUTOZONE"
    assert body["phoneNumber"] == "8112345678"
    assert body["comments"] is None
    assert store.rows("provider")[-1]["phone_number"] == "8112345678"


def test_create_provider_refused_when_name_is_similar(client: TestClient, store) -> None:
    _seed_providers(store)

    r = client.post("/api/v1/providers", json={**NEW_PROVIDER, "name": "Fronteras"})

    assert r.status_code == 409
    body = r.json()
    assert body["entityKind"] == "provider"
    assert body["similarRecord"]["name"] == "FRONTERA"
    assert len(store.rows("provider")) == 3


def test_create_provider_force_create(client: TestClient, store) -> None:
    _seed_providers(store)

    r = client.post("/api/v1/providers?forceCreate=true", json={**NEW_PROVIDER, "name": "Fronteras"})

    assert r.status_code == 201
    assert len(store.rows("provider")) == 4


def test_create_provider_requires_phone_and_address(client: TestClient) -> None:
    r = client.post("/api/v1/providers", json={"name": "AUTOZONE"})

    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["subErrors"]}
    assert {"phoneNumber", "address"} <= fields


def test_update_provider_returns_single_row(client: TestClient, store) -> None:
    _seed_providers(store)

    r = client.put("/api/v1/providers?id=2", json={"phoneNumber": "8181818181"})

    assert r.status_code == 200
    assert r.json()["phoneNumber"] == "8181818181"
    assert store.rows("provider")[1]["phone_number"] == "8181818181"


def test_delete_provider_is_soft(client: TestClient, store) -> None:
    _seed_providers(store)

    r = client.delete("/api/v1/providers?id=1")

    assert r.status_code == 200
    assert store.rows("provider")[0]["active"] is False
    assert client.get("/api/v1/providers").json()["totalCount"] == 1


def test_delete_missing_provider_is_404(client: TestClient, store) -> None:
    r = client.delete("/api/v1/providers?id=77")

    assert r.status_code == 404
