"""Tests for admin endpoints."""

from fastapi.testclient import TestClient

from invitation_store.api.app import create_app
from tests.conftest import make_critical, make_record

HEADERS = {"X-Admin-Token": "admin-token"}


def test_admin_storage_endpoint(container) -> None:
    app = create_app(container)
    client = TestClient(app)
    container.stores.durable.upsert(make_record("A"))

    response = client.get("/admin/storage", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["durable"]["used_bytes"] == container.stores.durable.usage().used_bytes
    assert data["durable"]["total_bytes"] == 5 * 1024 * 1024
    assert data["durable"]["critical"] is False
    assert data["transient"]["used_bytes"] == 0


def test_admin_storage_reports_critical_tier(container) -> None:
    app = create_app(container)
    client = TestClient(app)
    container.stores.durable.upsert(make_record("A"))
    make_critical(container.stores, container.stores.durable.usage().used_bytes)

    response = client.get("/admin/storage", headers=HEADERS)

    assert response.json()["durable"]["critical"] is True
    assert response.json()["durable"]["percentage"] > 90


def test_admin_cleanup_endpoint(container) -> None:
    app = create_app(container)
    client = TestClient(app)
    container.stores.durable.write_all(
        [make_record("old", days_old=45), make_record("mid", days_old=10)]
    )

    response = client.post("/admin/cleanup", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["cleaned_count"] == 1
    assert data["remaining_count"] == 1
    assert data["evicted_ids"] == ["old"]
    assert "used_bytes" in data["usage"]


def test_admin_cleanup_forced(container) -> None:
    app = create_app(container)
    client = TestClient(app)
    container.stores.durable.write_all(
        [make_record("old", days_old=45), make_record("mid", days_old=10)]
    )

    response = client.post(
        "/admin/cleanup", params={"days": 30, "forced": "true"}, headers=HEADERS
    )

    assert response.json()["evicted_ids"] == ["old", "mid"]
    assert container.stores.durable.load_all() == []


def test_admin_cleanup_requires_token(container) -> None:
    app = create_app(container)
    client = TestClient(app)

    assert client.post("/admin/cleanup").status_code == 401
