import pytest


@pytest.mark.anyio("asyncio")
async def test_healthcheck(client):
    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] in {"ok", "degraded"}
    assert payload.get("db_status") in {"ok", "error"}
    assert payload.get("migrations_status") in {"up_to_date", "out_of_date", "unknown"}
    assert isinstance(payload.get("db_ok"), bool)
    assert isinstance(payload.get("migrations_ok"), bool)


@pytest.mark.anyio("asyncio")
async def test_health_degrades_on_db_failure(monkeypatch, client):
    class BrokenEngine:
        def connect(self):  # pragma: no cover - simple stub
            raise RuntimeError("DB down")

    monkeypatch.setattr("app.routers.health.get_engine", lambda: BrokenEngine())

    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["db_status"] == "error"
    assert payload["migrations_status"] == "unknown"
    assert payload["db_ok"] is False
    assert payload["migrations_ok"] is False


@pytest.mark.anyio("asyncio")
async def test_catalog_is_public(client, catalog):
    response = await client.get("/boundaries/categories")
    assert response.status_code == 200
    categories = response.json()
    assert [category["name"] for category in categories] == ["Friendly contact", "Conversation"]
    boundaries = [b["name"] for b in categories[0]["subcategories"][0]["boundaries"]]
    assert boundaries == ["Hugs", "Hand-holding"]


def test_db_module_exports_accessors_only():
    from app import db

    assert "engine" not in db.__all__
    assert "SessionLocal" not in db.__all__
    assert {"get_db", "get_engine", "get_sessionmaker"} <= set(db.__all__)
