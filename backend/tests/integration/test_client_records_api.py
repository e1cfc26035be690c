"""Integration tests for the client record REST endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.application.interfaces import InsightGenerator, KeyValueStorage
from app.config import Settings
from app.domain.entities import ClientRecord
from app.domain.exceptions import ChatProviderError
from app.infrastructure.dependencies import get_image_encoder
from app.infrastructure.imaging import DataUrlImageEncoder
from app.main import create_app, wire_workspace

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeKeyValueStorage(KeyValueStorage):
    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FakeInsightGenerator(InsightGenerator):
    def __init__(self, error: Exception | None = None):
        self._error = error

    async def generate_insight(self, record: ClientRecord) -> str:
        if self._error:
            raise self._error
        return f"Propor revestimento completo para {record.name}."


def _client(
    generator: InsightGenerator | None = None,
    encoder: DataUrlImageEncoder | None = None,
) -> AsyncClient:
    app = create_app()
    if encoder is not None:
        app.dependency_overrides[get_image_encoder] = lambda: encoder
    wire_workspace(app, FakeKeyValueStorage(), Settings(), generator or FakeInsightGenerator())
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def _create(client: AsyncClient, name: str = "Ana", phone: str = "119") -> dict:
    response = await client.post("/api/v1/client-records", json={"name": name, "phone": phone})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_get_and_list():
    async with _client() as client:
        created = await _create(client)
        await _create(client, "Bruno", "219")

        single = await client.get(f"/api/v1/client-records/{created['id']}")
        listed = await client.get("/api/v1/client-records", params={"q": "ana"})

    assert single.status_code == 200
    assert single.json()["name"] == "Ana"
    assert [r["name"] for r in listed.json()] == ["Ana"]


@pytest.mark.asyncio
async def test_create_missing_required_field_returns_422():
    async with _client() as client:
        response = await client.post("/api/v1/client-records", json={"name": "Ana"})

    assert response.status_code == 422
    assert "phone" in response.json()["detail"]


@pytest.mark.asyncio
async def test_update_and_unknown_id():
    async with _client() as client:
        created = await _create(client)
        updated = await client.put(
            f"/api/v1/client-records/{created['id']}", json={"budget_label": "R$ 800"}
        )
        missing = await client.put("/api/v1/client-records/nope", json={"name": "X"})

    assert updated.status_code == 200
    assert updated.json()["budget_label"] == "R$ 800"
    assert updated.json()["created_at"] == created["created_at"]
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_needs_confirmation():
    async with _client() as client:
        created = await _create(client)
        declined = await client.delete(f"/api/v1/client-records/{created['id']}")
        confirmed = await client.delete(
            f"/api/v1/client-records/{created['id']}", params={"confirmed": "true"}
        )
        after = await client.get(f"/api/v1/client-records/{created['id']}")

    assert declined.json() == {"record_id": created["id"], "deleted": False}
    assert confirmed.json()["deleted"] is True
    assert after.status_code == 404


@pytest.mark.asyncio
async def test_upload_image():
    async with _client() as client:
        created = await _create(client)
        ok = await client.post(
            f"/api/v1/client-records/{created['id']}/image",
            files={"file": ("banco.png", PNG, "image/png")},
        )
        bad = await client.post(
            f"/api/v1/client-records/{created['id']}/image",
            files={"file": ("notas.txt", b"hello", "text/plain")},
        )

    assert ok.status_code == 200
    assert ok.json()["image_data"].startswith("data:image/png;base64,")
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_generate_insight():
    async with _client() as client:
        created = await _create(client)
        response = await client.post(f"/api/v1/client-records/{created['id']}/insight")
        status = await client.get(f"/api/v1/client-records/{created['id']}/insight")

    assert response.status_code == 200
    assert response.json()["status"] == "enriched"
    assert status.json()["ai_insight"] == "Propor revestimento completo para Ana."


@pytest.mark.asyncio
async def test_insight_provider_failure_returns_502():
    generator = FakeInsightGenerator(ChatProviderError("openrouter", 503, "unavailable"))
    async with _client(generator) as client:
        created = await _create(client)
        response = await client.post(f"/api/v1/client-records/{created['id']}/insight")
        status = await client.get(f"/api/v1/client-records/{created['id']}/insight")

    assert response.status_code == 502
    assert status.json() == {"record_id": created["id"], "status": "failed", "ai_insight": None}


@pytest.mark.asyncio
async def test_upload_over_size_limit_is_rejected():
    async with _client(encoder=DataUrlImageEncoder(max_bytes=64)) as client:
        created = await _create(client)
        response = await client.post(
            f"/api/v1/client-records/{created['id']}/image",
            files={"file": ("grande.png", PNG + b"\x00" * 4096, "image/png")},
        )
        record = await client.get(f"/api/v1/client-records/{created['id']}")

    assert response.status_code == 422
    assert response.json()["detail"].startswith("Image is 65 bytes")
    assert record.json()["image_data"] == ""
