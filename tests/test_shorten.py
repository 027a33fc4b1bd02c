"""Shorten endpoint behavior tests."""

import pytest
from httpx import AsyncClient
from pydantic import ValidationError

from shortlinks.schemas import ShortenRequest
from shortlinks.store import MAX_TTL_HOURS


@pytest.mark.asyncio
async def test_shorten_valid_url(client: AsyncClient) -> None:
    response = await client.post("/api/shorten", json={"url": "https://www.google.com"})
    assert response.status_code == 201
    data = response.json()
    assert data["original_url"] == "https://www.google.com"
    assert len(data["short_code"]) == 6
    assert data["short_url"] == f"http://test/{data['short_code']}"
    assert data["clicks"] == 0
    assert data["expires_at"] is None
    assert data["is_custom_code"] is False


@pytest.mark.asyncio
async def test_shorten_with_expiry(client: AsyncClient) -> None:
    response = await client.post("/api/shorten", json={"url": "https://www.google.com", "expiry_hours": 24})
    assert response.status_code == 201
    assert response.json()["expires_at"] == "2024-01-02T12:00:00Z"


@pytest.mark.asyncio
async def test_shorten_invalid_url(client: AsyncClient) -> None:
    response = await client.post("/api/shorten", json={"url": "not-a-url"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shorten_empty_url(client: AsyncClient) -> None:
    response = await client.post("/api/shorten", json={"url": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shorten_missing_url(client: AsyncClient) -> None:
    response = await client.post("/api/shorten", json={})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shorten_with_custom_code(client: AsyncClient) -> None:
    response = await client.post("/api/shorten", json={"url": "https://www.github.com", "custom_code": "my-code"})
    assert response.status_code == 201
    data = response.json()
    assert data["short_code"] == "my-code"
    assert data["is_custom_code"] is True


@pytest.mark.asyncio
async def test_shorten_duplicate_custom_code(client: AsyncClient) -> None:
    await client.post("/api/shorten", json={"url": "https://www.github.com", "custom_code": "taken1"})
    response = await client.post("/api/shorten", json={"url": "https://www.example.com", "custom_code": "taken1"})
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


@pytest.mark.asyncio
async def test_shorten_custom_code_invalid_characters(client: AsyncClient) -> None:
    response = await client.post(
        "/api/shorten",
        json={"url": "https://www.github.com", "custom_code": "my code!"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shorten_custom_code_too_long(client: AsyncClient) -> None:
    response = await client.post(
        "/api/shorten",
        json={"url": "https://www.github.com", "custom_code": "a" * 33},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["api", "health", "metrics", "Docs"])
async def test_shorten_reserved_custom_code(client: AsyncClient, code: str) -> None:
    response = await client.post("/api/shorten", json={"url": "https://www.github.com", "custom_code": code})
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("hours", [0, -5])
async def test_shorten_non_positive_expiry(client: AsyncClient, hours: float) -> None:
    response = await client.post("/api/shorten", json={"url": "https://www.github.com", "expiry_hours": hours})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shorten_expiry_beyond_limit(client: AsyncClient) -> None:
    response = await client.post("/api/shorten", json={"url": "https://www.github.com", "expiry_hours": 1e8})
    assert response.status_code == 422

    stats = await client.get("/api/stats")
    assert stats.json()["total_links"] == 0


@pytest.mark.parametrize("hours", [float("nan"), float("inf"), MAX_TTL_HOURS + 1])
def test_shorten_request_rejects_unrepresentable_expiry(hours: float) -> None:
    with pytest.raises(ValidationError):
        ShortenRequest(url="https://www.github.com", expiry_hours=hours)


def test_shorten_request_accepts_max_expiry() -> None:
    request = ShortenRequest(url="https://www.github.com", expiry_hours=MAX_TTL_HOURS)
    assert request.expiry_hours == MAX_TTL_HOURS


@pytest.mark.asyncio
async def test_shorten_multiple_urls(client: AsyncClient) -> None:
    urls = [
        "https://www.google.com",
        "https://www.github.com",
        "https://www.python.org",
    ]
    codes = set()
    for url in urls:
        response = await client.post("/api/shorten", json={"url": url})
        assert response.status_code == 201
        codes.add(response.json()["short_code"])
    # All codes should be unique
    assert len(codes) == 3
