"""Tests for API endpoints."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from shortener.database.memory import InMemoryMappingStore
from shortener.service import URLShortenerService
from web_app import create_app


class BrokenStore(InMemoryMappingStore):
    """Store that fails every URL lookup."""

    async def find_active_by_url(self, original_url):
        raise RuntimeError("password=hunter2 rejected by database")


@pytest.mark.asyncio
class TestAPIEndpoints:
    """Test API endpoints."""

    async def test_add_url(self, client, sample_urls):
        """Test POST /api/urls."""
        response = await client.post("/api/urls", params={"url": sample_urls[0]})

        assert response.status_code == 201
        data = response.json()
        assert data["original_url"] == sample_urls[0]
        assert data["status"] == "ACTIVE"
        assert data["short_url"] == f"http://testserver/{data['short_code']}"
        assert data["deactivated_at"] is None

    async def test_add_url_idempotent(self, client, sample_urls):
        first = await client.post("/api/urls", params={"url": sample_urls[0]})
        second = await client.post("/api/urls", params={"url": sample_urls[0]})

        assert second.status_code == 201
        assert second.json()["short_code"] == first.json()["short_code"]

    async def test_add_invalid_url(self, client):
        """Test POST /api/urls with invalid URL."""
        response = await client.post("/api/urls", params={"url": "not-a-url"})

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INVALID_URL"
        assert data["kind"] == "VALIDATION"

    async def test_short_url_uses_forwarded_headers(self, client, sample_urls):
        response = await client.post(
            "/api/urls",
            params={"url": sample_urls[0]},
            headers={
                "X-Forwarded-Proto": "https",
                "X-Forwarded-Host": "sho.rt",
                "X-Forwarded-Prefix": "/u_s",
            },
        )

        data = response.json()
        assert data["short_url"] == f"https://sho.rt/u_s/{data['short_code']}"

    async def test_info(self, client, sample_urls):
        """Test GET /api/urls."""
        created = (await client.post("/api/urls", params={"url": sample_urls[0]})).json()

        response = await client.get("/api/urls", params={"url": sample_urls[0]})

        assert response.status_code == 200
        assert response.json()["short_code"] == created["short_code"]

    async def test_info_not_found(self, client):
        response = await client.get("/api/urls", params={"url": "https://never.example.com"})

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_code_info(self, client, sample_urls):
        created = (await client.post("/api/urls", params={"url": sample_urls[1]})).json()

        response = await client.get(f"/api/urls/{created['short_code']}")

        assert response.status_code == 200
        assert response.json()["original_url"] == sample_urls[1]

    async def test_code_info_not_found(self, client):
        """Test GET /api/urls/{short_code} for nonexistent code."""
        response = await client.get("/api/urls/nonexistent")

        assert response.status_code == 404

    async def test_redirect(self, client, sample_urls):
        created = (await client.post("/api/urls", params={"url": sample_urls[0]})).json()

        response = await client.get(f"/{created['short_code']}", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[0]

    async def test_redirect_unknown_code(self, client):
        response = await client.get("/zzzzzz", follow_redirects=False)

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_deactivate_lifecycle(self, client, sample_urls):
        created = (await client.post("/api/urls", params={"url": sample_urls[0]})).json()

        response = await client.delete("/api/urls", params={"url": sample_urls[0]})
        assert response.status_code == 200
        data = response.json()
        assert data["result"] == "OK"
        assert data["status"] == "DEACTIVATED"
        assert data["deactivated_at"] is not None

        redirect = await client.get(f"/{created['short_code']}", follow_redirects=False)
        assert redirect.status_code == 404

        info = await client.get("/api/urls", params={"url": sample_urls[0]})
        assert info.status_code == 200
        assert info.json()["status"] == "DEACTIVATED"

        again = await client.delete("/api/urls", params={"url": sample_urls[0]})
        assert again.status_code == 404

        recreated = (await client.post("/api/urls", params={"url": sample_urls[0]})).json()
        assert recreated["short_code"] != created["short_code"]

    async def test_rewrite_text(self, client, service):
        response = await client.post(
            "/api/text",
            json={"text": "visit http://a.com and http://a.com again"},
        )

        assert response.status_code == 201
        code = (await service.info("http://a.com")).code
        assert response.json() == {
            "value": f"visit http://testserver/{code} and http://testserver/{code} again"
        }

    async def test_rewrite_text_without_urls(self, client):
        response = await client.post("/api/text", json={"text": "no links here"})

        assert response.status_code == 201
        assert response.json() == {"value": "no links here"}

    async def test_concurrent_add_requests(self, client):
        """Many concurrent POST /api/urls for one URL all see the same code."""
        url = "https://example.com/concurrent-target"

        responses = await asyncio.gather(
            *[client.post("/api/urls", params={"url": url}) for _ in range(30)]
        )

        assert all(r.status_code == 201 for r in responses)
        assert len({r.json()["short_code"] for r in responses}) == 1

    async def test_health_check(self, client):
        """Test GET /api/health."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["cache"] == "healthy"


@pytest.mark.asyncio
async def test_internal_error_hides_detail(config, logger):
    service = URLShortenerService(store=BrokenStore(logger=logger), logger=logger)
    app = create_app(service_instance=service, config=config, logger=logger)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        response = await client.post("/api/urls", params={"url": "https://example.com"})

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL"
    assert data["message"] == "Internal server error"
    assert "hunter2" not in response.text
