"""Tests for the plain HTTP routes."""

import httpx

from tests.conftest import FakeRows
from worker_mcp.context import ExecutionContext
from worker_mcp.server import create_app


def _bare_client(ctx: ExecutionContext) -> httpx.AsyncClient:
    transport = httpx.ASGITransport(app=create_app(context=ctx))
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


class TestIndex:
    async def test_root_lists_routes(self, client) -> None:
        body = (await client.get("/")).json()
        assert "/mcp (POST)" in body["routes"]
        assert "/v1/embeddings (POST)" in body["routes"]

    async def test_health(self, client) -> None:
        response = await client.get("/health")
        assert response.json()["status"] == "healthy"

    async def test_unknown_route_is_404(self, client) -> None:
        response = await client.get("/does/not/exist")
        assert response.status_code == 404
        assert response.text == "Not Found"
        assert response.headers["content-type"].startswith("text/plain")


class TestSiteRoutes:
    async def test_hello(self, client) -> None:
        body = (await client.get("/hello", params={"name": "Linh"})).json()
        assert body["message"] == "Hello, Linh!"
        assert body["path"] == "/hello"

    async def test_api_echo(self, client) -> None:
        body = (await client.put("/api", params={"x": "1"})).json()
        assert body == {"ok": True, "query": {"x": "1"}, "method": "PUT", "greeting": "Hello"}

    async def test_kv_round_trip(self, client, kv) -> None:
        response = await client.post("/kv", params={"key": "note"}, content=b"remember me")
        assert response.status_code == 200
        assert response.text == "Saved to KV (TTL 3600s)"
        assert kv.ttls["note"] == 3600

        body = (await client.get("/kv", params={"key": "note"})).json()
        assert body == {"key": "note", "value": "remember me"}

    async def test_kv_default_key(self, client) -> None:
        body = (await client.get("/kv")).json()
        assert body == {"key": "message", "value": None}

    async def test_kv_wrong_method(self, client) -> None:
        response = await client.delete("/kv")
        assert response.status_code == 405

    async def test_d1(self, client) -> None:
        assert (await client.get("/d1")).json() == {"now": "2026-01-01 00:00:00"}

    async def test_d1_failure_is_500(self) -> None:
        async with _bare_client(ExecutionContext(db=FakeRows(error=RuntimeError("gone")))) as c:
            response = await c.get("/d1")
        assert response.status_code == 500
        assert response.json() == {"error": "gone"}

    async def test_r2_round_trip(self, client) -> None:
        assert (await client.get("/r2")).status_code == 404

        response = await client.post("/r2", content=b"blob content")
        assert response.status_code == 200
        assert (await client.get("/r2")).json() == {"content": "blob content"}

    async def test_r2_default_content(self, client) -> None:
        await client.post("/r2")
        assert (await client.get("/r2")).json() == {"content": "Hello R2!"}

    async def test_counter(self, client) -> None:
        assert (await client.get("/counter")).text == "0"
        assert (await client.get("/counter/incr")).text == "1"
        assert (await client.get("/counter/incr")).text == "2"
        assert (await client.get("/counter", params={"name": "other"})).text == "0"
        assert (await client.get("/counter")).text == "2"

    async def test_request_route(self, client) -> None:
        response = await client.post("/request", json={"url": "https://example.com/x"})
        body = response.json()
        assert body["request"]["method"] == "GET"
        assert body["response"]["status"] == 200

    async def test_request_route_rejects_get(self, client) -> None:
        assert (await client.get("/request")).status_code == 405

    async def test_request_route_invalid_json(self, client) -> None:
        response = await client.post("/request", content=b"{bad")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON"

    async def test_request_route_non_object(self, client) -> None:
        response = await client.post("/request", json=[1, 2])
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payload"}

    async def test_missing_capabilities(self) -> None:
        async with _bare_client(ExecutionContext()) as c:
            assert (await c.get("/kv")).status_code == 500
            assert (await c.get("/d1")).status_code == 500
            assert (await c.get("/r2")).status_code == 500
            assert (await c.get("/counter")).status_code == 500
