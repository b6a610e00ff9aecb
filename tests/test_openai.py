"""Tests for the OpenAI-compatible embeddings API."""

import pytest

from worker_mcp.config import settings


@pytest.fixture(autouse=True)
def _no_auth(monkeypatch) -> None:
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "embedding_model", "")


class TestModels:
    async def test_list_models(self, client) -> None:
        body = (await client.get("/v1/models")).json()
        ids = [m["id"] for m in body["data"]]
        assert body["object"] == "list"
        assert ids[:4] == [
            "text-embedding-3-small",
            "text-embedding-3-large",
            "text-embedding-ada-002",
            "bge-m3",
        ]
        assert "@cf/baai/bge-m3" in ids
        assert len(ids) == len(set(ids))
        owners = {m["id"]: m["owned_by"] for m in body["data"]}
        assert owners["@cf/baai/bge-m3"] == "cloudflare"
        assert owners["bge-m3"] == "openai-compatible"

    async def test_openai_prefix(self, client) -> None:
        assert (await client.get("/openai/v1/models")).status_code == 200

    async def test_models_wrong_method(self, client) -> None:
        response = await client.post("/v1/models")
        assert response.status_code == 405
        assert response.json()["error"]["param"] == "method"

    async def test_unknown_endpoint(self, client) -> None:
        response = await client.get("/v1/chat/completions")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found"


class TestAuth:
    async def test_missing_token(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "openai_api_key", "sk-test")
        response = await client.get("/v1/models")
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Missing bearer token."

    async def test_wrong_token(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "openai_api_key", "sk-test")
        response = await client.get("/v1/models", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "invalid_api_key"

    async def test_valid_token_any_case_scheme(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "openai_api_key", "sk-test")
        response = await client.get("/v1/models", headers={"Authorization": "bearer sk-test"})
        assert response.status_code == 200


class TestEmbeddings:
    async def test_single_input(self, client, ctx) -> None:
        response = await client.post("/v1/embeddings", json={"input": "hello"})
        assert response.status_code == 200
        body = response.json()
        assert body == {
            "object": "list",
            "data": [{"object": "embedding", "index": 0, "embedding": [0.1, 0.2, 0.3]}],
            "model": "bge-m3",
            "usage": {"prompt_tokens": 0, "total_tokens": 0},
        }
        assert ctx.embeddings.calls == [("@cf/baai/bge-m3", "hello")]

    async def test_batch_input_and_alias(self, client, ctx) -> None:
        ctx.embeddings.result = {"data": [[1.0], [2.0]]}
        response = await client.post(
            "/v1/embeddings",
            json={"input": ["a", "b"], "model": "text-embedding-3-small"},
        )
        body = response.json()
        assert [d["index"] for d in body["data"]] == [0, 1]
        assert body["model"] == "text-embedding-3-small"
        assert ctx.embeddings.calls == [("@cf/google/embeddinggemma-300m", ["a", "b"])]

    async def test_cf_model_passthrough(self, client, ctx) -> None:
        await client.post("/v1/embeddings", json={"input": "x", "model": "@cf/custom/model"})
        assert ctx.embeddings.calls[0][0] == "@cf/custom/model"

    async def test_configured_model_overrides_alias(self, client, ctx, monkeypatch) -> None:
        monkeypatch.setattr(settings, "embedding_model", "@cf/override")
        await client.post("/v1/embeddings", json={"input": "x", "model": "bge-m3"})
        assert ctx.embeddings.calls[0][0] == "@cf/override"

    @pytest.mark.parametrize(
        "payload,param",
        [
            ({"input": ""}, None),
            ({"input": []}, "input"),
            ({"input": [1]}, "input"),
            ({"input": 5}, "input"),
            ({"input": "x", "model": ""}, "model"),
            ({"input": "x", "model": "gpt-4"}, "model"),
            ({"input": "x", "encoding_format": "base64"}, "encoding_format"),
        ],
    )
    async def test_validation(self, client, payload, param) -> None:
        response = await client.post("/v1/embeddings", json=payload)
        if param is None:
            # An empty string is still a string input
            assert response.status_code == 200
            return
        assert response.status_code == 400
        assert response.json()["error"]["param"] == param

    async def test_non_object_body(self, client) -> None:
        response = await client.post("/v1/embeddings", json=["a"])
        assert response.status_code == 400

    async def test_invalid_json(self, client) -> None:
        response = await client.post("/v1/embeddings", content=b"{nope")
        assert response.status_code == 400
        assert response.json()["error"]["message"].startswith("Invalid JSON body")

    async def test_wrong_method(self, client) -> None:
        assert (await client.get("/v1/embeddings")).status_code == 405

    async def test_backend_failure(self, client, ctx) -> None:
        ctx.embeddings.error = RuntimeError("quota")
        response = await client.post("/v1/embeddings", json={"input": "x"})
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "workers_ai_error"

    @pytest.mark.parametrize(
        "result",
        [{"data": []}, {"data": "x"}, {"data": [[1, "a"]]}, {"data": [1.0]}, [], {"shape": [1]}],
    )
    async def test_malformed_backend_payload(self, client, ctx, result) -> None:
        ctx.embeddings.result = result
        response = await client.post("/v1/embeddings", json={"input": "x"})
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "invalid_workers_ai_response"

    async def test_backend_missing(self, client, ctx) -> None:
        ctx.embeddings = None
        response = await client.post("/v1/embeddings", json={"input": "x"})
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "workers_ai_binding_missing"
