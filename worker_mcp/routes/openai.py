"""OpenAI-compatible embeddings API.

Translates ``/v1/embeddings`` requests to the Workers AI embeddings backend
and lists the supported models under ``/v1/models``. Every route is also
served under the ``/openai`` prefix. Errors use the OpenAI error shape.
"""

import json
import logging
import math
import time
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import settings
from ..context import ExecutionContext
from ..deps import get_bearer_token, get_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["OpenAI"])

DEFAULT_OPENAI_MODEL = "bge-m3"
DEFAULT_WORKERS_EMBEDDING_MODEL = "@cf/baai/bge-m3"

OPENAI_TO_WORKERS_MODEL: dict[str, str] = {
    "text-embedding-3-small": "@cf/google/embeddinggemma-300m",
    "text-embedding-3-large": "@cf/google/embeddinggemma-300m",
    "text-embedding-ada-002": "@cf/google/embeddinggemma-300m",
    "bge-m3": "@cf/baai/bge-m3",
}


class OpenAIError(Exception):
    """An error rendered in the OpenAI error format."""

    def __init__(
        self,
        status: int,
        message: str,
        type: str = "invalid_request_error",
        param: str | None = None,
        code: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.message = message
        self.type = type
        self.param = param
        self.code = code

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            {
                "error": {
                    "message": self.message,
                    "type": self.type,
                    "param": self.param,
                    "code": self.code,
                }
            },
            status_code=self.status,
        )


def check_auth(request: Request) -> None:
    """Enforce the static bearer token when one is configured."""
    expected = settings.openai_api_key.strip()
    if not expected:
        return

    token = get_bearer_token(request)
    if token is None:
        raise OpenAIError(
            401, "Missing bearer token.", "authentication_error", "authorization", "invalid_api_key"
        )
    if token != expected:
        raise OpenAIError(
            401, "Invalid API key.", "authentication_error", "authorization", "invalid_api_key"
        )


def configured_model() -> str:
    return settings.embedding_model.strip() or DEFAULT_WORKERS_EMBEDDING_MODEL


def resolve_model(requested: Any) -> tuple[str, str]:
    """Map a requested model to (response model, backend model)."""
    if requested is None:
        return DEFAULT_OPENAI_MODEL, configured_model()

    if not isinstance(requested, str) or not requested.strip():
        raise OpenAIError(400, "Field `model` must be a non-empty string.", param="model")

    model = requested.strip()
    if model.startswith("@cf/"):
        return model, model

    alias = OPENAI_TO_WORKERS_MODEL.get(model)
    if alias is None:
        supported = ", ".join(OPENAI_TO_WORKERS_MODEL)
        raise OpenAIError(
            400,
            f"Unsupported model '{model}'. Supported aliases: {supported}, or any @cf/* model id.",
            param="model",
            code="model_not_found",
        )
    return model, settings.embedding_model.strip() or alias


def normalize_input(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not value:
        raise OpenAIError(
            400,
            "Field `input` must be a string or a non-empty array of strings.",
            param="input",
        )
    if not all(isinstance(item, str) for item in value):
        raise OpenAIError(400, "All `input` array items must be strings.", param="input")
    return value


def extract_embeddings(result: Any) -> list[list[float]] | None:
    """Pull the vectors out of a backend result, or None if malformed."""
    if not isinstance(result, dict):
        return None
    data = result.get("data")
    if not isinstance(data, list):
        return None

    vectors: list[list[float]] = []
    for row in data:
        if not isinstance(row, list):
            return None
        for value in row:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            if not math.isfinite(value):
                return None
        vectors.append(row)
    return vectors


def list_models() -> dict:
    models = list(
        dict.fromkeys(
            [*OPENAI_TO_WORKERS_MODEL, configured_model(), DEFAULT_WORKERS_EMBEDDING_MODEL]
        )
    )
    created = int(time.time())
    return {
        "object": "list",
        "data": [
            {
                "id": model_id,
                "object": "model",
                "created": created,
                "owned_by": "cloudflare" if model_id.startswith("@cf/") else "openai-compatible",
            }
            for model_id in models
        ],
    }


async def create_embeddings(request: Request, ctx: ExecutionContext) -> dict:
    if ctx.embeddings is None:
        raise OpenAIError(
            500,
            "Embeddings backend is missing. Configure CLOUDFLARE_ACCOUNT_ID and CLOUDFLARE_API_TOKEN.",
            "server_error",
            "AI",
            "workers_ai_binding_missing",
        )

    try:
        body = json.loads(await request.body())
    except ValueError as e:
        raise OpenAIError(400, f"Invalid JSON body: {e}") from e

    if not isinstance(body, dict):
        raise OpenAIError(400, "Request body must be a JSON object.")

    encoding_format = body.get("encoding_format")
    if encoding_format is not None and encoding_format != "float":
        raise OpenAIError(
            400, "Only encoding_format='float' is supported.", param="encoding_format"
        )

    inputs = normalize_input(body.get("input"))
    response_model, backend_model = resolve_model(body.get("model"))

    try:
        result = await ctx.embeddings.run(backend_model, inputs[0] if len(inputs) == 1 else inputs)
    except Exception as e:
        logger.warning(f"Embeddings backend call failed for {backend_model}: {e}")
        raise OpenAIError(
            502, f"Workers AI request failed: {e}", "server_error", "model", "workers_ai_error"
        ) from e

    embeddings = extract_embeddings(result)
    if not embeddings:
        raise OpenAIError(
            502,
            "Workers AI returned an unexpected embedding payload.",
            "server_error",
            "response",
            "invalid_workers_ai_response",
        )

    return {
        "object": "list",
        "data": [
            {"object": "embedding", "index": index, "embedding": embedding}
            for index, embedding in enumerate(embeddings)
        ],
        "model": response_model,
        "usage": {"prompt_tokens": 0, "total_tokens": 0},
    }


async def handle_openai(request: Request, path: str, ctx: ExecutionContext) -> JSONResponse:
    try:
        check_auth(request)

        if path == "models":
            if request.method != "GET":
                raise OpenAIError(405, "Method not allowed. Use GET for /v1/models.", param="method")
            return JSONResponse(list_models())

        if path != "embeddings":
            raise OpenAIError(
                404, f"Unsupported OpenAI endpoint '/v1/{path}'.", param="path", code="not_found"
            )

        if request.method != "POST":
            raise OpenAIError(
                405, "Method not allowed. Use POST for /v1/embeddings.", param="method"
            )
        return JSONResponse(await create_embeddings(request, ctx))
    except OpenAIError as e:
        return e.to_response()


@router.api_route("/v1/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
@router.api_route("/openai/v1/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def openai_endpoint(
    path: str,
    request: Request,
    ctx: Annotated[ExecutionContext, Depends(get_context)],
) -> JSONResponse:
    return await handle_openai(request, path.strip("/"), ctx)
