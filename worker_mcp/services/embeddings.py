"""Workers AI embeddings backend.

Calls the Cloudflare Workers AI REST API and returns the ``result`` object of
the reply, which carries the vectors under ``data``.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

WORKERS_AI_BASE_URL = "https://api.cloudflare.com/client/v4/accounts"


class EmbeddingsBackendError(RuntimeError):
    """Raised when the embeddings backend call fails."""


class WorkersAIEmbeddings:
    def __init__(self, client: httpx.AsyncClient, account_id: str, api_token: str):
        self._client = client
        self._account_id = account_id
        self._api_token = api_token

    async def run(self, model: str, text: str | list[str]) -> Any:
        url = f"{WORKERS_AI_BASE_URL}/{self._account_id}/ai/run/{model}"
        try:
            response = await self._client.post(
                url,
                json={"text": text},
                headers={"Authorization": f"Bearer {self._api_token}"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise EmbeddingsBackendError(
                f"Workers AI returned HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise EmbeddingsBackendError(f"Workers AI request error: {e}") from e
        except ValueError as e:
            raise EmbeddingsBackendError("Workers AI returned invalid JSON") from e

        if isinstance(payload, dict) and "result" in payload:
            return payload["result"]
        return payload
