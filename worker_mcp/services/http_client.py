"""Outbound HTTP requests on behalf of callers.

Used by the ``http-request`` tool and the ``/request`` route. Input is an
untrusted JSON object; every field is checked before anything goes out.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..responses import HandlerResponse, error_response, json_response, not_configured

logger = logging.getLogger(__name__)

BODYLESS_METHODS = ("GET", "HEAD")


class InvalidHttpRequest(ValueError):
    """Raised when the outbound request description is malformed."""


@dataclass
class HttpRequestInput:
    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    json: dict[str, Any] | None = None


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {k: v for k, v in value.items() if isinstance(v, str)}


def parse_input(data: dict[str, Any]) -> HttpRequestInput:
    """Validate a raw request description.

    Raises:
        InvalidHttpRequest: if the url is missing or both body and json are given
    """
    url = data.get("url")
    url = url.strip() if isinstance(url, str) else ""
    if not url:
        raise InvalidHttpRequest("Invalid url")

    method = data.get("method")
    method = method.strip().upper() if isinstance(method, str) else ""

    body = data.get("body")
    body = body if isinstance(body, str) and body else None
    json_body = data.get("json")
    json_body = json_body if isinstance(json_body, dict) else None

    if body is not None and json_body is not None:
        raise InvalidHttpRequest("Provide either body or json")

    return HttpRequestInput(
        url=url,
        method=method or "GET",
        headers=_string_map(data.get("headers")),
        query=_string_map(data.get("query")),
        body=body,
        json=json_body,
    )


def build_url(raw_url: str, query: dict[str, str]) -> httpx.URL:
    try:
        url = httpx.URL(raw_url)
    except httpx.InvalidURL as e:
        raise InvalidHttpRequest("Invalid url") from e

    if not url.scheme:
        raise InvalidHttpRequest("Invalid url")
    if url.scheme not in ("http", "https"):
        raise InvalidHttpRequest("Only http/https URLs are supported")
    if not url.host:
        raise InvalidHttpRequest("Invalid url")

    for key, value in query.items():
        url = url.copy_set_param(key, value)
    return url


async def perform_http_request(
    client: httpx.AsyncClient | None, data: dict[str, Any]
) -> HandlerResponse:
    """Execute the described request and report the upstream response.

    Returns:
        200 with ``{request: {url, method}, response: {status, ok, headers, body}}``,
        400 for an invalid description, 502 when the upstream is unreachable.
    """
    if client is None:
        return not_configured("HTTP client")

    try:
        request = parse_input(data)
        url = build_url(request.url, request.query)
    except InvalidHttpRequest as e:
        return error_response(str(e), 400)

    headers = dict(request.headers)
    content: str | None = None
    if request.json is not None:
        content = json.dumps(request.json)
        if not any(k.lower() == "content-type" for k in headers):
            headers["content-type"] = "application/json; charset=utf-8"
    elif request.body is not None:
        content = request.body

    if request.method in BODYLESS_METHODS:
        content = None

    try:
        response = await client.request(request.method, url, headers=headers, content=content)
    except httpx.RequestError as e:
        logger.warning(f"Outbound request to {url} failed: {e}")
        return error_response(f"Upstream request failed: {e}", 502)

    return json_response(
        {
            "request": {"url": str(url), "method": request.method},
            "response": {
                "status": response.status_code,
                "ok": response.is_success,
                "headers": dict(response.headers),
                "body": response.text,
            },
        }
    )
