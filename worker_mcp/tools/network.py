"""Tools that call out over HTTP.

Handles:
- http-request: arbitrary outbound request
- weather: current weather from Open-Meteo
"""

import logging
from typing import Any

import httpx

from ..context import ExecutionContext
from ..mcp.models import ToolDefinition
from ..responses import HandlerResponse, error_response, json_response, not_configured
from ..services.http_client import perform_http_request

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

# Hanoi, Vietnam
DEFAULT_LATITUDE = 21.0285
DEFAULT_LONGITUDE = 105.8542

HTTP_REQUEST_TOOL = ToolDefinition(
    name="http-request",
    description="Perform an outbound HTTP request with method, headers, query, and body/json.",
    inputSchema={
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "Target URL (http/https)"},
            "method": {"type": "string", "description": "HTTP method (default GET)"},
            "headers": {
                "type": "object",
                "additionalProperties": {"type": "string"},
                "description": "Request headers",
            },
            "query": {
                "type": "object",
                "additionalProperties": {"type": "string"},
                "description": "Query params",
            },
            "body": {
                "type": "string",
                "description": "Raw body (mutually exclusive with json)",
            },
            "json": {
                "type": "object",
                "description": "JSON body (mutually exclusive with body)",
            },
        },
        "required": ["url"],
        "additionalProperties": False,
    },
)

WEATHER_TOOL = ToolDefinition(
    name="weather",
    description="GET weather data (default: Hanoi, Vietnam)",
    inputSchema={
        "type": "object",
        "properties": {},
        "required": [],
        "additionalProperties": False,
    },
)


async def handle_http_request(params: dict[str, Any], ctx: ExecutionContext) -> HandlerResponse:
    return await perform_http_request(ctx.http, params)


async def handle_weather(params: dict[str, Any], ctx: ExecutionContext) -> HandlerResponse:
    """Fetch current weather for the default location.

    Returns:
        ``{summary, data}`` where ``data`` is the raw Open-Meteo payload
    """
    if ctx.http is None:
        return not_configured("HTTP client")

    query = {
        "latitude": str(DEFAULT_LATITUDE),
        "longitude": str(DEFAULT_LONGITUDE),
        "current_weather": "true",
        "timezone": "auto",
    }
    try:
        response = await ctx.http.get(OPEN_METEO_URL, params=query)
    except httpx.RequestError as e:
        logger.warning(f"Weather request failed: {e}")
        return error_response(str(e) or "Unknown error fetching weather", 500)

    if not response.is_success:
        return json_response(
            {
                "error": "Failed to fetch weather data",
                "upstreamStatus": response.status_code,
                "upstreamStatusText": response.reason_phrase,
            },
            status=502,
        )

    try:
        data = response.json()
    except ValueError:
        return error_response("Weather service returned invalid JSON", 502)

    current = data.get("current_weather") if isinstance(data, dict) else None
    if isinstance(current, dict) and "temperature" in current:
        summary = (
            f"Current weather in Hanoi (VN): {current['temperature']}°C, "
            f"wind {current.get('windspeed')} km/h."
        )
    else:
        summary = "No current weather data available."

    return json_response({"summary": summary, "data": data})
