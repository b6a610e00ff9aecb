"""Convert handler responses into MCP tool content.

Every body is embedded as a single text item, whatever its content type.
JSON bodies are not parsed or re-encoded here; callers parse the text.
"""

from ..responses import HandlerResponse
from .models import TextContent, ToolContent


def to_tool_content(response: HandlerResponse) -> ToolContent:
    return ToolContent(
        content=[TextContent(text=response.text())],
        isError=not response.ok,
    )
