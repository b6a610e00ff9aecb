"""HTTP routes outside the MCP endpoint."""

from .openai import router as openai_router
from .site import router as site_router

__all__ = [
    "openai_router",
    "site_router",
]
