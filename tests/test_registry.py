"""Tests for ToolRegistry and the built-in tool set."""

import pytest

from worker_mcp.mcp.models import ToolDefinition
from worker_mcp.mcp.registry import ToolNotFoundError, ToolRegistry
from worker_mcp.responses import text_response
from worker_mcp.tools import TOOLS, build_registry


async def _noop(params, ctx):
    return text_response("ok")


def _definition(name: str) -> ToolDefinition:
    return ToolDefinition(name=name, description=f"{name} tool")


class TestToolRegistry:
    def test_list_preserves_registration_order(self) -> None:
        registry = ToolRegistry()
        for name in ["b", "a", "c"]:
            registry.register(_definition(name), _noop)
        assert [d.name for d in registry.list()] == ["b", "a", "c"]

    def test_lookup_returns_handler(self) -> None:
        registry = ToolRegistry()
        registry.register(_definition("x"), _noop)
        assert registry.lookup("x") is _noop

    def test_lookup_unknown_raises(self) -> None:
        registry = ToolRegistry()
        with pytest.raises(ToolNotFoundError) as exc_info:
            registry.lookup("missing")
        assert "missing" in str(exc_info.value)

    def test_names_are_case_sensitive(self) -> None:
        registry = ToolRegistry()
        registry.register(_definition("Ping"), _noop)
        assert "Ping" in registry
        with pytest.raises(ToolNotFoundError):
            registry.lookup("ping")

    def test_duplicate_name_rejected(self) -> None:
        registry = ToolRegistry()
        registry.register(_definition("x"), _noop)
        with pytest.raises(ValueError):
            registry.register(_definition("x"), _noop)

    def test_frozen_registry_rejects_registration(self) -> None:
        registry = ToolRegistry().freeze()
        with pytest.raises(RuntimeError):
            registry.register(_definition("late"), _noop)

    def test_default_input_schema(self) -> None:
        schema = _definition("x").inputSchema
        assert schema["type"] == "object"
        assert schema["additionalProperties"] is False


class TestBuiltinRegistry:
    def test_contains_all_tools_in_order(self) -> None:
        registry = build_registry()
        assert registry.frozen
        assert [d.name for d in registry.list()] == [
            "hello",
            "api",
            "ping",
            "get-kv",
            "set-kv",
            "http-request",
            "weather",
        ]
        assert len(registry) == len(TOOLS)

    def test_schemas_forbid_additional_properties(self) -> None:
        for definition in build_registry().list():
            assert definition.inputSchema["additionalProperties"] is False
