"""Unit tests for ToolRegistry registration rules and dispatch."""

import pytest

from reactAgent.schema import ToolResult
from reactAgent.tools import TOOL_NOT_FOUND, ToolConfig, ToolMeta, ToolRegistry
from reactAgent.utils.error_handler import ToolConflictError
from tests.fakes import calculator


def echo(text: str) -> str:
    """Echo the input back."""
    return f"echo: {text}"


def other_echo(text: str) -> str:
    return "second registration"


class TestRegistration:
    def test_builtin_cannot_be_overridden(self):
        registry = ToolRegistry()
        registry.register_builtin("spawn_agent", echo)
        with pytest.raises(ToolConflictError):
            registry.register("spawn_agent", other_echo)

    def test_builtin_over_builtin_also_conflicts(self):
        registry = ToolRegistry()
        registry.register_builtin("memory_store", echo)
        with pytest.raises(ToolConflictError):
            registry.register_builtin("memory_store", other_echo)

    def test_first_registration_wins(self):
        registry = ToolRegistry()
        registry.register("echo", echo)
        registry.register("echo", other_echo)
        assert registry.get_tool("echo") is echo
        assert len(registry) == 1

    def test_description_from_docstring(self):
        registry = ToolRegistry()
        meta = registry.register("echo", echo)
        assert meta.description == "Echo the input back."

    def test_langchain_tool_registration(self):
        registry = ToolRegistry()
        meta = registry.register_tool(calculator)
        assert meta.name == "calculator"
        assert registry.param_names("calculator") == ["expression"]

    def test_subagent_catalog_filter(self):
        registry = ToolRegistry()
        registry.register("echo", echo)
        registry.register("private", other_echo, ToolMeta(name="private", available_to_subagent=False))

        assert [t["name"] for t in registry.catalog()] == ["echo", "private"]
        assert [t["name"] for t in registry.catalog(for_subagent=True)] == ["echo"]
        assert [t["name"] for t in registry.catalog(exclude=("echo",))] == ["private"]

    def test_config_overrides_applied(self):
        config = ToolConfig(data={"tools": {"echo": {"requires_confirmation": True, "description": "Loud echo"}}})
        registry = ToolRegistry(config=config)
        registry.register("echo", echo)
        meta = registry.get_meta("echo")
        assert meta.requires_confirmation is True
        assert meta.description == "Loud echo"


class TestNormalizeArgs:
    def test_bare_string_goes_to_single_param(self):
        registry = ToolRegistry()
        registry.register("echo", echo)
        assert registry.normalize_args("echo", "  hi ") == {"text": "hi"}

    def test_bare_string_without_single_param(self):
        registry = ToolRegistry()
        registry.register("many", lambda a, b: a + b)
        assert registry.normalize_args("many", "x") == {"input": "x"}

    def test_json_string_is_decoded(self):
        registry = ToolRegistry()
        registry.register("echo", echo)
        assert registry.normalize_args("echo", '{"text": " hi "}') == {"text": "hi"}

    def test_non_object_rejected(self):
        registry = ToolRegistry()
        with pytest.raises(TypeError):
            registry.normalize_args("echo", [1, 2])


class TestInvoke:
    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result = await ToolRegistry().invoke("missing", {})
        assert result == ToolResult(success=False, error=TOOL_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_sync_callable(self):
        registry = ToolRegistry()
        registry.register("echo", echo)
        result = await registry.invoke("echo", {"text": "hi"})
        assert result.success
        assert result.output == "echo: hi"

    @pytest.mark.asyncio
    async def test_async_callable(self):
        async def slow_echo(text: str) -> str:
            return text.upper()

        registry = ToolRegistry()
        registry.register("slow_echo", slow_echo)
        result = await registry.invoke("slow_echo", "hi")
        assert result.output == "HI"

    @pytest.mark.asyncio
    async def test_langchain_tool(self):
        registry = ToolRegistry()
        registry.register_tool(calculator)
        result = await registry.invoke("calculator", "2+2")
        assert result.success
        assert result.output == "4"

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_result(self):
        def explode() -> str:
            raise ValueError("bad input")

        registry = ToolRegistry()
        registry.register("explode", explode)
        result = await registry.invoke("explode", {})
        assert not result.success
        assert result.error == "ValueError: bad input"

    @pytest.mark.asyncio
    async def test_bad_arguments_become_failed_result(self):
        registry = ToolRegistry()
        registry.register("echo", echo)
        result = await registry.invoke("echo", {"wrong": 1})
        assert not result.success
        assert result.error.startswith("TypeError")

    @pytest.mark.asyncio
    async def test_context_injected_when_requested(self):
        seen = {}

        def needs_context(value: int, context=None) -> str:
            seen["context"] = context
            return "ok"

        registry = ToolRegistry()
        registry.register("needs_context", needs_context, ToolMeta(name="needs_context", needs_context=True))
        marker = object()
        await registry.invoke("needs_context", {"value": 1}, context=marker)
        assert seen["context"] is marker
        assert registry.param_names("needs_context") == ["value"]

    @pytest.mark.asyncio
    async def test_tool_result_passthrough(self):
        registry = ToolRegistry()
        registry.register("fails_softly", lambda: ToolResult.fail("nope"))
        result = await registry.invoke("fails_softly")
        assert result.error == "nope"
