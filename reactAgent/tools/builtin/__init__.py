"""Built-in tools shipped with the engine."""

from __future__ import annotations

from reactAgent.tools.registry import ToolMeta, ToolRegistry

from .memory_tools import memory_recall, memory_store
from .spawn_agent import SpawnAgentTool

BUILTIN_TOOL_NAMES = ("spawn_agent", "memory_store", "memory_recall")


def register_builtin_tools(registry: ToolRegistry, spawner) -> None:
    """Register spawn_agent and the memory tools as built-ins."""
    registry.register_builtin(
        "spawn_agent",
        SpawnAgentTool(spawner),
        ToolMeta(name="spawn_agent", needs_context=True, tags=["agent"]),
    )
    registry.register_builtin(
        "memory_store",
        memory_store,
        ToolMeta(name="memory_store", needs_context=True, tags=["memory"]),
    )
    registry.register_builtin(
        "memory_recall",
        memory_recall,
        ToolMeta(name="memory_recall", needs_context=True, tags=["memory"]),
    )


__all__ = [
    "BUILTIN_TOOL_NAMES",
    "SpawnAgentTool",
    "memory_recall",
    "memory_store",
    "register_builtin_tools",
]
