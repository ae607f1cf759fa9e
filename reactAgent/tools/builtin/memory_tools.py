"""Working-memory tools: let the model store and recall values explicitly."""

from __future__ import annotations

from typing import Any

from reactAgent.utils.error_handler import ToolExecutionError


def _memory_of(context: Any):
    memory = getattr(context, "memory", None)
    if memory is None:
        raise ToolExecutionError("no working memory attached to this call")
    return memory


def memory_store(key: str, value: Any, context: Any = None) -> str:
    """Store a value in working memory under a key (overwrites)."""
    _memory_of(context).store(key, value)
    return f"stored '{key}'"


def memory_recall(key: str, context: Any = None) -> Any:
    """Read a value previously stored in working memory."""
    return _memory_of(context).recall(key)
