"""Tool call records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ToolResult:
    """Result envelope returned by every tool invocation."""

    success: bool
    output: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, output: Any) -> "ToolResult":
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str, output: Any = None) -> "ToolResult":
        return cls(success=False, output=output, error=error)


@dataclass
class ToolInvocation:
    """A dispatched tool call and its result."""

    tool: str
    args: Dict[str, Any] = field(default_factory=dict)
    result: Optional[ToolResult] = None
