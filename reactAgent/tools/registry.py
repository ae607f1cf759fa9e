"""Tool metadata management, registration and dispatch."""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

from langchain_core.tools import BaseTool

from reactAgent.schema import ToolResult
from reactAgent.utils.error_handler import ToolConflictError
from reactAgent.utils.logging_utils import log_tool_call, log_tool_result

if TYPE_CHECKING:
    from .config_loader import ToolConfig

LOGGER = logging.getLogger(__name__)

TOOL_NOT_FOUND = "ToolNotFound"

ToolHandler = Union[BaseTool, Callable[..., Any]]


@dataclass(frozen=True, slots=True)
class ToolMeta:
    """Describes governance attributes for a tool."""

    name: str
    description: str = ""
    builtin: bool = False
    requires_confirmation: bool = False  # Ask the confirmation gate before each call
    available_to_subagent: bool = True  # Whether spawned sub-agents see this tool
    needs_context: bool = False  # Callable receives the execution context as `context=`
    tags: List[str] = field(default_factory=list)


def _describe(handler: ToolHandler) -> str:
    if isinstance(handler, BaseTool):
        return (handler.description or "").strip().split("\n")[0]
    doc = inspect.getdoc(handler) or ""
    return doc.strip().split("\n")[0]


def _param_names(handler: ToolHandler) -> List[str]:
    if isinstance(handler, BaseTool):
        return list(handler.args.keys())
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return []
    names = []
    for param in signature.parameters.values():
        if param.name in {"self", "context"}:
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        names.append(param.name)
    return names


class ToolRegistry:
    """Name → handler map with conflict rules and failure-isolated dispatch.

    Rules:
    - nothing may override a built-in name (ToolConflictError);
    - otherwise the first registration of a name wins, later ones are ignored.
    """

    def __init__(self, config: Optional["ToolConfig"] = None) -> None:
        self._tools: Dict[str, ToolHandler] = {}
        self._meta: Dict[str, ToolMeta] = {}
        self._params: Dict[str, List[str]] = {}
        self._config = config

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, name: str, handler: ToolHandler, meta: Optional[ToolMeta] = None) -> ToolMeta:
        """Register ``handler`` under ``name``.

        Raises:
            ToolConflictError: ``name`` is already taken by a built-in tool
        """
        existing = self._meta.get(name)
        if existing is not None:
            if existing.builtin:
                raise ToolConflictError(f"Tool '{name}' is built-in and cannot be overridden")
            LOGGER.warning(f"Tool '{name}' already registered, keeping the first registration")
            return existing

        if meta is None:
            meta = ToolMeta(name=name)
        if meta.name != name:
            meta = replace(meta, name=name)
        if not meta.description:
            meta = replace(meta, description=_describe(handler))
        if self._config is not None:
            meta = self._config.apply(meta)

        self._tools[name] = handler
        self._meta[name] = meta
        self._params[name] = _param_names(handler)
        LOGGER.debug(f"Registered tool: {name} (builtin={meta.builtin}, confirm={meta.requires_confirmation})")
        return meta

    def register_builtin(self, name: str, handler: ToolHandler, meta: Optional[ToolMeta] = None) -> ToolMeta:
        meta = replace(meta, builtin=True) if meta else ToolMeta(name=name, builtin=True)
        return self.register(name, handler, meta)

    def register_tool(self, tool: BaseTool, **meta_fields: Any) -> ToolMeta:
        """Register a LangChain tool under its own name."""
        return self.register(tool.name, tool, ToolMeta(name=tool.name, **meta_fields))

    def get_tool(self, name: str) -> ToolHandler:
        if name not in self._tools:
            raise KeyError(f"Unknown tool: {name}")
        return self._tools[name]

    def get_meta(self, name: str) -> ToolMeta:
        if name not in self._meta:
            raise KeyError(f"Missing metadata for tool: {name}")
        return self._meta[name]

    def get_meta_optional(self, name: str) -> ToolMeta | None:
        return self._meta.get(name)

    def list_meta(self, *, for_subagent: bool = False) -> List[ToolMeta]:
        metas = list(self._meta.values())
        if for_subagent:
            metas = [m for m in metas if m.available_to_subagent]
        return metas

    def param_names(self, name: str) -> List[str]:
        return list(self._params.get(name, []))

    def catalog(self, *, for_subagent: bool = False, exclude: tuple = ()) -> List[Dict[str, Any]]:
        """Tool catalog rendered into the step prompt."""
        return [
            {"name": meta.name, "description": meta.description, "args": self.param_names(meta.name)}
            for meta in self.list_meta(for_subagent=for_subagent)
            if meta.name not in exclude
        ]

    def normalize_args(self, name: str, raw: Any) -> Dict[str, Any]:
        """Normalize model-provided arguments into a keyword map.

        - a bare string (or a JSON object encoded as a string) is accepted;
          plain strings go to the tool's single parameter, or ``input``
        - string values are stripped
        """
        if raw is None:
            return {}
        if isinstance(raw, str):
            text = raw.strip()
            if text.startswith("{"):
                try:
                    decoded = json.loads(text)
                except json.JSONDecodeError:
                    decoded = None
                if isinstance(decoded, dict):
                    return self.normalize_args(name, decoded)
            params = self._params.get(name, [])
            key = params[0] if len(params) == 1 else "input"
            return {key: text}
        if not isinstance(raw, dict):
            raise TypeError(f"tool arguments must be an object, got {type(raw).__name__}")
        return {str(k): (v.strip() if isinstance(v, str) else v) for k, v in raw.items()}

    async def invoke(self, name: str, args: Any = None, *, context: Any = None) -> ToolResult:
        """Dispatch a tool call. Never raises for tool-level failures."""
        handler = self._tools.get(name)
        if handler is None:
            LOGGER.warning(f"Tool not found: {name}")
            return ToolResult.fail(TOOL_NOT_FOUND)

        meta = self._meta[name]
        try:
            kwargs = self.normalize_args(name, args)
            log_tool_call(LOGGER, name, kwargs)
            if isinstance(handler, BaseTool):
                output = await handler.ainvoke(kwargs)
            else:
                if meta.needs_context:
                    kwargs["context"] = context
                output = handler(**kwargs)
                if inspect.isawaitable(output):
                    output = await output
        except Exception as e:
            LOGGER.warning(f"Tool {name} failed: {type(e).__name__}: {e}")
            log_tool_result(LOGGER, name, e, success=False)
            return ToolResult.fail(f"{type(e).__name__}: {e}")

        result = output if isinstance(output, ToolResult) else ToolResult.ok(output)
        log_tool_result(LOGGER, name, result.output if result.success else result.error, success=result.success)
        return result
