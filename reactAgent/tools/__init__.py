"""Tool registry, configuration loading and built-in tools."""

from .builtin import BUILTIN_TOOL_NAMES, SpawnAgentTool, register_builtin_tools
from .config_loader import ToolConfig, load_tool_config
from .registry import TOOL_NOT_FOUND, ToolMeta, ToolRegistry

__all__ = [
    "BUILTIN_TOOL_NAMES",
    "SpawnAgentTool",
    "TOOL_NOT_FOUND",
    "ToolConfig",
    "ToolMeta",
    "ToolRegistry",
    "load_tool_config",
    "register_builtin_tools",
]
