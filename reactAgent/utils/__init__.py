"""Utilities for reactAgent."""

from .logging_utils import (
    configure_logging,
    get_logger,
    log_error,
    log_prompt,
    log_routing_decision,
    log_spawn,
    log_step,
    log_tool_call,
    log_tool_result,
    setup_logging,
)
from .message_utils import stringify_content
from .json_extract import extract_first_json_object
from .cancel import CancellationToken
from .error_handler import (
    AbortedError,
    AgentError,
    DecisionParseError,
    DepthLimitError,
    MemoryKeyError,
    ProviderError,
    TaskTimeoutError,
    ToolConflictError,
    ToolExecutionError,
    handle_model_error,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "setup_logging",
    "log_tool_call",
    "log_tool_result",
    "log_routing_decision",
    "log_step",
    "log_spawn",
    "log_prompt",
    "log_error",
    "stringify_content",
    "extract_first_json_object",
    "CancellationToken",
    "AgentError",
    "DecisionParseError",
    "ToolExecutionError",
    "ToolConflictError",
    "ProviderError",
    "DepthLimitError",
    "TaskTimeoutError",
    "AbortedError",
    "MemoryKeyError",
    "handle_model_error",
]
