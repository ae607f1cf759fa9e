"""Unified error taxonomy for the step loop, tools and sub-agents.

Propagation policy:
- DecisionParseError and ToolExecutionError are absorbed by the loop and
  surface as Observations.
- ProviderError is retried once, then ends the task as Stuck.
- DepthLimitError is returned to the spawning task as a DepthLimit result.
- TaskTimeoutError and AbortedError end the task with Timeout / Aborted.
"""

from __future__ import annotations

import logging

LOGGER = logging.getLogger(__name__)


class AgentError(Exception):
    """Base exception for reactAgent errors."""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class DecisionParseError(AgentError):
    """Model output did not match the step schema."""


class ToolExecutionError(AgentError):
    """Error during tool execution."""


class ToolConflictError(AgentError):
    """A registration tried to override a built-in tool."""


class ProviderError(AgentError):
    """Error during model invocation."""


class DepthLimitError(AgentError):
    """Spawn rejected because the recursion depth limit is reached."""

    def __init__(self, depth: int, max_depth: int):
        super().__init__(
            f"Depth limit reached: depth {depth} >= max depth {max_depth}",
            user_message="cannot spawn: recursion depth limit reached",
        )
        self.depth = depth
        self.max_depth = max_depth


class TaskTimeoutError(AgentError):
    """Wall-clock cap of a task exceeded."""


class AbortedError(AgentError):
    """External cancellation of a running task."""


class MemoryKeyError(AgentError, KeyError):
    """Key not present in working memory."""

    def __str__(self) -> str:
        return self.args[0] if self.args else "memory key not found"


def handle_model_error(error: Exception) -> str:
    """Convert model invocation errors to short readable messages.

    Args:
        error: Exception raised during model invocation

    Returns:
        Readable error message
    """
    error_str = str(error).lower()

    if "rate_limit" in error_str or "429" in error_str:
        return "model rate limit exceeded"

    if "timeout" in error_str:
        return "model call timed out"

    if "context_length" in error_str or "maximum context" in error_str:
        return "prompt exceeds the model context window"

    if "invalid_api_key" in error_str or "authentication" in error_str:
        return "model API key rejected"

    if "quota" in error_str or "insufficient" in error_str:
        return "model quota exhausted"

    return f"model unavailable: {error}"
