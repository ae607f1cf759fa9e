"""Logging utilities for reactAgent."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "reactAgent"


def setup_logging(level: int = logging.WARNING, log_dir: Optional[str] = "logs") -> logging.Logger:
    """Setup logging configuration for reactAgent.

    Args:
        level: Console logging level (default: WARNING)
        log_dir: Directory for the detailed log file, None/empty disables it

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Set to DEBUG to capture all child logs
    logger.propagate = False

    logger.handlers = []

    log_file = None
    if log_dir:
        logs_path = Path(log_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        log_file = logs_path / f"reactagent_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    logger.info("=" * 80)
    logger.info("reactAgent session started")
    if log_file:
        logger.info(f"Log file: {log_file}")
    logger.info("=" * 80)

    return logger


def _preview(value: Any, limit: int = 500) -> str:
    text = str(value)
    if len(text) > limit:
        return text[:limit] + "... (truncated)"
    return text


def log_tool_call(logger: logging.Logger, tool_name: str, args: Dict[str, Any]) -> None:
    """Log tool invocation.

    Args:
        logger: Logger instance
        tool_name: Name of the tool being called
        args: Tool arguments
    """
    logger.info(f"Tool call: {tool_name}")
    try:
        rendered = json.dumps(args, ensure_ascii=False, indent=2, default=str)
    except (TypeError, ValueError):
        rendered = repr(args)
    logger.debug(f"  Arguments: {rendered}")


def log_tool_result(logger: logging.Logger, tool_name: str, result: Any, success: bool = True) -> None:
    """Log tool execution result.

    Args:
        logger: Logger instance
        tool_name: Name of the tool
        result: Tool execution result
        success: Whether the tool executed successfully
    """
    status = "✓ Success" if success else "✗ Failed"
    logger.info(f"Tool result: {tool_name} - {status}")
    logger.debug(f"  Result: {_preview(result)}")


def log_routing_decision(logger: logging.Logger, from_node: str, decision: str, reason: str = "") -> None:
    """Log routing decision.

    Args:
        logger: Logger instance
        from_node: Source node making the decision
        decision: Routing destination
        reason: Reason for the routing decision
    """
    logger.debug(f"Routing from {from_node} → {decision}" + (f" ({reason})" if reason else ""))


def log_step(logger: logging.Logger, task_id: str, depth: int, ordinal: int, kind: str, payload: Any) -> None:
    """Log one trace step of a task.

    Args:
        logger: Logger instance
        task_id: Task identifier
        depth: Recursion depth of the task
        ordinal: Step ordinal
        kind: Step kind (thought/action/observation/...)
        payload: Step payload
    """
    logger.info(f"[{task_id} d{depth}] step {ordinal} {kind}: {_preview(payload, 200)}")


def log_spawn(logger: logging.Logger, parent_id: str, depth: int, tasks: list, parallel: bool) -> None:
    """Log a sub-agent spawn request.

    Args:
        logger: Logger instance
        parent_id: Task id of the spawning task
        depth: Depth of the spawning task
        tasks: Sub-task descriptions
        parallel: Whether the sub-tasks run in parallel
    """
    mode = "parallel" if parallel else "sequential"
    logger.info(f"[{parent_id} d{depth}] spawning {len(tasks)} sub-agent(s), {mode}")
    for i, task in enumerate(tasks):
        logger.debug(f"  [{i}] {_preview(task, 200)}")


def log_prompt(logger: logging.Logger, phase: str, prompt: str, max_length: int = 500) -> None:
    """Log a prompt being sent to the model.

    Args:
        logger: Logger instance
        phase: Phase name (plan/step)
        prompt: Prompt text
        max_length: Truncation applied before logging
    """
    logger.debug(f"Prompt for {phase}:\n{_preview(prompt, max_length)}")


def log_error(logger: logging.Logger, error: Exception, context: str = "") -> None:
    """Log error with context.

    Args:
        logger: Logger instance
        error: Exception instance
        context: Additional context about where the error occurred
    """
    logger.error(f"Error occurred: {type(error).__name__}: {str(error)}")
    if context:
        logger.error(f"  Context: {context}")
    logger.debug("Full traceback:", exc_info=error)


def configure_logging(observability) -> logging.Logger:
    """Setup logging from ``ObservabilitySettings``."""
    level = logging.getLevelName(observability.log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    return setup_logging(level=level, log_dir=observability.log_dir)


_global_logger = None


def get_logger() -> logging.Logger:
    """Get or create the global logger instance.

    Returns:
        Global logger instance
    """
    global _global_logger
    if _global_logger is None:
        from reactAgent.config import get_settings

        _global_logger = configure_logging(get_settings().observability)
    return _global_logger
