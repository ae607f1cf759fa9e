"""Runtime assembly: registry, built-ins, spawner and orchestrator."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Iterable, Optional

from langchain_core.tools import BaseTool

from reactAgent.config import Settings, get_settings
from reactAgent.context import ObservationCompressor
from reactAgent.hitl import ConfirmationGate, Operator, OperatorConfirmationGate, StaticConfirmationGate
from reactAgent.tools import ToolRegistry, load_tool_config, register_builtin_tools
from reactAgent.tools.registry import ToolHandler
from reactAgent.utils.logging_utils import configure_logging

from .context import Clock
from .model_resolver import build_chat_model
from .orchestrator import Orchestrator
from .spawner import SubAgentSpawner

LOGGER = logging.getLogger(__name__)


def _create_tool_registry(tools: Iterable[ToolHandler], spawner: SubAgentSpawner, config_path: Optional[Path]) -> ToolRegistry:
    """Built-ins first, so domain tools can never shadow them."""
    registry = ToolRegistry(config=load_tool_config(config_path))
    register_builtin_tools(registry, spawner)

    for tool in tools:
        if isinstance(tool, BaseTool):
            registry.register_tool(tool)
        elif callable(tool):
            registry.register(getattr(tool, "__name__", type(tool).__name__), tool)
        else:
            raise TypeError(f"Unsupported tool handler: {tool!r}")

    LOGGER.info(f"Registered {len(registry)} tool(s): {[m.name for m in registry.list_meta()]}")
    return registry


def _default_gate(settings: Settings, operator: Optional[Operator]) -> ConfirmationGate:
    if settings.governance.auto_approve or operator is None:
        return StaticConfirmationGate(allow=settings.governance.auto_approve)
    return OperatorConfirmationGate(operator)


class _DeferredRunner:
    """Lets the spawner call into an orchestrator created after it."""

    def __init__(self) -> None:
        self.orchestrator: Optional[Orchestrator] = None

    async def __call__(self, task, context):
        if self.orchestrator is None:
            raise RuntimeError("orchestrator not attached")
        return await self.orchestrator.execute(task, context)


def build_application(
    *,
    model: Any = None,
    tools: Iterable[ToolHandler] = (),
    settings: Optional[Settings] = None,
    operator: Optional[Operator] = None,
    gate: Optional[ConfirmationGate] = None,
    compressor: Optional[ObservationCompressor] = None,
    tool_config_path: Optional[Path] = None,
    clock: Clock = time.monotonic,
    init_logging: bool = True,
) -> Orchestrator:
    """Assemble a ready-to-run Orchestrator.

    Args:
        model: chat model; built from ``ModelSettings`` when omitted
        tools: domain tools (LangChain tools or callables)
        settings: application settings, defaults to ``get_settings()``
        operator: answers Ask steps; omit for silent-only operation
        gate: confirmation gate; defaults to asking the operator, or to the
            ``AUTO_APPROVE`` verdict when there is no operator
        compressor: observation compressor (e.g. with a summarizer)
        tool_config_path: alternative tools.yaml
        clock: monotonic clock for deadlines
        init_logging: configure the ``reactAgent`` logger from ``settings.observability``
    """
    settings = settings or get_settings()
    if init_logging:
        configure_logging(settings.observability)
    if model is None:
        model = build_chat_model(settings)

    runner = _DeferredRunner()
    spawner = SubAgentSpawner.from_settings(runner, settings.governance)
    registry = _create_tool_registry(tools, spawner, tool_config_path)

    orchestrator = Orchestrator(
        model=model,
        registry=registry,
        settings=settings,
        gate=gate or _default_gate(settings, operator),
        operator=operator,
        compressor=compressor,
        clock=clock,
    )
    runner.orchestrator = orchestrator
    LOGGER.info(
        f"Application ready: max_steps={settings.governance.max_steps}, "
        f"max_depth={settings.governance.max_depth}, max_parallel={settings.governance.max_parallel}"
    )
    return orchestrator
