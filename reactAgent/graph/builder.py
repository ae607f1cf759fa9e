"""Factory for assembling the step loop as a LangGraph state machine."""

from __future__ import annotations

import logging
from typing import Any, Optional

from langgraph.graph import END, START, StateGraph

from reactAgent.context import ObservationCompressor, TranscriptTruncator
from reactAgent.hitl import ConfirmationGate, Operator
from reactAgent.tools import ToolRegistry

from .nodes import (
    build_act_node,
    build_agent_node,
    build_ask_node,
    build_finalize_node,
    build_planner_node,
)
from .prompts import PromptBuilder
from .routing import agent_route, continue_route
from .state import StepState

LOGGER = logging.getLogger(__name__)


def build_step_graph(
    *,
    model: Any,
    registry: ToolRegistry,
    settings,
    gate: ConfirmationGate,
    compressor: ObservationCompressor,
    truncator: TranscriptTruncator,
    prompt_builder: Optional[PromptBuilder] = None,
    operator: Optional[Operator] = None,
):
    """Compose the step graph.

        START → plan → agent ⇄ act
                         ⇅
                        ask
                agent → finalize → END

    The compiled graph holds no per-task data. Every run gets its own
    ExecutionContext through the run config, so nested and parallel
    sub-agents reuse the same compiled graph.
    """
    prompt_builder = prompt_builder or PromptBuilder()

    graph = StateGraph(StepState)

    graph.add_node("plan", build_planner_node(
        model=model,
        registry=registry,
        prompt_builder=prompt_builder,
        settings=settings,
    ))
    graph.add_node("agent", build_agent_node(
        model=model,
        registry=registry,
        prompt_builder=prompt_builder,
        truncator=truncator,
        settings=settings,
    ))
    graph.add_node("act", build_act_node(registry=registry, gate=gate, compressor=compressor))
    graph.add_node("ask", build_ask_node(operator=operator, answer_timeout=settings.governance.answer_timeout))
    graph.add_node("finalize", build_finalize_node())

    graph.add_edge(START, "plan")
    graph.add_conditional_edges("plan", continue_route, {"agent": "agent", "finalize": "finalize"})
    graph.add_conditional_edges(
        "agent",
        agent_route,
        {
            "act": "act",
            "ask": "ask",
            "agent": "agent",
            "finalize": "finalize",
        },
    )
    graph.add_conditional_edges("act", continue_route, {"agent": "agent", "finalize": "finalize"})
    graph.add_conditional_edges("ask", continue_route, {"agent": "agent", "finalize": "finalize"})
    graph.add_edge("finalize", END)

    LOGGER.debug("Step graph compiled")
    return graph.compile()
