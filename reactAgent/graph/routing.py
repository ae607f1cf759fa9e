"""Conditional routing for the step graph."""

from __future__ import annotations

import logging
from typing import Literal

from reactAgent.schema import ActionDecision, AskDecision
from reactAgent.utils.logging_utils import log_routing_decision

from .state import StepState

LOGGER = logging.getLogger(__name__)


def agent_route(state: StepState) -> Literal["act", "ask", "agent", "finalize"]:
    """Route after the agent node.

    Returns:
        "finalize": the task reached a terminal status
        "act": the reply was an Action
        "ask": the reply was an Ask
        "agent": Thought or parse error, take the next step
    """
    if state.get("status") is not None:
        decision, reason = "finalize", f"terminal status {state['status'].value}"
    else:
        pending = state.get("pending")
        if isinstance(pending, ActionDecision):
            decision, reason = "act", f"action on {pending.tool}"
        elif isinstance(pending, AskDecision):
            decision, reason = "ask", "question for the operator"
        else:
            decision, reason = "agent", "continue"

    log_routing_decision(LOGGER, "agent", decision, reason)
    return decision


def continue_route(state: StepState) -> Literal["agent", "finalize"]:
    """Route after plan, act and ask: back to the loop unless terminal."""
    decision = "finalize" if state.get("status") is not None else "agent"
    log_routing_decision(LOGGER, "continue", decision)
    return decision
