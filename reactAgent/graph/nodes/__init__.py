"""Node builders for the step graph."""

from .act import build_act_node
from .agent import STEP_BUDGET_EXHAUSTED, build_agent_node, invoke_model
from .ask import build_ask_node
from .finalize import build_finalize_node
from .planner import build_planner_node

__all__ = [
    "build_act_node",
    "build_agent_node",
    "build_ask_node",
    "build_finalize_node",
    "build_planner_node",
    "invoke_model",
    "STEP_BUDGET_EXHAUSTED",
]
