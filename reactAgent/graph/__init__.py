"""Step loop graph."""

from .builder import build_step_graph
from .prompts import PromptBuilder
from .state import CONTEXT_KEY, StepState, get_execution_context

__all__ = [
    "build_step_graph",
    "PromptBuilder",
    "StepState",
    "CONTEXT_KEY",
    "get_execution_context",
]
