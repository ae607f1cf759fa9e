"""State carried through one run of the step graph."""

from __future__ import annotations

from typing import List, Optional, TypedDict, Union

from reactAgent.schema import ActionDecision, AskDecision, Step, Task, TaskStatus, TranscriptEntry


class StepState(TypedDict, total=False):
    """Per-task loop state.

    Runtime objects (memory, cancellation, deadline) are not part of the
    state; nodes read them from the ExecutionContext passed in the run config.
    """

    # ========== Task ==========
    task: Task
    plan: List[str]

    # ========== Trace ==========
    steps: List[Step]                   # Full step trace, never trimmed
    transcript: List[TranscriptEntry]   # What the model sees, trimmed to the token budget
    dropped_observations: int           # Observations removed by trimming so far

    # ========== Execution control ==========
    step_count: int                     # Model replies consumed so far
    pending: Optional[Union[ActionDecision, AskDecision]]  # Waiting for the act / ask node

    # ========== Outcome ==========
    status: Optional[TaskStatus]        # Set once the task is terminal
    output: str


CONTEXT_KEY = "execution_context"


def get_execution_context(config):
    """ExecutionContext of the running task, taken from the run config."""
    configurable = (config or {}).get("configurable", {})
    context = configurable.get(CONTEXT_KEY)
    if context is None:
        raise RuntimeError("step graph invoked without an execution context")
    return context


def terminal(status: TaskStatus, output: str, steps: Optional[List[Step]] = None) -> StepState:
    """State update that ends the task."""
    update: StepState = {"status": status, "output": output, "pending": None}
    if steps is not None:
        update["steps"] = steps
    return update
