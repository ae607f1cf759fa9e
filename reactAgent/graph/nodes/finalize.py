"""Finalize node: close the trace of a terminal task."""

from __future__ import annotations

import logging

from langchain_core.runnables import RunnableConfig

from reactAgent.graph.state import StepState, get_execution_context
from reactAgent.schema import TaskStatus

LOGGER = logging.getLogger(__name__)


def build_finalize_node():
    async def finalize_node(state: StepState, config: RunnableConfig) -> StepState:
        context = get_execution_context(config)
        task = state["task"]
        status = state.get("status")
        if status is None:
            LOGGER.error(f"[{task.task_id}] reached finalize without a terminal status")
            return {"status": TaskStatus.ERROR, "output": "loop ended without a terminal step"}

        LOGGER.info(
            f"[{task.task_id} d{context.depth}] finished: {status.value} "
            f"after {state.get('step_count', 0)}/{task.max_steps} step(s)"
        )
        return {}

    return finalize_node
