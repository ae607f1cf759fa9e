"""Ask node: route a question to the operator, or end silent tasks as Stuck."""

from __future__ import annotations

import logging
from typing import Optional

from langchain_core.runnables import RunnableConfig

from reactAgent.graph.state import StepState, get_execution_context, terminal
from reactAgent.hitl import SILENT_ASK_REASON, AskChannel, Operator
from reactAgent.schema import AskDecision, Step, StepKind, TaskStatus, TranscriptEntry
from reactAgent.utils.error_handler import AbortedError, TaskTimeoutError
from reactAgent.utils.logging_utils import log_step

LOGGER = logging.getLogger(__name__)


def build_ask_node(*, operator: Optional[Operator], answer_timeout: Optional[float] = None):
    async def ask_node(state: StepState, config: RunnableConfig) -> StepState:
        context = get_execution_context(config)
        task = state["task"]
        decision = state.get("pending")
        ordinal = state.get("step_count", 0)
        steps = list(state.get("steps") or [])
        transcript = list(state.get("transcript") or [])

        if not isinstance(decision, AskDecision):
            LOGGER.warning(f"[{task.task_id}] ask node reached without a pending question")
            return {"pending": None}

        if operator is None or not context.interactive:
            LOGGER.info(f"[{task.task_id} d{context.depth}] ask in silent mode, ending as stuck")
            steps.append(Step(ordinal, StepKind.STUCK, SILENT_ASK_REASON))
            return terminal(TaskStatus.STUCK, SILENT_ASK_REASON, steps)

        channel = AskChannel(operator, answer_timeout=answer_timeout, clock=context.clock)
        try:
            answer = await channel.ask(decision.question, context)
        except AbortedError as e:
            return terminal(TaskStatus.ABORTED, str(e))
        except TaskTimeoutError as e:
            return terminal(TaskStatus.TIMEOUT, str(e))

        log_step(LOGGER, task.task_id, context.depth, ordinal, "answer", answer)
        steps.append(Step(ordinal, StepKind.ANSWER, answer))
        transcript.append(TranscriptEntry("observation", f"Answer: {answer}", ordinal))
        return {"steps": steps, "transcript": transcript, "pending": None}

    return ask_node
