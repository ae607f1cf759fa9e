"""Act node: dispatch the pending Action and record its Observation."""

from __future__ import annotations

import json
import logging
from typing import Any

from langchain_core.runnables import RunnableConfig

from reactAgent.context import ObservationCompressor
from reactAgent.graph.state import StepState, get_execution_context, terminal
from reactAgent.hitl import DENIED_OBSERVATION, ConfirmationGate, check_confirmation
from reactAgent.schema import ActionDecision, Step, StepKind, TaskStatus, ToolResult, TranscriptEntry
from reactAgent.tools import ToolRegistry
from reactAgent.utils.error_handler import AbortedError, TaskTimeoutError
from reactAgent.utils.logging_utils import log_step

LOGGER = logging.getLogger(__name__)

MIN_OBSERVATION_TOKENS = 16


def render_output(output: Any) -> str:
    if output is None:
        return "(no output)"
    if isinstance(output, str):
        return output
    try:
        return json.dumps(output, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(output)


def render_result(result: ToolResult) -> str:
    if result.success:
        return render_output(result.output)
    return f"error: {result.error}"


def build_act_node(
    *,
    registry: ToolRegistry,
    gate: ConfirmationGate,
    compressor: ObservationCompressor,
):
    async def act_node(state: StepState, config: RunnableConfig) -> StepState:
        context = get_execution_context(config)
        task = state["task"]
        decision = state.get("pending")
        ordinal = state.get("step_count", 0)
        steps = list(state.get("steps") or [])
        transcript = list(state.get("transcript") or [])

        if not isinstance(decision, ActionDecision):
            LOGGER.warning(f"[{task.task_id}] act node reached without a pending action")
            return {"pending": None}

        # Abort is re-checked right before dispatch
        try:
            context.check()
        except AbortedError as e:
            return terminal(TaskStatus.ABORTED, str(e))
        except TaskTimeoutError as e:
            return terminal(TaskStatus.TIMEOUT, str(e))

        meta = registry.get_meta_optional(decision.tool)
        approved = True
        if meta is not None and meta.requires_confirmation:
            try:
                gate_args = registry.normalize_args(decision.tool, decision.args)
            except TypeError:
                gate_args = {"input": decision.args}
            approved = await check_confirmation(gate, decision.tool, gate_args, interactive=context.interactive)

        if approved:
            result = await registry.invoke(decision.tool, decision.args, context=context)
            text = render_result(result)
        else:
            text = DENIED_OBSERVATION

        limit = max(MIN_OBSERVATION_TOKENS, min(compressor.max_tokens, task.token_budget // 4))
        compressed = await compressor.with_limit(limit).compress(text)
        observation = compressed.text

        log_step(LOGGER, task.task_id, context.depth, ordinal, "observation", observation)
        steps.append(Step(ordinal, StepKind.OBSERVATION, observation))
        transcript.append(TranscriptEntry("observation", f"Observation ({decision.tool}): {observation}", ordinal))
        return {"steps": steps, "transcript": transcript, "pending": None}

    return act_node
