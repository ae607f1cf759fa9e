"""Agent node: one iteration of the step loop."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.runnables import RunnableConfig

from reactAgent.context import TranscriptTruncator, estimate_tokens
from reactAgent.graph.prompts import PromptBuilder, render_memory, render_task
from reactAgent.graph.state import StepState, get_execution_context, terminal
from reactAgent.schema import (
    ActionDecision,
    AskDecision,
    DoneDecision,
    Step,
    StepKind,
    StuckDecision,
    TaskStatus,
    ThoughtDecision,
    TranscriptEntry,
    parse_decision,
)
from reactAgent.tools import ToolRegistry
from reactAgent.utils.error_handler import (
    AbortedError,
    DecisionParseError,
    ProviderError,
    TaskTimeoutError,
    handle_model_error,
)
from reactAgent.utils.logging_utils import log_prompt, log_step
from reactAgent.utils.message_utils import stringify_content

LOGGER = logging.getLogger(__name__)

STEP_BUDGET_EXHAUSTED = "step budget exhausted"


async def invoke_model(model: Any, messages: Sequence[BaseMessage], *, attempts: int = 2) -> str:
    """Call the chat model, retrying failed calls up to ``attempts`` times in total.

    Raises:
        ProviderError: every attempt failed
    """
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            response = await model.ainvoke(list(messages))
            return stringify_content(response)
        except Exception as e:
            last_error = e
            LOGGER.warning(f"Model call failed (attempt {attempt}/{attempts}): {type(e).__name__}: {e}")
    raise ProviderError(str(last_error), user_message=f"provider error: {handle_model_error(last_error)}") from last_error


def transcript_messages(entries: List[TranscriptEntry]) -> List[BaseMessage]:
    return [
        HumanMessage(content=entry.content) if entry.is_observation else AIMessage(content=entry.content)
        for entry in entries
    ]


def render_answer(answer: Any) -> str:
    if isinstance(answer, str):
        return answer
    return json.dumps(answer, ensure_ascii=False, default=str)


def build_agent_node(
    *,
    model: Any,
    registry: ToolRegistry,
    prompt_builder: PromptBuilder,
    truncator: TranscriptTruncator,
    settings,
):
    max_depth = settings.governance.max_depth
    chars_per_token = settings.context.chars_per_token
    memory_preview_chars = settings.context.memory_preview_chars
    log_prompt_max_length = settings.observability.log_prompt_max_length

    async def agent_node(state: StepState, config: RunnableConfig) -> StepState:
        context = get_execution_context(config)
        task = state["task"]
        steps = list(state.get("steps") or [])
        step_count = state.get("step_count", 0)

        # ========== Abort / deadline / budget ==========
        try:
            context.check()
        except AbortedError as e:
            LOGGER.info(f"[{task.task_id}] aborted before step {step_count + 1}")
            return terminal(TaskStatus.ABORTED, str(e))
        except TaskTimeoutError as e:
            LOGGER.info(f"[{task.task_id}] timed out before step {step_count + 1}")
            return terminal(TaskStatus.TIMEOUT, str(e))

        if step_count >= task.max_steps:
            LOGGER.warning(f"[{task.task_id}] step budget exhausted ({step_count}/{task.max_steps})")
            steps.append(Step(step_count, StepKind.STUCK, STEP_BUDGET_EXHAUSTED))
            return terminal(TaskStatus.STUCK, STEP_BUDGET_EXHAUSTED, steps)

        ordinal = step_count + 1

        # ========== Prompt ==========
        can_spawn = context.depth_guard.can_spawn(context.depth)
        catalog = registry.catalog(
            for_subagent=context.depth > 0,
            exclude=() if can_spawn else ("spawn_agent",),
        )
        system_prompt = prompt_builder.system_prompt(
            tools=catalog,
            silent=not context.interactive,
            can_spawn=can_spawn and "spawn_agent" in registry,
            depth=context.depth,
            max_depth=max_depth,
            step=ordinal,
            max_steps=task.max_steps,
            plan=state.get("plan") or [],
            memory=render_memory(context.memory.snapshot(), memory_preview_chars),
        )

        fixed_tokens = estimate_tokens(system_prompt, chars_per_token) + estimate_tokens(
            render_task(task.description, dropped=1), chars_per_token
        )
        transcript, newly_dropped = truncator.trim(
            list(state.get("transcript") or []), task.token_budget, fixed_tokens
        )
        dropped = state.get("dropped_observations", 0) + newly_dropped

        messages: List[BaseMessage] = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=render_task(task.description, dropped)),
            *transcript_messages(transcript),
        ]
        log_prompt(LOGGER, f"step {ordinal}", system_prompt, max_length=log_prompt_max_length)

        # ========== Model call ==========
        try:
            reply = await invoke_model(model, messages)
        except ProviderError as e:
            steps.append(Step(ordinal, StepKind.STUCK, e.user_message))
            update = terminal(TaskStatus.STUCK, e.user_message, steps)
            update.update({"step_count": ordinal, "transcript": transcript, "dropped_observations": dropped})
            return update

        transcript.append(TranscriptEntry("reply", reply, ordinal))
        update: StepState = {
            "step_count": ordinal,
            "transcript": transcript,
            "dropped_observations": dropped,
            "pending": None,
        }

        # ========== Parse ==========
        try:
            decision = parse_decision(reply)
        except DecisionParseError as e:
            note = f"parse error: {e}"
            log_step(LOGGER, task.task_id, context.depth, ordinal, "parse_error", note)
            steps.append(Step(ordinal, StepKind.OBSERVATION, note))
            transcript.append(TranscriptEntry("observation", note, ordinal))
            update["steps"] = steps
            return update

        log_step(LOGGER, task.task_id, context.depth, ordinal, decision.kind, decision.model_dump(exclude={"kind"}))

        if isinstance(decision, ThoughtDecision):
            steps.append(Step(ordinal, StepKind.THOUGHT, decision.content))
        elif isinstance(decision, ActionDecision):
            steps.append(Step(ordinal, StepKind.ACTION, {"tool": decision.tool, "args": decision.args}))
            update["pending"] = decision
        elif isinstance(decision, AskDecision):
            steps.append(Step(ordinal, StepKind.ASK, decision.question))
            update["pending"] = decision
        elif isinstance(decision, DoneDecision):
            answer = render_answer(decision.answer)
            steps.append(Step(ordinal, StepKind.DONE, answer))
            update.update({"status": TaskStatus.DONE, "output": answer})
        elif isinstance(decision, StuckDecision):
            steps.append(Step(ordinal, StepKind.STUCK, decision.reason))
            update.update({"status": TaskStatus.STUCK, "output": decision.reason})

        update["steps"] = steps
        return update

    return agent_node
