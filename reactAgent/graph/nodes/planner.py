"""Planner node: one model call producing a display-only plan."""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.runnables import RunnableConfig

from reactAgent.graph.prompts import PromptBuilder, render_task
from reactAgent.graph.state import StepState, get_execution_context, terminal
from reactAgent.schema import TaskStatus, parse_plan
from reactAgent.tools import ToolRegistry
from reactAgent.utils.error_handler import AbortedError, DecisionParseError, ProviderError, TaskTimeoutError
from reactAgent.utils.logging_utils import log_prompt

from .agent import invoke_model

LOGGER = logging.getLogger(__name__)

MAX_PLAN_ITEMS = 8


def build_planner_node(*, model: Any, registry: ToolRegistry, prompt_builder: PromptBuilder, settings):
    log_prompt_max_length = settings.observability.log_prompt_max_length

    async def planner_node(state: StepState, config: RunnableConfig) -> StepState:
        task = state["task"]
        if not task.plan_first:
            return {"plan": []}

        context = get_execution_context(config)
        try:
            context.check()
        except AbortedError as e:
            return terminal(TaskStatus.ABORTED, str(e))
        except TaskTimeoutError as e:
            return terminal(TaskStatus.TIMEOUT, str(e))

        tool_names = [meta.name for meta in registry.list_meta(for_subagent=context.depth > 0)]
        prompt = prompt_builder.planner_prompt(tools=tool_names, max_items=MAX_PLAN_ITEMS)
        log_prompt(LOGGER, "plan", prompt, max_length=log_prompt_max_length)

        # The plan is advisory, a failed planning call only loses the plan
        try:
            reply = await invoke_model(
                model,
                [SystemMessage(content=prompt), HumanMessage(content=render_task(task.description))],
                attempts=1,
            )
            plan = parse_plan(reply, max_items=MAX_PLAN_ITEMS)
        except (ProviderError, DecisionParseError) as e:
            LOGGER.warning(f"[{task.task_id}] planning skipped: {e}")
            plan = []

        LOGGER.info(f"[{task.task_id}] plan: {len(plan)} item(s)")
        for i, item in enumerate(plan, 1):
            LOGGER.debug(f"  {i}. {item}")
        return {"plan": plan}

    return planner_node
