"""Orchestrator: runs tasks through the step graph and reports terminal results."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Set, Union

from langgraph.errors import GraphRecursionError

from reactAgent.config import Settings, get_settings
from reactAgent.context import ObservationCompressor, TranscriptTruncator
from reactAgent.graph import CONTEXT_KEY, PromptBuilder, build_step_graph
from reactAgent.hitl import ConfirmationGate, Operator, StaticConfirmationGate
from reactAgent.memory import WorkingMemory
from reactAgent.schema import Step, Task, TaskResult, TaskStatus
from reactAgent.tools import ToolRegistry
from reactAgent.utils.cancel import CancellationToken
from reactAgent.utils.error_handler import AbortedError, TaskTimeoutError
from reactAgent.utils.logging_utils import log_error

from .context import Clock, ExecutionContext
from .depth_guard import DepthGuard

LOGGER = logging.getLogger(__name__)


class Orchestrator:
    """Entry point of the engine.

    One instance serves any number of tasks, top-level or spawned. Each
    top-level ``run_task`` builds its own ExecutionContext and DepthGuard;
    spawned children re-enter through ``execute`` with a derived context.

    Args:
        model: chat model exposing ``ainvoke(messages)``
        registry: tool registry (built-ins are registered by ``build_application``)
        settings: application settings, defaults to ``get_settings()``
        gate: confirmation gate for tools flagged ``requires_confirmation``
        operator: answers Ask steps; without one every task runs silent
        compressor: observation compressor, built from settings when omitted
        clock: monotonic clock used for deadlines
    """

    def __init__(
        self,
        *,
        model: Any,
        registry: ToolRegistry,
        settings: Optional[Settings] = None,
        gate: Optional[ConfirmationGate] = None,
        operator: Optional[Operator] = None,
        compressor: Optional[ObservationCompressor] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.settings = settings or get_settings()
        self.model = model
        self.registry = registry
        self.operator = operator
        self.clock = clock

        governance = self.settings.governance
        context_settings = self.settings.context
        self.gate = gate or StaticConfirmationGate(allow=governance.auto_approve)
        self.compressor = compressor or ObservationCompressor(
            context_settings.observation_max_tokens,
            chars_per_token=context_settings.chars_per_token,
        )
        self.truncator = TranscriptTruncator(context_settings.chars_per_token)

        self._graph = build_step_graph(
            model=model,
            registry=registry,
            settings=self.settings,
            gate=self.gate,
            compressor=self.compressor,
            truncator=self.truncator,
            prompt_builder=prompt_builder,
            operator=operator,
        )

        self._active: Set[CancellationToken] = set()
        self._last_result: Optional[TaskResult] = None

    # ========== Introspection ==========

    @property
    def last_result(self) -> Optional[TaskResult]:
        return self._last_result

    @property
    def last_steps(self) -> List[Step]:
        return list(self._last_result.steps) if self._last_result else []

    @property
    def last_memory_snapshot(self) -> Dict[str, Any]:
        return dict(self._last_result.memory_snapshot) if self._last_result else {}

    @property
    def last_plan(self) -> List[str]:
        return list(self._last_result.plan) if self._last_result else []

    @property
    def running(self) -> bool:
        return bool(self._active)

    # ========== Control ==========

    def abort(self, reason: str = "aborted by operator") -> int:
        """Abort every running top-level task together with its sub-agents.

        Takes effect at the next check point of each task. Returns the number
        of tasks signalled.
        """
        for token in list(self._active):
            token.request_cancel(reason)
        if self._active:
            LOGGER.info(f"Abort requested for {len(self._active)} running task(s): {reason}")
        return len(self._active)

    def new_task(
        self,
        description: str,
        *,
        max_steps: Optional[int] = None,
        token_budget: Optional[int] = None,
        silent: Optional[bool] = None,
        timeout: Optional[float] = None,
        plan_first: Optional[bool] = None,
    ) -> Task:
        """Top-level Task with defaults taken from the governance settings."""
        governance = self.settings.governance
        return Task(
            description=description,
            max_steps=governance.max_steps if max_steps is None else max_steps,
            token_budget=governance.token_budget if token_budget is None else token_budget,
            silent=(self.operator is None) if silent is None else silent,
            timeout=governance.task_timeout if timeout is None else timeout,
            plan_first=governance.plan_first if plan_first is None else plan_first,
        )

    async def run_task(
        self,
        task: Union[Task, str],
        *,
        memory: Optional[WorkingMemory] = None,
        **options: Any,
    ) -> TaskResult:
        """Run one top-level task to a terminal status.

        Args:
            task: a Task, or a description turned into one with ``new_task``
            memory: working memory to run on (e.g. a session's long-lived one)
            **options: ``new_task`` overrides when ``task`` is a description

        Returns:
            TaskResult; step-level errors stay in the trace, callers only see
            the terminal status.
        """
        if isinstance(task, str):
            task = self.new_task(task, **options)
        elif options:
            raise TypeError("options are only accepted together with a task description")

        if memory is None:
            memory = task.parent_memory if task.parent_memory is not None else WorkingMemory(depth=task.depth)

        cancel = CancellationToken()
        context = ExecutionContext(
            task_id=task.task_id,
            depth=task.depth,
            memory=memory,
            depth_guard=DepthGuard(self.settings.governance.max_depth),
            cancel=cancel,
            deadline=None if task.timeout is None else self.clock() + task.timeout,
            silent=task.silent or self.operator is None,
            clock=self.clock,
            max_steps=task.max_steps,
        )

        LOGGER.info(f"[{task.task_id}] task started: {task.description[:200]}")
        self._active.add(cancel)
        try:
            result = await self.execute(task, context)
        finally:
            self._active.discard(cancel)

        self._last_result = result
        LOGGER.info(f"[{task.task_id}] task finished: {result.status.value} ({result.step_count} step(s))")
        return result

    async def execute(self, task: Task, context: ExecutionContext) -> TaskResult:
        """Drive the step graph for ``task`` inside ``context``.

        Used for top-level tasks and, through the spawner, for every child.
        The deadline is enforced cooperatively by the nodes and, as a hard
        cap, by ``asyncio.wait_for``.
        """
        state: Dict[str, Any] = {
            "task": task,
            "plan": [],
            "steps": [],
            "transcript": [],
            "dropped_observations": 0,
            "step_count": 0,
            "pending": None,
            "status": None,
            "output": "",
        }
        config = {
            "configurable": {CONTEXT_KEY: context},
            "recursion_limit": task.max_steps * 3 + 10,
        }
        last: Dict[str, Any] = dict(state)

        async def drive() -> None:
            async for snapshot in self._graph.astream(state, config=config, stream_mode="values"):
                last.update(snapshot)

        status: Optional[TaskStatus] = None
        output = ""
        remaining = context.remaining()
        try:
            if remaining is not None and remaining <= 0:
                raise TaskTimeoutError(f"task {task.task_id} exceeded its time limit")
            await asyncio.wait_for(drive(), timeout=remaining)
        except asyncio.TimeoutError:
            status, output = TaskStatus.TIMEOUT, f"task {task.task_id} exceeded its time limit"
        except TaskTimeoutError as e:
            status, output = TaskStatus.TIMEOUT, str(e)
        except AbortedError as e:
            status, output = TaskStatus.ABORTED, str(e)
        except GraphRecursionError:
            status, output = TaskStatus.STUCK, "step budget exhausted"
        except Exception as e:
            log_error(LOGGER, e, context=f"task {task.task_id} (depth {context.depth})")
            status, output = TaskStatus.ERROR, f"{type(e).__name__}: {e}"

        if status is None:
            status = last.get("status") or TaskStatus.ERROR
            output = last.get("output", "")

        return TaskResult(
            task_id=task.task_id,
            status=status,
            output=output,
            steps=list(last.get("steps") or []),
            step_count=last.get("step_count", 0),
            memory_snapshot=context.memory.snapshot(),
            plan=list(last.get("plan") or []),
        )
