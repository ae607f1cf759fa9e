"""Sub-agent spawner: re-enters the step loop for delegated sub-tasks.

Memory rules:
- a sequential spawn from depth 0 shares the parent's memory instance;
- every other spawn (deeper, or any parallel branch) runs on ``clone()`` and
  its writes come back through ``WorkingMemory.merge`` after the child ends.

Parallel branches run in a bounded pool. A failing branch never cancels its
siblings; results keep request order and are merged by this coroutine alone,
after the join.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from reactAgent.memory import WorkingMemory
from reactAgent.schema import SubAgentResult, SubTaskRequest, Task, TaskResult, TaskStatus
from reactAgent.utils.error_handler import DepthLimitError
from reactAgent.utils.logging_utils import log_error, log_spawn

from .context import ExecutionContext

LOGGER = logging.getLogger(__name__)

TaskRunner = Callable[[Task, ExecutionContext], Awaitable[TaskResult]]


def _depth_limited(request: SubTaskRequest, index: int, error: DepthLimitError) -> SubAgentResult:
    return SubAgentResult(
        task_id="",
        index=index,
        description=request.description,
        status=TaskStatus.DEPTH_LIMIT,
        output=error.user_message,
    )


class SubAgentSpawner:
    """Runs sub-tasks as child tasks of a running task.

    Args:
        runner: coroutine executing one task inside a given context
            (``Orchestrator.execute``)
        child_max_steps: default step budget of a child, capped below the
            parent's own budget
        token_budget: prompt budget of a child
        max_parallel: worker cap for parallel spawns
        subtask_timeout: wall-clock cap of one child in seconds
    """

    def __init__(
        self,
        runner: TaskRunner,
        *,
        child_max_steps: int,
        token_budget: int,
        max_parallel: int = 4,
        subtask_timeout: Optional[float] = None,
    ) -> None:
        if max_parallel < 1:
            raise ValueError("max_parallel must be >= 1")
        self._runner = runner
        self.child_max_steps = child_max_steps
        self.token_budget = token_budget
        self.max_parallel = max_parallel
        self.subtask_timeout = subtask_timeout

    @classmethod
    def from_settings(cls, runner: TaskRunner, governance) -> "SubAgentSpawner":
        return cls(
            runner,
            child_max_steps=governance.child_max_steps,
            token_budget=governance.token_budget,
            max_parallel=governance.max_parallel,
            subtask_timeout=governance.subtask_timeout,
        )

    async def spawn(self, context: ExecutionContext, request: SubTaskRequest, *, index: int = 0) -> SubAgentResult:
        """Run one child and wait for it.

        Returns a ``DepthLimit`` result, without running anything, when the
        calling task already sits at the maximum depth.
        """
        log_spawn(LOGGER, context.task_id, context.depth, [request.description], parallel=False)
        shared = context.depth == 0
        try:
            with context.depth_guard.slot(context.depth) as child_depth:
                memory = context.memory if shared else context.memory.clone(depth=child_depth)
                result = await self._run_child(context, request, index, child_depth, memory)
        except DepthLimitError as e:
            return _depth_limited(request, index, e)

        if not shared:
            context.memory.merge([result])
        return result

    async def spawn_sequence(self, context: ExecutionContext, requests: Sequence[SubTaskRequest]) -> List[SubAgentResult]:
        """Run several children one after another, in request order."""
        results = []
        for index, request in enumerate(requests):
            results.append(await self.spawn(context, request, index=index))
        return results

    async def spawn_parallel(self, context: ExecutionContext, requests: Sequence[SubTaskRequest]) -> List[SubAgentResult]:
        """Run one isolated child per request, at most ``max_parallel`` at once.

        The returned list has one result per request, in request order.
        """
        requests = list(requests)
        if not requests:
            return []

        log_spawn(LOGGER, context.task_id, context.depth, [r.description for r in requests], parallel=True)
        guard = context.depth_guard
        if not guard.can_spawn(context.depth):
            error = DepthLimitError(context.depth, guard.max_depth)
            return [_depth_limited(request, i, error) for i, request in enumerate(requests)]

        semaphore = asyncio.Semaphore(self.max_parallel)

        async def worker(index: int, request: SubTaskRequest) -> SubAgentResult:
            async with semaphore:
                try:
                    with guard.slot(context.depth) as child_depth:
                        memory = context.memory.clone(depth=child_depth)
                        return await self._run_child(context, request, index, child_depth, memory)
                except DepthLimitError as e:
                    return _depth_limited(request, index, e)

        gathered = await asyncio.gather(
            *(worker(i, request) for i, request in enumerate(requests)),
            return_exceptions=True,
        )

        results: List[SubAgentResult] = []
        for index, (request, outcome) in enumerate(zip(requests, gathered)):
            if isinstance(outcome, SubAgentResult):
                results.append(outcome)
                continue
            status = TaskStatus.ABORTED if isinstance(outcome, asyncio.CancelledError) else TaskStatus.ERROR
            LOGGER.warning(f"Sub-agent [{index}] crashed: {type(outcome).__name__}: {outcome}")
            results.append(SubAgentResult(
                task_id="",
                index=index,
                description=request.description,
                status=status,
                output=f"{type(outcome).__name__}: {outcome}",
            ))

        context.memory.merge(r for r in results if r.status != TaskStatus.DEPTH_LIMIT)
        done = sum(1 for r in results if r.status == TaskStatus.DONE)
        LOGGER.info(f"[{context.task_id} d{context.depth}] parallel join: {done}/{len(results)} done")
        return results

    def child_budget(self, context: ExecutionContext, request: SubTaskRequest) -> int:
        """Step budget of a child: the explicit override, else below the parent's."""
        if request.max_steps is not None:
            return request.max_steps
        if context.max_steps is None:
            return self.child_max_steps
        return max(1, min(self.child_max_steps, context.max_steps - 1))

    async def _run_child(
        self,
        context: ExecutionContext,
        request: SubTaskRequest,
        index: int,
        child_depth: int,
        memory: WorkingMemory,
    ) -> SubAgentResult:
        if request.memory_seed:
            memory.seed(request.memory_seed)
        baseline = memory.snapshot()

        task = Task(
            description=request.description,
            max_steps=self.child_budget(context, request),
            token_budget=self.token_budget,
            depth=child_depth,
            parent_memory=memory,
            silent=True,
            timeout=request.timeout or self.subtask_timeout,
            plan_first=False,
        )
        child_context = context.child(
            task_id=task.task_id,
            depth=child_depth,
            memory=memory,
            timeout=task.timeout,
            max_steps=task.max_steps,
        )

        try:
            outcome = await self._runner(task, child_context)
        except Exception as e:
            log_error(LOGGER, e, context=f"sub-agent {task.task_id} (depth {child_depth})")
            return SubAgentResult(
                task_id=task.task_id,
                index=index,
                description=request.description,
                status=TaskStatus.ERROR,
                output=f"{type(e).__name__}: {e}",
                memory_delta=memory.delta(baseline),
            )

        return SubAgentResult(
            task_id=task.task_id,
            index=index,
            description=request.description,
            status=outcome.status,
            output=outcome.output,
            memory_delta=memory.delta(baseline),
            steps_used=outcome.step_count,
        )
