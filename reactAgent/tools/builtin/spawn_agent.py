"""spawn_agent: delegate self-contained sub-tasks to child agents."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Union

from reactAgent.schema import SubTaskRequest, TaskStatus, ToolResult
from reactAgent.utils.error_handler import ToolExecutionError

LOGGER = logging.getLogger(__name__)


class SpawnAgentTool:
    """Delegate one sub-task, or a list of sub-tasks, to child agents.

    Children do not see the parent's transcript, so every sub-task
    description must be self-contained. Pass ``tasks`` with
    ``parallel=true`` to run several sub-tasks at once.
    """

    def __init__(self, spawner) -> None:
        self._spawner = spawner

    async def __call__(
        self,
        task: Optional[str] = None,
        tasks: Optional[List[Union[str, Dict[str, Any]]]] = None,
        parallel: bool = False,
        max_steps: Optional[int] = None,
        memory_seed: Optional[Dict[str, Any]] = None,
        context: Any = None,
    ) -> ToolResult:
        if context is None:
            raise ToolExecutionError("spawn_agent needs an execution context")

        if tasks is None:
            if not task:
                raise ToolExecutionError("spawn_agent needs 'task' or 'tasks'")
            request = SubTaskRequest(description=task, max_steps=max_steps, memory_seed=dict(memory_seed or {}))
            result = await self._spawner.spawn(context, request)
            payload = result.to_dict()
            if result.status == TaskStatus.DEPTH_LIMIT:
                return ToolResult.fail(result.output, output=payload)
            return ToolResult.ok(json.dumps(payload, ensure_ascii=False, default=str))

        if isinstance(tasks, (str, dict)):
            tasks = [tasks]
        requests = [SubTaskRequest.coerce(item) for item in tasks]
        for request in requests:
            if not request.description:
                raise ToolExecutionError("every sub-task needs a description")
            if request.max_steps is None:
                request.max_steps = max_steps
            if memory_seed:
                request.memory_seed = {**memory_seed, **request.memory_seed}

        if parallel:
            results = await self._spawner.spawn_parallel(context, requests)
        else:
            results = await self._spawner.spawn_sequence(context, requests)

        payload = {"results": [r.to_dict() for r in results]}
        if results and all(r.status == TaskStatus.DEPTH_LIMIT for r in results):
            return ToolResult.fail(results[0].output, output=payload)
        return ToolResult.ok(json.dumps(payload, ensure_ascii=False, default=str))
