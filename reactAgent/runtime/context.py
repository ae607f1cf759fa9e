"""Explicit execution context passed down every call of a task tree."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from reactAgent.memory import WorkingMemory
from reactAgent.utils.cancel import CancellationToken
from reactAgent.utils.error_handler import TaskTimeoutError

from .depth_guard import DepthGuard

Clock = Callable[[], float]


@dataclass
class ExecutionContext:
    """Depth, memory handle, abort flag, deadline and step budget of one running task.

    Nothing here is global: every top-level task builds its own context and
    children derive theirs through ``child()``.
    """

    task_id: str
    depth: int
    memory: WorkingMemory
    depth_guard: DepthGuard
    cancel: CancellationToken = field(default_factory=CancellationToken)
    deadline: Optional[float] = None
    silent: bool = False
    clock: Clock = time.monotonic
    max_steps: Optional[int] = None

    @property
    def interactive(self) -> bool:
        """Only a non-silent top-level task has an operator attached."""
        return self.depth == 0 and not self.silent

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return self.deadline - self.clock()

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Cooperative check point: abort first, then the wall-clock cap.

        Raises:
            AbortedError: the task or an ancestor was aborted
            TaskTimeoutError: the deadline passed
        """
        self.cancel.raise_if_cancelled()
        if self.expired():
            raise TaskTimeoutError(f"task {self.task_id} exceeded its time limit")

    def child_deadline(self, timeout: Optional[float]) -> Optional[float]:
        """Deadline for a child: its own cap, never later than ours."""
        own = None if timeout is None else self.clock() + timeout
        if own is None:
            return self.deadline
        if self.deadline is None:
            return own
        return min(own, self.deadline)

    def child(
        self,
        *,
        task_id: str,
        depth: int,
        memory: WorkingMemory,
        timeout: Optional[float] = None,
        max_steps: Optional[int] = None,
    ) -> "ExecutionContext":
        return ExecutionContext(
            task_id=task_id,
            depth=depth,
            memory=memory,
            depth_guard=self.depth_guard,
            cancel=self.cancel.child(),
            deadline=self.child_deadline(timeout),
            silent=True,
            clock=self.clock,
            max_steps=max_steps,
        )
