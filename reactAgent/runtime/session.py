"""Interactive session: several tasks sharing one long-lived working memory."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from reactAgent.memory import WorkingMemory
from reactAgent.schema import TaskResult

from .orchestrator import Orchestrator

LOGGER = logging.getLogger(__name__)


class Session:
    """Transcript of finished tasks plus the memory they all run on.

    Only interactive (non-silent) tasks run through a session; values stored
    by one task are visible to the next.
    """

    def __init__(self, orchestrator: Orchestrator, memory: Optional[WorkingMemory] = None) -> None:
        self.orchestrator = orchestrator
        self.memory = memory if memory is not None else WorkingMemory(depth=0)
        self.transcript: List[TaskResult] = []

    @property
    def last_result(self) -> Optional[TaskResult]:
        return self.transcript[-1] if self.transcript else None

    async def run(self, description: str, **options: Any) -> TaskResult:
        """Run one interactive task on the session memory."""
        options.setdefault("silent", False)
        result = await self.orchestrator.run_task(description, memory=self.memory, **options)
        self.transcript.append(result)
        LOGGER.info(f"Session task #{len(self.transcript)} finished: {result.status.value}")
        return result

    def abort(self, reason: str = "aborted by operator") -> int:
        return self.orchestrator.abort(reason)

    def reset(self) -> None:
        """Forget finished tasks and start from an empty memory."""
        self.transcript.clear()
        self.memory = WorkingMemory(depth=0)
