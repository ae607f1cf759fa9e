"""Ask/Answer protocol between a running task and its operator."""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Optional

from reactAgent.utils.error_handler import AbortedError, AgentError, TaskTimeoutError

from .operator import Operator

LOGGER = logging.getLogger(__name__)

SILENT_ASK_REASON = "cannot ask in silent mode"


class AskState(str, Enum):
    RUNNING = "running"
    AWAITING_ANSWER = "awaiting_answer"
    ABORTED = "aborted"


class AskChannel:
    """Blocks a task on an operator answer while watching abort and timeouts.

    States: RUNNING → AWAITING_ANSWER → RUNNING (answered) or ABORTED
    (cancelled, answer timeout or task deadline while waiting).

    Args:
        operator: source of answers
        answer_timeout: seconds to wait for an answer, None waits forever
        poll_interval: how often abort and deadline are re-checked
    """

    def __init__(
        self,
        operator: Operator,
        *,
        answer_timeout: Optional[float] = None,
        poll_interval: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.operator = operator
        self.answer_timeout = answer_timeout
        self.poll_interval = poll_interval
        self.clock = clock
        self.state = AskState.RUNNING

    async def ask(self, question: str, context) -> str:
        """Ask ``question`` on behalf of the task running in ``context``.

        Raises:
            AgentError: the context is silent (no operator may be asked)
            AbortedError: the task was aborted while waiting
            TaskTimeoutError: no answer within ``answer_timeout`` or the task deadline
        """
        if not context.interactive:
            raise AgentError(SILENT_ASK_REASON)

        context.check()
        self.state = AskState.AWAITING_ANSWER
        LOGGER.info(f"[{context.task_id}] awaiting operator answer: {question}")
        started = self.clock()
        pending = asyncio.ensure_future(self.operator.ask(question))
        try:
            while True:
                done, _ = await asyncio.wait({pending}, timeout=self.poll_interval)
                if pending in done:
                    answer = pending.result()
                    self.state = AskState.RUNNING
                    return "" if answer is None else str(answer)
                if context.cancel.cancelled:
                    self.state = AskState.ABORTED
                    raise AbortedError(context.cancel.reason or "aborted while awaiting an answer")
                if self.answer_timeout is not None and self.clock() - started >= self.answer_timeout:
                    self.state = AskState.ABORTED
                    raise TaskTimeoutError(f"no answer within {self.answer_timeout}s")
                if context.expired():
                    self.state = AskState.ABORTED
                    raise TaskTimeoutError(f"task {context.task_id} exceeded its time limit")
        except AbortedError:
            self.state = AskState.ABORTED
            raise
        finally:
            if not pending.done():
                pending.cancel()
