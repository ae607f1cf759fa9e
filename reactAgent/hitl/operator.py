"""Operator interface: the human on the other side of an Ask."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

from reactAgent.utils.error_handler import AbortedError

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Operator(Protocol):
    async def ask(self, question: str) -> str:
        """Return the operator's answer to ``question``."""


class ConsoleOperator:
    """Reads answers from stdin without blocking the event loop."""

    def __init__(self, prompt: str = "> ", prefix: str = "💬") -> None:
        self.prompt = prompt
        self.prefix = prefix

    async def ask(self, question: str) -> str:
        print()
        print(f"{self.prefix} {question}")
        loop = asyncio.get_running_loop()
        try:
            answer = await loop.run_in_executor(None, lambda: input(self.prompt))
        except EOFError as e:
            raise AbortedError("operator closed the input stream") from e
        LOGGER.debug(f"Operator answered: {answer!r}")
        return answer.strip()
