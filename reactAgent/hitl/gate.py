"""Confirmation gate consulted before tools flagged ``requires_confirmation``.

The engine treats the gate as a boolean precondition. Policies live outside
the engine; two simple gates are provided.
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Awaitable, Dict, Protocol, Union, runtime_checkable

from .operator import Operator

LOGGER = logging.getLogger(__name__)

DENIED_OBSERVATION = "denied by confirmation gate"

_YES = {"y", "yes", "ok", "allow", "approve"}


@runtime_checkable
class ConfirmationGate(Protocol):
    def confirm(self, tool: str, args: Dict[str, Any]) -> Union[bool, Awaitable[bool]]:
        ...


class StaticConfirmationGate:
    """Same verdict for every call (``AUTO_APPROVE`` in settings)."""

    interactive = False

    def __init__(self, allow: bool = False) -> None:
        self.allow = allow

    def confirm(self, tool: str, args: Dict[str, Any]) -> bool:
        return self.allow


class OperatorConfirmationGate:
    """Asks the operator to approve each flagged call."""

    interactive = True

    def __init__(self, operator: Operator) -> None:
        self.operator = operator

    async def confirm(self, tool: str, args: Dict[str, Any]) -> bool:
        rendered = json.dumps(args, ensure_ascii=False, default=str)
        answer = await self.operator.ask(f"Allow tool '{tool}' with {rendered}? [y/N]")
        return answer.strip().lower() in _YES


async def check_confirmation(gate: ConfirmationGate, tool: str, args: Dict[str, Any], *, interactive: bool) -> bool:
    """Evaluate ``gate`` for one call; sync and async gates are both accepted.

    Gates that need an operator deny outright when no operator is attached.
    """
    if getattr(gate, "interactive", False) and not interactive:
        LOGGER.info(f"Confirmation for {tool} denied: no operator in silent mode")
        return False
    verdict = gate.confirm(tool, args)
    if inspect.isawaitable(verdict):
        verdict = await verdict
    LOGGER.info(f"Confirmation gate for {tool}: {'approved' if verdict else 'denied'}")
    return bool(verdict)
