"""Human-in-the-loop: operator, Ask/Answer protocol and confirmation gate."""

from .ask import SILENT_ASK_REASON, AskChannel, AskState
from .gate import (
    DENIED_OBSERVATION,
    ConfirmationGate,
    OperatorConfirmationGate,
    StaticConfirmationGate,
    check_confirmation,
)
from .operator import ConsoleOperator, Operator

__all__ = [
    "AskChannel",
    "AskState",
    "SILENT_ASK_REASON",
    "ConfirmationGate",
    "StaticConfirmationGate",
    "OperatorConfirmationGate",
    "DENIED_OBSERVATION",
    "check_confirmation",
    "Operator",
    "ConsoleOperator",
]
