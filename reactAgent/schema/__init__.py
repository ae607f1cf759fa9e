"""Data model exports."""

from .task import (
    Step,
    StepKind,
    SubAgentResult,
    SubTaskRequest,
    Task,
    TaskResult,
    TaskStatus,
    TranscriptEntry,
)
from .tools import ToolInvocation, ToolResult
from .decision import (
    ActionDecision,
    AskDecision,
    Decision,
    DoneDecision,
    StuckDecision,
    ThoughtDecision,
    parse_decision,
    parse_plan,
)

__all__ = [
    "Task",
    "TaskResult",
    "TaskStatus",
    "Step",
    "StepKind",
    "SubAgentResult",
    "SubTaskRequest",
    "TranscriptEntry",
    "ToolInvocation",
    "ToolResult",
    "Decision",
    "ThoughtDecision",
    "ActionDecision",
    "AskDecision",
    "DoneDecision",
    "StuckDecision",
    "parse_decision",
    "parse_plan",
]
