"""Task, step and result records passed through the step loop."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from reactAgent.memory import WorkingMemory


class TaskStatus(str, Enum):
    """Terminal status of a task or sub-agent."""

    DONE = "done"
    STUCK = "stuck"
    TIMEOUT = "timeout"
    ABORTED = "aborted"
    DEPTH_LIMIT = "depth_limit"
    ERROR = "error"


class StepKind(str, Enum):
    """Kind of a trace step."""

    THOUGHT = "thought"
    ACTION = "action"
    OBSERVATION = "observation"
    ASK = "ask"
    ANSWER = "answer"
    DONE = "done"
    STUCK = "stuck"


@dataclass(frozen=True)
class Step:
    """One entry of the step trace.

    ``ordinal`` is the loop iteration the entry belongs to, so an Action and
    its Observation share the same ordinal.
    """

    ordinal: int
    kind: StepKind
    payload: Any


def _new_task_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class Task:
    """One invocation of the step loop (top-level or spawned)."""

    description: str
    max_steps: int
    token_budget: int
    depth: int = 0
    parent_memory: Optional["WorkingMemory"] = None  # shared reference or isolated clone
    silent: bool = False
    timeout: Optional[float] = None
    plan_first: bool = True
    task_id: str = field(default_factory=_new_task_id)


@dataclass
class TaskResult:
    """What a caller gets back from ``Orchestrator.run_task``."""

    task_id: str
    status: TaskStatus
    output: str
    steps: List[Step] = field(default_factory=list)
    step_count: int = 0
    memory_snapshot: Dict[str, Any] = field(default_factory=dict)
    plan: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == TaskStatus.DONE

    def steps_of(self, kind: StepKind) -> List[Step]:
        return [step for step in self.steps if step.kind == kind]


@dataclass
class SubAgentResult:
    """Outcome of one spawned sub-agent, as seen by its parent."""

    task_id: str
    index: int
    description: str
    status: TaskStatus
    output: str
    memory_delta: Dict[str, Any] = field(default_factory=dict)
    steps_used: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "index": self.index,
            "task": self.description,
            "status": self.status.value,
            "output": self.output,
            "memory_delta": self.memory_delta,
            "steps": self.steps_used,
        }


@dataclass(frozen=True)
class TranscriptEntry:
    """One message of the running transcript.

    ``reply`` entries are raw model replies; ``observation`` entries carry tool
    results, parse errors and operator answers back to the model.
    """

    role: str  # "reply" | "observation"
    content: str
    ordinal: int = 0

    @property
    def is_observation(self) -> bool:
        return self.role == "observation"


@dataclass
class SubTaskRequest:
    """One sub-task descriptor accepted by ``spawn_agent``."""

    description: str
    max_steps: Optional[int] = None
    memory_seed: Dict[str, Any] = field(default_factory=dict)
    timeout: Optional[float] = None

    @classmethod
    def coerce(cls, raw: Any) -> "SubTaskRequest":
        """Build a request from a string or a ``{"task": ...}`` mapping."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            return cls(description=raw.strip())
        if isinstance(raw, dict):
            description = raw.get("task") or raw.get("description") or ""
            seed = raw.get("memory_seed") or {}
            if not isinstance(seed, dict):
                raise ValueError("memory_seed must be an object")
            return cls(
                description=str(description).strip(),
                max_steps=raw.get("max_steps"),
                memory_seed=dict(seed),
                timeout=raw.get("timeout"),
            )
        raise ValueError(f"unsupported sub-task descriptor: {type(raw).__name__}")
