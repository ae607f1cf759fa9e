"""Working memory: the cross-step key/value store of a task.

Sharing rules are decided by the spawner, not here:
- a depth-0 task hands its own instance to a sequential depth-1 child
  (mutations propagate both ways);
- every deeper spawn and every parallel branch gets ``clone()``;
- results of isolated children come back through ``merge()`` under a
  namespaced ``subagent:<hash>`` key.

The store holds no locks. Concurrent branches never touch the same
instance and ``merge()`` runs after the join barrier.
"""

from __future__ import annotations

import copy
import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Literal, Mapping, Optional

from reactAgent.utils.error_handler import MemoryKeyError

LOGGER = logging.getLogger(__name__)

MemoryScope = Literal["shared", "isolated"]

MERGE_KEY_PREFIX = "subagent:"

_MISSING = object()


@dataclass
class MemoryEntry:
    key: str
    value: Any
    scope: MemoryScope
    depth: int


def merge_key(description: str, index: int = 0) -> str:
    """Namespaced key for a sub-task result.

    The hash covers the request position as well as the description, so two
    identical sub-tasks in one parallel request still get distinct keys.
    """
    digest = hashlib.sha1(f"{index}:{description}".encode("utf-8")).hexdigest()[:12]
    return f"{MERGE_KEY_PREFIX}{digest}"


class WorkingMemory:
    """Key/value store with a scope and an owning depth."""

    def __init__(
        self,
        *,
        scope: MemoryScope = "shared",
        depth: int = 0,
        entries: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.scope: MemoryScope = scope
        self.depth = depth
        self._entries: Dict[str, MemoryEntry] = {}
        if entries:
            self.seed(entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"WorkingMemory(scope={self.scope!r}, depth={self.depth}, keys={len(self._entries)})"

    def store(self, key: str, value: Any) -> None:
        if not isinstance(key, str) or not key:
            raise ValueError("memory key must be a non-empty string")
        self._entries[key] = MemoryEntry(key=key, value=value, scope=self.scope, depth=self.depth)

    def recall(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            raise MemoryKeyError(f"memory key not found: {key}")
        return entry.value

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        return default if entry is None else entry.value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self) -> List[str]:
        return list(self._entries)

    def entries(self) -> List[MemoryEntry]:
        return list(self._entries.values())

    def seed(self, mapping: Mapping[str, Any]) -> None:
        """Store every item of ``mapping``; used for child memory seeds."""
        for key, value in mapping.items():
            self.store(str(key), value)

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the current key/value pairs."""
        return {key: copy.deepcopy(entry.value) for key, entry in self._entries.items()}

    def clone(self, depth: Optional[int] = None) -> "WorkingMemory":
        """Independent isolated copy.

        Values are deep-copied, so nested structures cannot leak writes
        between the clone and its source.
        """
        twin = WorkingMemory(scope="isolated", depth=self.depth if depth is None else depth)
        for key, entry in self._entries.items():
            twin._entries[key] = MemoryEntry(
                key=key,
                value=copy.deepcopy(entry.value),
                scope=entry.scope,
                depth=entry.depth,
            )
        return twin

    def delta(self, baseline: Mapping[str, Any]) -> Dict[str, Any]:
        """Entries added or changed relative to ``baseline`` (a snapshot)."""
        changed: Dict[str, Any] = {}
        for key, entry in self._entries.items():
            before = baseline.get(key, _MISSING)
            if before is _MISSING or before != entry.value:
                changed[key] = copy.deepcopy(entry.value)
        return changed

    def merge(self, results: Iterable[Any]) -> List[str]:
        """Write sub-agent results back under namespaced keys.

        Must run single-threaded after all branches have rejoined. Each result
        needs ``description``, ``index``, ``status``, ``output`` and
        ``memory_delta`` attributes (``SubAgentResult``).

        Returns:
            The keys written, in result order.
        """
        written: List[str] = []
        for result in results:
            key = merge_key(result.description, result.index)
            status = getattr(result.status, "value", result.status)
            self.store(key, {
                "task": result.description,
                "status": status,
                "output": result.output,
                "memory": copy.deepcopy(result.memory_delta),
            })
            written.append(key)
        if written:
            LOGGER.debug(f"Merged {len(written)} sub-agent result(s) into depth-{self.depth} memory")
        return written
