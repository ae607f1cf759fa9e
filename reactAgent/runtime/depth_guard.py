"""Recursion depth limiter for nested orchestrators."""

from __future__ import annotations

import logging
from collections import Counter
from contextlib import contextmanager
from typing import Iterator

from reactAgent.utils.error_handler import DepthLimitError

LOGGER = logging.getLogger(__name__)


class DepthGuard:
    """Gates spawning and tracks live depth slots of one task tree.

    A task at depth ``d`` may spawn only while ``d < max_depth``. The depth of
    a task never changes; a spawn acquires one slot for ``d + 1`` and the slot
    is released when the child subtree finishes, whatever the exit path.
    One guard is created per top-level task, so concurrent top-level tasks
    never share counters.
    """

    def __init__(self, max_depth: int) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.max_depth = max_depth
        self._live: Counter = Counter()

    def can_spawn(self, depth: int) -> bool:
        return depth < self.max_depth

    @property
    def in_flight(self) -> int:
        """Number of live child slots across the tree."""
        return sum(self._live.values())

    @property
    def deepest(self) -> int:
        """Deepest depth with a live slot (0 when nothing is spawned)."""
        live = [d for d, n in self._live.items() if n > 0]
        return max(live) if live else 0

    def live_at(self, depth: int) -> int:
        return self._live.get(depth, 0)

    @contextmanager
    def slot(self, depth: int) -> Iterator[int]:
        """Acquire one child slot for a task at ``depth``.

        Yields the child's depth. The check happens before anything is
        counted, so a rejected spawn leaves the guard untouched.

        Raises:
            DepthLimitError: ``depth`` is already at the limit
        """
        if not self.can_spawn(depth):
            LOGGER.info(f"Spawn rejected at depth {depth} (max {self.max_depth})")
            raise DepthLimitError(depth, self.max_depth)

        child_depth = depth + 1
        self._live[child_depth] += 1
        LOGGER.debug(f"Depth slot acquired: {depth} → {child_depth} (in flight: {self.in_flight})")
        try:
            yield child_depth
        finally:
            self._live[child_depth] -= 1
            if self._live[child_depth] <= 0:
                del self._live[child_depth]
            LOGGER.debug(f"Depth slot released: {child_depth} → {depth} (in flight: {self.in_flight})")
