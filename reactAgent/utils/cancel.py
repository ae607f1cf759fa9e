from __future__ import annotations

from typing import Optional

from .error_handler import AbortedError


class CancellationToken:
    """Abort flag shared down a task tree.

    A child token reports cancelled as soon as it or any ancestor is cancelled,
    so aborting a top-level task reaches every in-flight sub-agent at its next
    check point.
    """

    def __init__(self, parent: Optional["CancellationToken"] = None) -> None:
        self._parent = parent
        self._cancel_requested = False
        self.reason = ""

    @property
    def cancelled(self) -> bool:
        if self._cancel_requested:
            return True
        return self._parent is not None and self._parent.cancelled

    def request_cancel(self, reason: str = "aborted") -> None:
        self._cancel_requested = True
        self.reason = reason

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise AbortedError(self.reason or "aborted")
