"""Cancellation and deadline signal for store reads"""

import threading
import time
from typing import Optional

from .errors import OperationCancelled


class Context:
    """Carries a cancellation flag and an optional deadline into a read.

    A read checks the context before it touches the store and again once all
    rows are in hand, so a cancelled call never returns a partial result.
    ``cancel()`` is safe to call from another thread.
    """

    def __init__(self, timeout: Optional[float] = None, deadline: Optional[float] = None):
        if timeout is not None:
            deadline = time.monotonic() + timeout
        self.deadline = deadline  # time.monotonic() value
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "Context":
        """A context that is never cancelled and has no deadline"""
        return cls()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one"""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self, operation: str):
        """Raise OperationCancelled if the caller has given up"""
        if self.cancelled:
            raise OperationCancelled(operation, "cancelled")
        if self.expired:
            raise OperationCancelled(operation, "deadline exceeded")
