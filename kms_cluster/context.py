"""Cancellation and deadline propagation for blocking cluster calls."""

from __future__ import annotations

import threading
import time

from .exceptions import DeadlineExceeded, JoinCancelled


class Context:
    """Cancellation flag plus optional deadline shared by a sequence of calls.

    Every network call checks the context before it is sent and bounds its
    timeout by the time remaining, so a cancelled or expired context stops
    the caller at the next request boundary at the latest.
    """

    def __init__(self, timeout: float | None = None):
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left until the deadline, or None if there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the context was cancelled or its deadline passed."""
        if self._cancelled.is_set():
            raise JoinCancelled("Operation cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceeded("Deadline exceeded")

    def timeout(self, default: float) -> float:
        """Per-request timeout: `default`, capped by the remaining deadline."""
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)
