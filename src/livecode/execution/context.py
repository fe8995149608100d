"""Cancellation contexts combining a deadline with an explicit cancel signal."""

from __future__ import annotations

import enum
import threading
import time


class ContextState(enum.Enum):
    """Why a context is (or is not) done."""

    ACTIVE = "active"
    CANCELED = "canceled"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class ExecutionContext:
    """Cancellation source shared between a caller and a running driver.

    A context is done once its deadline passes, once ``cancel`` is called,
    or once its parent is done. Children never affect their parent.

    Attributes:
        deadline: Monotonic clock value after which the context expires, if any.
    """

    def __init__(
        self,
        *,
        deadline: float | None = None,
        parent: ExecutionContext | None = None,
    ) -> None:
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline
        self._parent = parent
        self._canceled = threading.Event()

    @classmethod
    def background(cls) -> ExecutionContext:
        """Return a context with no deadline that is only done when canceled."""

        return cls()

    def with_timeout(self, timeout_s: float) -> ExecutionContext:
        """Derive a child context that expires after ``timeout_s`` seconds."""

        return ExecutionContext(deadline=time.monotonic() + timeout_s, parent=self)

    def with_cancel(self) -> ExecutionContext:
        """Derive a child context that can be canceled independently."""

        return ExecutionContext(parent=self)

    def cancel(self) -> None:
        """Cancel this context and every context derived from it."""

        self._canceled.set()

    def state(self) -> ContextState:
        """Return the current state; cancellation takes precedence over expiry."""

        if self._canceled.is_set():
            return ContextState.CANCELED
        if self._parent is not None:
            parent_state = self._parent.state()
            if parent_state is not ContextState.ACTIVE:
                return parent_state
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return ContextState.DEADLINE_EXCEEDED
        return ContextState.ACTIVE

    def done(self) -> bool:
        return self.state() is not ContextState.ACTIVE

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""

        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())
