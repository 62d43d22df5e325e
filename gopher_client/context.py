"""Deadline and cancellation carrier passed through long-running calls.

A RunContext is created by the caller (usually once per agent query) and handed
down to tools, the completion poller and LLM calls. Children created with
`with_timeout` inherit the parent's deadline and are cancelled with it until
they are closed; use them as context managers so the parent does not keep
every short-lived child alive.
"""

from __future__ import annotations

import threading
import time
from typing import List, Optional

from .errors import ContextCancelledError, DeadlineExceededError


class RunContext:
    def __init__(
        self, timeout: Optional[float] = None, parent: Optional["RunContext"] = None
    ) -> None:
        self._event = threading.Event()
        self._children: List["RunContext"] = []
        self._lock = threading.Lock()
        deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline: Optional[float] = deadline
        self._parent = parent
        if parent is not None:
            parent._adopt(self)

    @classmethod
    def background(cls) -> "RunContext":
        """A context that is never cancelled and has no deadline."""
        return cls()

    def with_timeout(self, timeout: float) -> "RunContext":
        return RunContext(timeout=timeout, parent=self)

    def _adopt(self, child: "RunContext") -> None:
        with self._lock:
            self._children.append(child)
            cancelled = self._event.is_set()
        if cancelled:
            child.cancel()

    def _release(self, child: "RunContext") -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def close(self) -> None:
        """Detach from the parent. Idempotent."""
        parent, self._parent = self._parent, None
        if parent is not None:
            parent._release(self)

    def __enter__(self) -> "RunContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def cancel(self) -> None:
        self._event.set()
        with self._lock:
            children = list(self._children)
        for child in children:
            child.cancel()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (never negative), or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline."""
        if self.cancelled:
            raise ContextCancelledError()
        if self.expired():
            raise DeadlineExceededError()

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`; return True early if the context is cancelled."""
        return self._event.wait(max(0.0, seconds))


__all__ = ["RunContext"]
