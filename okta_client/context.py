"""Cooperative cancellation for Okta API calls.

A ``Context`` travels with every operation. It is checked before each page of
a paginated listing, before each request is sent, and by authorizers before
they produce a credential. Requests already on the wire are bounded by the
context deadline through the transport timeout but are not aborted.
"""
from __future__ import annotations
import threading
import time
from typing import Optional

from .exceptions import ContextCancelledError


class Context:
    """Cancellation token with an optional deadline.

    Usage:
        ctx = Context(timeout=30)
        users = UserService(client).get_users(ctx=ctx)

        # from another thread
        ctx.cancel()
    """

    def __init__(self, timeout: Optional[float] = None, parent: Optional["Context"] = None):
        """Initialize a context.

        Args:
            timeout: Seconds until the context expires (None = no deadline)
            parent: Context whose cancellation also cancels this one
        """
        self._event = threading.Event()
        self._parent = parent
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout
        if parent is not None and parent._deadline is not None:
            if self._deadline is None or parent._deadline < self._deadline:
                self._deadline = parent._deadline

    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never cancelled on its own."""
        return cls()

    def with_timeout(self, seconds: float) -> "Context":
        """Derive a child context that also expires after ``seconds``."""
        return Context(timeout=seconds, parent=self)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return True
        return self._parent is not None and self._parent.cancelled

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise ContextCancelledError if the context is done."""
        if self.cancelled:
            raise ContextCancelledError("context done")


def ensure_context(ctx: Optional[Context]) -> Context:
    """Return ``ctx`` or a background context when None is given."""
    return ctx if ctx is not None else Context.background()
