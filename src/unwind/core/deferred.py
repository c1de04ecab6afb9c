"""
Deferred action stack - frame-scoped LIFO cleanup.

A ``DeferredStack`` collects cleanup actions while a frame runs and executes
them when the frame exits, most recently registered first. Every exit path
drains it: normal return, early return with an error, a recovered abort and
a propagating abort.

Actions are zero-argument callables (or a callable plus arguments bound at
registration time). Closures see the frame's live bindings, so an action
registered early can observe values assigned later, such as a named error
slot rewritten during recovery.

Architecture:
    ::

        register(A) ─┐
        register(B) ─┼──▶ [A, B, C]
        register(C) ─┘         │
                               ▼ drain()
                      C() → B() → A()   then closed

Guardrails:
    ❌ DON'T: Rely on actions after one of them raises
    ✅ DO: Keep cleanup actions small and non-failing

    A raising action stops the drain. Its exception replaces whatever was
    in flight (Python chains the old one as ``__context__``) and the actions
    still queued are abandoned.

Tags:
    defer, cleanup, lifo, context-manager, unwind-core
"""

from __future__ import annotations

import functools
from typing import Any, Callable

from unwind.core.logging import get_logger

logger = get_logger(__name__)

DeferredAction = Callable[[], Any]


class DeferredStackClosedError(RuntimeError):
    """Raised when registering on a stack whose frame has already exited."""

    def __init__(self, owner: str):
        self.owner = owner
        super().__init__(f"Deferred stack for '{owner}' is closed")


class DeferredStack:
    """
    LIFO registry of cleanup actions for one frame.

    Usage:
        with DeferredStack("process_file") as stack:
            stack.register(print, "close file")
            ...
        # actions ran in reverse order here

    Args:
        owner: Name used in log events and errors (usually the frame name)
        log_level: structlog method used for register/drain events
    """

    def __init__(self, owner: str = "frame", *, log_level: str = "debug"):
        self.owner = owner
        self._actions: list[DeferredAction] = []
        self._closed = False
        self._executed = 0
        self._log = getattr(logger, log_level)

    def __len__(self) -> int:
        return len(self._actions)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def executed(self) -> int:
        """Number of actions run so far."""
        return self._executed

    def register(self, action: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Queue ``action`` to run when the frame exits.

        Arguments are evaluated now; the action body runs later.
        """
        if self._closed:
            raise DeferredStackClosedError(self.owner)
        if args or kwargs:
            action = functools.partial(action, *args, **kwargs)
        self._actions.append(action)
        self._log("deferred.register", frame=self.owner, depth=len(self._actions))

    def drain(self) -> int:
        """Run and remove queued actions, last registered first.

        Returns the number of actions that completed in this call. An action
        that raises is counted as abandoned, not run. Calling drain on a
        closed stack runs nothing.
        """
        ran = 0
        current: Callable[[], Any] | None = None
        pending = len(self._actions)
        try:
            while self._actions:
                current = self._actions.pop()
                current()
                current = None
                self._executed += 1
                ran += 1
        finally:
            self._closed = True
            self._log(
                "deferred.drain",
                frame=self.owner,
                ran=ran,
                abandoned=len(self._actions) + (current is not None),
                pending=pending,
            )
            # Actions queued behind a failing one are discarded with the frame.
            self._actions.clear()
        return ran

    def __enter__(self) -> DeferredStack:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.drain()


__all__ = [
    "DeferredAction",
    "DeferredStack",
    "DeferredStackClosedError",
]
