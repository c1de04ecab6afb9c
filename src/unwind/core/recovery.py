"""
Abort signal, call frames and recovery scopes.

Ordinary failures in unwind are returned as ``Err`` values. A small set of
truly unrecoverable conditions use :func:`abort` instead, which raises an
:class:`Abort` carrying an arbitrary payload. The abort unwinds the Python
call stack until it reaches a frame with a recovery scope, or the top of
the process.

A :class:`Frame` owns the pieces that make this safe:

- a :class:`~unwind.core.deferred.DeferredStack` drained exactly once on
  every exit path,
- named output slots ``value`` and ``error``, which deferred actions and the
  recovery step may read and overwrite before the frame returns,
- a ``state`` moving through the transition table below.

State machine::

    RUNNING ──normal exit──▶ RETURNED
       │
       └──abort──▶ ABORTING ──recovery scope──▶ RECOVERED   (returns Err)
                        │
                        └──no recovery scope──▶ PROPAGATING (re-raises)

Examples:
    A recovery scope converts the abort into an Err after cleanup runs:

    >>> from unwind.core.result import Ok
    >>> @recoverable
    ... def safe_div(frame: Frame, a: int, b: int):
    ...     frame.defer(print, "cleanup")
    ...     if b == 0:
    ...         abort("cannot divide by zero")
    ...     return Ok(a // b)
    >>> safe_div(10, 0)
    cleanup
    Err(ErrorRecord(GENERIC, 'abort recovered: cannot divide by zero'))

    The same frame as a context manager:

    >>> with Frame("manual", recover=True) as frame:
    ...     abort("boom")
    >>> frame.result().error.render()
    'abort recovered: boom'

Guardrails:
    ❌ DON'T: abort() for expected failures (bad input, missing rows)
    ✅ DO: Return Err and reserve abort() for broken invariants

    ❌ DON'T: Catch Abort with a bare ``except BaseException``
    ✅ DO: Put a recovery scope at the top of the logical operation

Tags:
    abort, recover, defer, unwinding, state-machine, unwind-core
"""

from __future__ import annotations

import functools
import sys
from enum import Enum
from typing import Any, Callable, NoReturn, TypeVar

from unwind.core.deferred import DeferredStack
from unwind.core.errors import ErrorRecord, new_generic_error
from unwind.core.logging import get_logger
from unwind.core.result import Err, Ok, Result
from unwind.core.settings import UnwindSettings, get_settings

logger = get_logger(__name__)

T = TypeVar("T")


class FrameState(str, Enum):
    """Lifecycle of one call frame."""

    RUNNING = "running"          # Executing the body
    ABORTING = "aborting"        # Abort in flight through this frame
    RECOVERED = "recovered"      # Abort converted into an Err (terminal)
    PROPAGATING = "propagating"  # Abort handed to the caller (terminal)
    RETURNED = "returned"        # Normal exit (terminal)


FRAME_VALID_TRANSITIONS: dict[FrameState, frozenset[FrameState]] = {
    FrameState.RUNNING: frozenset({
        FrameState.RETURNED,
        FrameState.ABORTING,
    }),
    FrameState.ABORTING: frozenset({
        FrameState.RECOVERED,
        FrameState.PROPAGATING,
    }),
    FrameState.RECOVERED: frozenset(),
    FrameState.PROPAGATING: frozenset(),
    FrameState.RETURNED: frozenset(),
}


class InvalidTransitionError(ValueError):
    """Raised when a frame is asked to make an illegal state transition."""

    def __init__(self, current: str, target: str, enum_name: str = "FrameState") -> None:
        self.current = current
        self.target = target
        self.enum_name = enum_name
        super().__init__(f"Invalid {enum_name} transition: {current} → {target}")


def validate_frame_transition(current: FrameState, target: FrameState) -> None:
    """Raise :class:`InvalidTransitionError` if *current → target* is illegal.

    Example:
        >>> validate_frame_transition(FrameState.RUNNING, FrameState.ABORTING)
        >>> validate_frame_transition(FrameState.RETURNED, FrameState.RUNNING)
        Traceback (most recent call last):
        ...
        unwind.core.recovery.InvalidTransitionError: Invalid FrameState transition: returned → running
    """
    allowed = FRAME_VALID_TRANSITIONS.get(current, frozenset())
    if target not in allowed:
        raise InvalidTransitionError(current.value, target.value)


# =============================================================================
# ABORT SIGNAL
# =============================================================================


class Abort(BaseException):
    """
    Fatal control-flow signal carrying an arbitrary payload.

    Derives from BaseException so ``except Exception`` blocks in the frames
    it passes through do not intercept it.
    """

    def __init__(self, payload: Any):
        super().__init__(payload)
        self.payload = payload

    def __str__(self) -> str:
        if isinstance(self.payload, ErrorRecord):
            return self.payload.render()
        return str(self.payload)

    def __repr__(self) -> str:
        return f"Abort({self.payload!r})"


def abort(payload: Any) -> NoReturn:
    """Raise an :class:`Abort` with ``payload``. Never returns."""
    logger.debug("abort.raised", payload=str(payload))
    raise Abort(payload)


def payload_to_error(payload: Any) -> ErrorRecord:
    """Convert an abort payload into an ErrorRecord.

    An ErrorRecord payload is returned unchanged; anything else is wrapped
    in a Generic record.

    >>> payload_to_error("disk on fire").render()
    'abort recovered: disk on fire'
    """
    if isinstance(payload, ErrorRecord):
        return payload
    return new_generic_error(f"abort recovered: {payload}")


# =============================================================================
# FRAMES
# =============================================================================


class Frame:
    """
    One call frame with deferred cleanup and optional recovery.

    Use it through the :func:`deferring` / :func:`recoverable` decorators, or
    directly as a context manager. Inside the ``with`` block (or the
    decorated body) register cleanups with :meth:`defer`.

    On exit:
        - normal: drain, then ``RETURNED``
        - abort, ``recover=True``: ``ABORTING``, convert the payload into
          ``error``, drain, then ``RECOVERED`` and suppress the abort
        - abort, ``recover=False``: ``ABORTING → PROPAGATING``, drain,
          let the abort continue to the caller

    The converted error is stored before draining so deferred actions see
    it in ``frame.error`` (and may replace it). ``pending_abort`` holds the
    payload while an abort is in flight. A cleanup that raises ends the
    frame in ``PROPAGATING`` with its exception as the pending abort.

    Args:
        name: Frame name for logs
        recover: Whether this frame is a recovery scope
        settings: Overrides the process settings (tests, CLI)
    """

    def __init__(
        self,
        name: str,
        *,
        recover: bool = False,
        settings: UnwindSettings | None = None,
    ):
        self.name = name
        self.recover = recover
        self._settings = settings or get_settings()
        self._log_level = self._settings.frame_log_level
        self.state = FrameState.RUNNING
        self.value: Any = None
        self.error: ErrorRecord | None = None
        self.pending_abort: Any = None
        self.deferred = DeferredStack(name, log_level=self._log_level)

    def defer(self, action: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Register a cleanup action on this frame's deferred stack."""
        self.deferred.register(action, *args, **kwargs)

    def result(self) -> Result[Any]:
        """Build a Result from the named output slots."""
        if self.error is not None:
            return Err(self.error)
        return Ok(self.value)

    def store(self, outcome: Result[Any] | None) -> None:
        """Copy a body's returned Result into the named output slots."""
        match outcome:
            case None:
                pass
            case Ok(value):
                self.value, self.error = value, None
            case Err(error):
                self.value, self.error = None, error
            case _:
                raise TypeError(
                    f"Frame '{self.name}' body must return a Result or None, "
                    f"got {type(outcome).__name__}"
                )

    def _transition(self, target: FrameState) -> None:
        validate_frame_transition(self.state, target)
        previous, self.state = self.state, target
        getattr(logger, self._log_level)(
            "frame.transition",
            frame=self.name,
            previous=previous.value,
            state=target.value,
        )

    def _catches(self, exc: BaseException) -> bool:
        if not self.recover:
            return False
        if isinstance(exc, Abort):
            return True
        return self._settings.recover_runtime_errors and isinstance(exc, Exception)

    def __enter__(self) -> Frame:
        getattr(logger, self._log_level)("frame.enter", frame=self.name, recover=self.recover)
        return self

    def _drain_or_propagate(self) -> None:
        # A raising cleanup turns the exit into a propagation of its exception.
        try:
            self.deferred.drain()
        except BaseException as exc:
            if self.state is FrameState.RUNNING:
                self._transition(FrameState.ABORTING)
            self.pending_abort = exc.payload if isinstance(exc, Abort) else exc
            self._transition(FrameState.PROPAGATING)
            raise

    def __exit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> bool:
        if exc is None:
            self._drain_or_propagate()
            self._transition(FrameState.RETURNED)
            return False

        self._transition(FrameState.ABORTING)
        payload = exc.payload if isinstance(exc, Abort) else exc
        self.pending_abort = payload

        if self._catches(exc):
            self.value = None
            self.error = payload_to_error(payload)
            self._drain_or_propagate()
            self._transition(FrameState.RECOVERED)
            logger.info(
                "abort.recovered",
                frame=self.name,
                error=self.error.render() if self.error is not None else None,
            )
            return True

        self._transition(FrameState.PROPAGATING)
        getattr(logger, self._log_level)(
            "abort.propagating", frame=self.name, payload=str(payload)
        )
        self.deferred.drain()
        return False

    def run(self, body: Callable[..., Result[T] | None], *args: Any, **kwargs: Any) -> Result[T]:
        """Execute ``body(self, *args, **kwargs)`` inside this frame."""
        with self:
            self.store(body(self, *args, **kwargs))
        return self.result()


def _frame_decorator(
    func: Callable[..., Any] | None,
    *,
    recover: bool,
    name: str | None,
) -> Any:
    def decorator(fn: Callable[..., Any]) -> Callable[..., Result[Any]]:
        frame_name = name or fn.__name__

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Result[Any]:
            return Frame(frame_name, recover=recover).run(fn, *args, **kwargs)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def deferring(func: Callable[..., Any] | None = None, *, name: str | None = None) -> Any:
    """
    Run the decorated body in a :class:`Frame` without a recovery scope.

    The body receives the frame as its first argument. Aborts drain the
    frame's deferred stack and continue to the caller.

    Usage:
        @deferring
        def process(frame: Frame, path: str) -> Result[int]:
            frame.defer(release, path)
            ...
    """
    return _frame_decorator(func, recover=False, name=name)


def recoverable(func: Callable[..., Any] | None = None, *, name: str | None = None) -> Any:
    """
    Run the decorated body in a :class:`Frame` that is a recovery scope.

    An abort reaching this frame (from the body or any callee) drains the
    deferred stack and comes back as ``Err`` instead of propagating.

    Usage:
        @recoverable(name="import_batch")
        def import_batch(frame: Frame, rows: list[dict]) -> Result[int]:
            ...
    """
    return _frame_decorator(func, recover=True, name=name)


def run_guarded(
    fn: Callable[..., T],
    *args: Any,
    settings: UnwindSettings | None = None,
    **kwargs: Any,
) -> T:
    """
    Outermost frame: an abort escaping ``fn`` terminates the process.

    The payload is logged at critical level, reported on stderr and the
    process exits with ``settings.abort_exit_code``.
    """
    settings = settings or get_settings()
    try:
        return fn(*args, **kwargs)
    except Abort as exc:
        logger.critical("abort.fatal", payload=str(exc), exit_code=settings.abort_exit_code)
        print(f"fatal: abort: {exc}", file=sys.stderr)
        raise SystemExit(settings.abort_exit_code) from exc


__all__ = [
    "FrameState",
    "FRAME_VALID_TRANSITIONS",
    "InvalidTransitionError",
    "validate_frame_transition",
    "Abort",
    "abort",
    "payload_to_error",
    "Frame",
    "deferring",
    "recoverable",
    "run_guarded",
]
