"""Unwind Core -- error values, deferred cleanup and abort recovery.

Architecture::

    Layer 1 -- Error Values
        errors.py          ErrorRecord, the closed ErrorKind taxonomy, chains
        result.py          Result[T] envelope (Ok / Err / from_pair)

    Layer 2 -- Control Flow
        deferred.py        DeferredStack (frame-scoped LIFO cleanup)
        recovery.py        Abort, Frame, recovery scopes, run_guarded
        pipeline.py        Short-circuiting composition of fallible steps

    Layer 3 -- Ambient
        logging.py         structlog configuration and helpers
        settings.py        UnwindSettings (pydantic-settings, UNWIND_*)
"""

from unwind.core.deferred import DeferredStack, DeferredStackClosedError
from unwind.core.errors import (
    Database,
    ErrorKind,
    ErrorRecord,
    ErrorTag,
    Generic,
    NotFound,
    Validation,
    classify,
    contains,
    describe,
    find_kind,
    has_kind,
    new_database_error,
    new_generic_error,
    new_not_found_error,
    new_validation_error,
    wrap_error,
)
from unwind.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from unwind.core.pipeline import Pipeline, run_pipeline, wrap_step
from unwind.core.recovery import (
    Abort,
    Frame,
    FrameState,
    InvalidTransitionError,
    abort,
    deferring,
    payload_to_error,
    recoverable,
    run_guarded,
)
from unwind.core.result import Err, Ok, Result, collect_results, from_pair, try_result
from unwind.core.settings import UnwindSettings, get_settings, reset_settings

__all__ = [
    # errors
    "Database",
    "ErrorKind",
    "ErrorRecord",
    "ErrorTag",
    "Generic",
    "NotFound",
    "Validation",
    "classify",
    "contains",
    "describe",
    "find_kind",
    "has_kind",
    "new_database_error",
    "new_generic_error",
    "new_not_found_error",
    "new_validation_error",
    "wrap_error",
    # result
    "Err",
    "Ok",
    "Result",
    "collect_results",
    "from_pair",
    "try_result",
    # deferred
    "DeferredStack",
    "DeferredStackClosedError",
    # recovery
    "Abort",
    "Frame",
    "FrameState",
    "InvalidTransitionError",
    "abort",
    "deferring",
    "payload_to_error",
    "recoverable",
    "run_guarded",
    # pipeline
    "Pipeline",
    "run_pipeline",
    "wrap_step",
    # logging
    "LogContext",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # settings
    "UnwindSettings",
    "get_settings",
    "reset_settings",
]
