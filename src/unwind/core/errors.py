"""
Typed, chainable error values for the unwind runtime.

Provides a closed taxonomy of error kinds carried by immutable
``ErrorRecord`` values, plus the chain model (wrap, unwrap, walk) used to
preserve root causes while adding context at each layer.

Errors here are VALUES, not exceptions. A fallible operation returns an
``Err(ErrorRecord)`` and every caller decides what to do with it. Only the
abort mechanism in :mod:`unwind.core.recovery` uses Python's unwinding.

Manifesto:
    - **Closed taxonomy:** Four kinds, matched exhaustively
    - **Values over exceptions:** Records are frozen dataclasses
    - **Error chaining:** Each layer wraps the previous record as its cause
    - **Stable rendering:** render() is deterministic and never raises

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                      ErrorRecord                             │
        │              (kind, cause: ErrorRecord | None)               │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  Validation        NotFound          Database     Generic    │
        │  (field, message)  (resource, id)    (operation)  (message)  │
        │                                          │                   │
        │                                     wraps cause              │
        │                                                              │
        │  ErrorRecord ──cause──▶ ErrorRecord ──cause──▶ ... ──▶ None  │
        └─────────────────────────────────────────────────────────────┘

Examples:
    Building and rendering a wrapped error:

    >>> timeout = new_generic_error("connection timeout")
    >>> err = new_database_error("get user by id", timeout)
    >>> err.render()
    'database error during get user by id: connection timeout'
    >>> err.unwrap() == timeout
    True

    Classifying with pattern matching:

    >>> match classify(new_not_found_error("User", "999")):
    ...     case NotFound(resource=resource, id=id_):
    ...         print(resource, id_)
    User 999

Guardrails:
    ❌ DON'T: Raise an ErrorRecord or subclass one
    ✅ DO: Return Err(record) and let the caller classify it

    ❌ DON'T: Stringify a cause into the message
    ✅ DO: Pass the cause record so unwrap() and find_kind() still work

Tags:
    error-handling, error-chain, tagged-union, pattern-matching, unwind-core
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, TypeVar


class ErrorTag(str, Enum):
    """
    Discriminator for the closed set of error kinds.

    Used for logging, CLI output and serialization. Code that branches on
    an error should match on the kind dataclass instead of comparing tags.
    """

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    DATABASE = "DATABASE"
    GENERIC = "GENERIC"


@dataclass(frozen=True, slots=True)
class Validation:
    """Input failed a validation rule."""

    field: str
    message: str

    @property
    def tag(self) -> ErrorTag:
        return ErrorTag.VALIDATION


@dataclass(frozen=True, slots=True)
class NotFound:
    """A looked-up resource does not exist."""

    resource: str
    id: str

    @property
    def tag(self) -> ErrorTag:
        return ErrorTag.NOT_FOUND


@dataclass(frozen=True, slots=True)
class Database:
    """
    A storage-layer operation failed.

    The underlying failure lives in the owning record's ``cause`` slot so
    the chain stores it exactly once.
    """

    operation: str

    @property
    def tag(self) -> ErrorTag:
        return ErrorTag.DATABASE


@dataclass(frozen=True, slots=True)
class Generic:
    """Catch-all kind, also used for converted abort payloads."""

    message: str

    @property
    def tag(self) -> ErrorTag:
        return ErrorTag.GENERIC


ErrorKind = Validation | NotFound | Database | Generic

K = TypeVar("K", Validation, NotFound, Database, Generic)


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """
    Immutable classified failure, optionally wrapping a causal predecessor.

    ErrorRecord is what every fallible operation in unwind returns on the
    failure path. The ``kind`` says what went wrong; ``cause`` points at the
    record this one wraps. Because records are frozen and a record can only
    reference records that already exist, the chain is acyclic and its
    depth is bounded by the call depth that built it.

    Rendering formats:
        - Validation: ``validation failed on field '<field>': <message>``
        - NotFound:   ``<resource> with ID '<id>' not found``
        - Database:   ``database error during <operation>: <cause>``
        - Generic:    ``<message>`` or ``<message>: <cause>`` when wrapping

    Examples:
        >>> err = new_validation_error("age", "age cannot be negative")
        >>> str(err)
        "validation failed on field 'age': age cannot be negative"
        >>> err.tag
        <ErrorTag.VALIDATION: 'VALIDATION'>

    Attributes:
        kind: One ErrorKind variant (tag + payload)
        cause: The wrapped record, if any
    """

    kind: ErrorKind
    cause: ErrorRecord | None = None

    @property
    def tag(self) -> ErrorTag:
        return self.kind.tag

    def render(self) -> str:
        """Deterministic human-readable message, including the cause chain."""
        cause_text = self.cause.render() if self.cause is not None else None
        match self.kind:
            case Validation(field=field_name, message=message):
                return f"validation failed on field '{field_name}': {message}"
            case NotFound(resource=resource, id=id_):
                return f"{resource} with ID '{id_}' not found"
            case Database(operation=operation):
                if cause_text is None:
                    return f"database error during {operation}"
                return f"database error during {operation}: {cause_text}"
            case Generic(message=message):
                if cause_text is None:
                    return message
                return f"{message}: {cause_text}"
            case _:
                # Unreachable for well-typed records; keeps render() total.
                return repr(self.kind)

    def unwrap(self) -> ErrorRecord | None:
        """Return the wrapped record, or None at the end of the chain."""
        return self.cause

    def chain(self) -> Iterator[ErrorRecord]:
        """Yield this record and then each cause in turn."""
        current: ErrorRecord | None = self
        while current is not None:
            yield current
            current = current.cause

    def root_cause(self) -> ErrorRecord:
        """Return the innermost record of the chain."""
        last = self
        for last in self.chain():
            pass
        return last

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging."""
        result: dict[str, Any] = {
            "tag": self.tag.value,
            "message": self.render(),
        }
        result.update(describe(self, include_message=False))
        if self.cause is not None:
            result["cause"] = self.cause.to_dict()
        return result

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ErrorRecord({self.tag.value}, {self.render()!r})"


# =============================================================================
# CONSTRUCTORS
# =============================================================================


def new_validation_error(field: str, message: str) -> ErrorRecord:
    """Create a Validation record for ``field``."""
    return ErrorRecord(Validation(field=field, message=message))


def new_not_found_error(resource: str, id: str) -> ErrorRecord:
    """Create a NotFound record for ``resource`` with identifier ``id``."""
    return ErrorRecord(NotFound(resource=resource, id=id))


def new_database_error(operation: str, cause: ErrorRecord) -> ErrorRecord:
    """Create a Database record that wraps the storage-layer ``cause``."""
    return ErrorRecord(Database(operation=operation), cause=cause)


def new_generic_error(message: str) -> ErrorRecord:
    """Create a Generic record."""
    return ErrorRecord(Generic(message=message))


def wrap_error(context: str, err: ErrorRecord) -> ErrorRecord:
    """
    Add context to ``err`` while keeping it reachable through unwrap().

    >>> wrap_error("math operation failed", new_generic_error("cannot divide by zero")).render()
    'math operation failed: cannot divide by zero'
    """
    return ErrorRecord(Generic(message=context), cause=err)


# =============================================================================
# CLASSIFICATION
# =============================================================================


def classify(err: ErrorRecord) -> ErrorKind:
    """
    Expose the kind of ``err`` for structural pattern matching.

    Callers match on the returned variant. End the match with a default
    branch calling ``typing.assert_never`` so type checkers flag any
    variant left unhandled::

        match classify(err):
            case Validation(field=f):
                ...
            case NotFound(resource=r, id=i):
                ...
            case Database(operation=op):
                ...
            case Generic(message=m):
                ...
            case unreachable:
                assert_never(unreachable)
    """
    return err.kind


def find_kind(err: ErrorRecord | None, variant: type[K]) -> K | None:
    """Return the first kind in the chain that is a ``variant``, else None."""
    if err is None:
        return None
    for record in err.chain():
        if isinstance(record.kind, variant):
            return record.kind
    return None


def has_kind(err: ErrorRecord | None, variant: type[ErrorKind]) -> bool:
    """Check whether any record in the chain has a kind of type ``variant``."""
    return find_kind(err, variant) is not None


def contains(err: ErrorRecord | None, target: ErrorRecord) -> bool:
    """Check whether ``target`` appears anywhere in the chain of ``err``."""
    if err is None:
        return False
    return any(record == target for record in err.chain())


def describe(err: ErrorRecord, *, include_message: bool = True) -> dict[str, str]:
    """
    Flatten the payload of ``err`` into display fields.

    Runtime dispatch over the closed variant set, used by the walkthrough
    and CLI. Unknown kinds fall back to the rendered message.
    """
    fields: dict[str, str]
    kind = err.kind
    match kind:
        case Validation():
            fields = {"field": kind.field, "detail": kind.message}
        case NotFound():
            fields = {"resource": kind.resource, "id": kind.id}
        case Database():
            fields = {"operation": kind.operation}
            if err.cause is not None:
                fields["original"] = err.cause.render()
        case _:
            fields = {}
    if include_message:
        fields = {"error": err.render(), **fields}
    return fields


__all__ = [
    "ErrorTag",
    "Validation",
    "NotFound",
    "Database",
    "Generic",
    "ErrorKind",
    "ErrorRecord",
    # Constructors
    "new_validation_error",
    "new_not_found_error",
    "new_database_error",
    "new_generic_error",
    "wrap_error",
    # Classification
    "classify",
    "find_kind",
    "has_kind",
    "contains",
    "describe",
]
