"""
Result envelope for fallible operations.

Every fallible operation in unwind returns ``Result[T]``: ``Ok[T]`` on
success, ``Err[T]`` carrying an :class:`~unwind.core.errors.ErrorRecord` on
failure. Callers must look at which one they got before touching the value.
No partial result travels with an error.

The classic ``(value, error)`` pair is available through ``to_pair()`` and
``from_pair()`` for code that prefers to check ``if err is not None``.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions that callers might miss
    - **Functional composition:** map/flat_map chain steps without nested checks
    - **Short-circuit:** Err passes through every combinator untouched
    - **Zero value on failure:** An Err never carries a usable value

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                                │
        │                    (Type Alias)                              │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities           │
        │   (Success)     │   (Failure)     │                         │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Record │ • try_result()          │
        │ • map()         │ • map_err()     │ • collect_results()     │
        │ • flat_map()    │ • or_else()     │ • from_pair()           │
        │ • to_pair()     │ • to_pair()     │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> from unwind.core.errors import new_generic_error
    >>> def halve(x: int) -> Result[int]:
    ...     if x % 2:
    ...         return Err(new_generic_error("odd number"))
    ...     return Ok(x // 2)
    >>> match halve(10):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(error)
    5
    >>> halve(3).to_pair()
    (None, ErrorRecord(GENERIC, 'odd number'))

Guardrails:
    ❌ DON'T: Call unwrap() on a Result you have not checked
    ✅ DO: Match on Ok/Err, or use unwrap_or() for a default

    ❌ DON'T: Raise inside map/flat_map functions
    ✅ DO: Return Err from flat_map if the step can fail

Tags:
    result-pattern, error-handling, functional-programming, unwind-core
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from unwind.core.errors import ErrorRecord, new_generic_error


T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful outcome holding ``value``.

    Examples:
        >>> Ok(5).map(lambda x: x * 2).unwrap()
        10
        >>> Ok(5).to_pair()
        (5, None)
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def unwrap_or_else(self, f: Callable[[ErrorRecord], T]) -> T:
        """Get value or call f with error (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Alias for flat_map."""
        return f(self.value)

    def map_err(self, f: Callable[[ErrorRecord], ErrorRecord]) -> Result[T]:
        """Transform error if Err (no-op for Ok)."""
        return self

    def or_else(self, f: Callable[[ErrorRecord], Result[T]]) -> Result[T]:
        """Return self if Ok, otherwise call f with error."""
        return self

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[ErrorRecord], None]) -> Result[T]:
        """Call f with error for side effects (no-op for Ok)."""
        return self

    def to_pair(self) -> tuple[T, None]:
        """Return the ``(value, None)`` pair form."""
        return self.value, None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed outcome holding an ErrorRecord.

    Err is the failure half of ``Result[T]``. It never carries a value:
    ``to_pair()`` yields ``(None, error)`` and ``unwrap()`` treats the call
    as the caller bug it is by aborting with the record as payload.

    Examples:
        >>> from unwind.core.errors import new_generic_error
        >>> err = Err(new_generic_error("boom"))
        >>> err.map(lambda x: x * 2).unwrap_or(0)
        0
        >>> err.to_pair()
        (None, ErrorRecord(GENERIC, 'boom'))
    """

    error: ErrorRecord

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    @property
    def value(self) -> None:
        return None

    def unwrap(self) -> T:
        """Abort with the error. Use only when you're sure it's Ok."""
        from unwind.core.recovery import abort

        abort(self.error)

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def unwrap_or_else(self, f: Callable[[ErrorRecord], T]) -> T:
        """Call f with error to get value."""
        return f(self.error)

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[ErrorRecord], ErrorRecord]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[ErrorRecord], Result[T]]) -> Result[T]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """No-op for Err."""
        return self

    def inspect_err(self, f: Callable[[ErrorRecord], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_pair(self) -> tuple[None, ErrorRecord]:
        """Return the ``(None, error)`` pair form."""
        return None, self.error

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": False, "error": self.error.to_dict()}

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Ok[T] | Err[T]


# =============================================================================
# RESULT CONSTRUCTORS AND UTILITIES
# =============================================================================


def from_pair(value: T | None, error: ErrorRecord | None) -> Result[T]:
    """
    Build a Result from the ``(value, error)`` pair form.

    An error always wins: the value is dropped when ``error`` is present.

    >>> from_pair(3, None)
    Ok(3)
    """
    if error is not None:
        return Err(error)
    return Ok(value)  # type: ignore[arg-type]


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a function and wrap its outcome in a Result.

    Bridge from exception-raising code (stdlib, third-party) into the Result
    world. An ``Exception`` becomes ``Err`` with a Generic record naming the
    exception type. Aborts are not ``Exception`` subclasses and keep
    propagating.

    >>> try_result(lambda: int("42"))
    Ok(42)
    >>> try_result(lambda: int("x")).error.render()
    "ValueError: invalid literal for int() with base 10: 'x'"
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(new_generic_error(f"{type(e).__name__}: {e}"))


def collect_results(results: list[Result[T]]) -> Result[list[T]]:
    """
    Collect a list of Results into a Result of list (fail-fast).

    Returns the first Err encountered, otherwise Ok with every value in
    order.

    >>> collect_results([Ok(1), Ok(2)])
    Ok([1, 2])
    """
    values: list[T] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


__all__ = [
    "Ok",
    "Err",
    "Result",
    "from_pair",
    "try_result",
    "collect_results",
]
