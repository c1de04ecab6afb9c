"""
Fallible example operations.

Small, deterministic functions that show each error-handling pattern the
runtime supports: returned errors, typed kinds, wrapping, deferred cleanup
and abort recovery. The walkthrough and the CLI are built on them.
"""

from __future__ import annotations

import math
from typing import Callable

from unwind.core.errors import (
    ErrorRecord,
    new_database_error,
    new_generic_error,
    new_not_found_error,
    new_validation_error,
    wrap_error,
)
from unwind.core.pipeline import run_pipeline
from unwind.core.recovery import Frame, abort, deferring, recoverable
from unwind.core.result import Err, Ok, Result

USERS: dict[str, str] = {
    "001": "Budi",
    "002": "Ani",
    "003": "Caca",
}

MAX_AGE = 150

DIVIDE_BY_ZERO = "cannot divide by zero"


def _truncating_div(a: int, b: int) -> int:
    # Python's // floors; integer division here truncates toward zero.
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def divide(a: int, b: int) -> Result[int]:
    """Integer division truncated toward zero; Err when ``b`` is zero."""
    if b == 0:
        return Err(new_generic_error(DIVIDE_BY_ZERO))
    return Ok(_truncating_div(a, b))


def sqrt(x: float) -> Result[float]:
    """Square root; Err for negative input (no real root)."""
    if x < 0:
        return Err(new_generic_error(
            f"cannot take the square root of a negative number: {x:f}"
        ))
    return Ok(math.sqrt(x))


def find_user(user_id: str) -> Result[str]:
    """Look up a user name by ID in the in-memory directory."""
    name = USERS.get(user_id)
    if name is None:
        return Err(new_not_found_error("User", user_id))
    return Ok(name)


def validate_age(age: int) -> ErrorRecord | None:
    """Return a Validation error for an impossible age, else None."""
    if age < 0:
        return new_validation_error("age", "age cannot be negative")
    if age > MAX_AGE:
        return new_validation_error("age", f"age is too high (maximum {MAX_AGE})")
    return None


def get_user_from_db(user_id: str) -> Result[str]:
    """Simulated database read that always times out."""
    timeout = new_generic_error("connection timeout")
    return Err(new_database_error("get user by id", timeout))


@recoverable
def safe_divide(frame: Frame, a: int, b: int) -> Result[int]:
    """Division that aborts on a zero divisor and recovers into an Err."""
    if b == 0:
        abort(DIVIDE_BY_ZERO)
    return Ok(_truncating_div(a, b))


@deferring
def process_file(frame: Frame, filename: str, log: Callable[[str], None]) -> Result[None]:
    """
    Simulated file processing with three deferred cleanups.

    The cleanups are logged in reverse registration order on both the
    success path and the empty-filename error path.
    """
    log(f"opening file: {filename}")

    frame.defer(log, "deferred 1: cleanup resource A")
    frame.defer(log, "deferred 2: cleanup resource B")
    frame.defer(log, "deferred 3: close file")

    if filename == "":
        return Err(new_generic_error("filename must not be empty"))

    log("processing file...")
    return Ok(None)


def check_and_return(x: int) -> Result[int]:
    """Double a non-negative number."""
    if x < 0:
        return Err(new_generic_error("x must be positive"))
    return Ok(x * 2)


def math_chain(a: int, b: int) -> Result[float]:
    """``divide(a, b)`` then ``sqrt`` of the quotient, stopping at the first error."""
    return run_pipeline(divide(a, b), sqrt)


def wrapped_division(a: int, b: int) -> Result[int]:
    """Division whose failures carry the context "math operation failed"."""
    return divide(a, b).map_err(lambda err: wrap_error("math operation failed", err))


__all__ = [
    "USERS",
    "MAX_AGE",
    "divide",
    "sqrt",
    "find_user",
    "validate_age",
    "get_user_from_db",
    "safe_divide",
    "process_file",
    "check_and_return",
    "math_chain",
    "wrapped_division",
]
