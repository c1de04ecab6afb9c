"""
Guided walkthrough of the error-handling patterns.

Each section writes its lines through an ``emit`` callable, so the CLI can
print them and tests can collect them.

Sections:
    1. Basic error handling        6. Abort and recover
    2. Formatted errors            7. Multiple error checking
    3. Typed error kinds           8. Best practices
    4. Wrapping and unwrapping     9. Error checking patterns
    5. Deferred cleanup
"""

from __future__ import annotations

from typing import Callable, Iterable

from unwind.core.errors import (
    Database,
    Generic,
    NotFound,
    Validation,
    classify,
    new_not_found_error,
)
from unwind.core.logging import LogContext, get_logger
from unwind.core.result import Err, Ok, Result
from unwind.lessons.operations import (
    check_and_return,
    divide,
    find_user,
    get_user_from_db,
    process_file,
    safe_divide,
    sqrt,
    validate_age,
    wrapped_division,
)

logger = get_logger(__name__)

Emit = Callable[[str], None]


def basic_handling(emit: Emit) -> None:
    match divide(10, 2):
        case Ok(value):
            emit(f"10 / 2 = {value} (ok)")
        case Err(error):
            emit(f"error: {error}")

    match divide(10, 0):
        case Ok(value):
            emit(f"result: {value}")
        case Err(error):
            emit(f"10 / 0 = error: {error}")


def formatted_errors(emit: Emit) -> None:
    result = sqrt(-4)
    if result.is_err():
        emit(f"error: {result.error}")


def typed_kinds(emit: Emit) -> None:
    match find_user("999"):
        case Ok(name):
            emit(f"user found: {name}")
        case Err(error):
            match classify(error):
                case NotFound(resource=resource, id=id_):
                    emit(f"not found: {error}")
                    emit(f"  resource: {resource}")
                    emit(f"  id: {id_}")
                case _:
                    emit(f"other error: {error}")

    error = validate_age(-5)
    if error is not None:
        match classify(error):
            case Validation(field=field_name):
                emit(f"validation error: {error}")
                emit(f"  field: {field_name}")
            case _:
                emit(f"other error: {error}")


def wrapping(emit: Emit) -> None:
    result = get_user_from_db("001")
    if result.is_ok():
        return
    error = result.error
    emit(f"wrapped error: {error}")
    match classify(error):
        case Database(operation=operation):
            emit(f"failed operation: {operation}")
            emit(f"original error: {error.unwrap()}")
        case Generic() | NotFound() | Validation():
            emit(f"unexpected kind: {error.tag.value}")


def deferred_cleanup(emit: Emit) -> None:
    result = process_file("data.txt", emit)
    if result.is_err():
        emit(f"error: {result.error}")

    emit("")
    emit("process_file with an error:")
    result = process_file("", emit)
    if result.is_err():
        emit(f"error: {result.error}")


def abort_and_recover(emit: Emit) -> None:
    emit("abort example (recovered):")
    match safe_divide(10, 0):
        case Ok(value):
            emit(f"result: {value}")
        case Err(error):
            emit(f"recovered from abort: {error}")


def multiple_checks(emit: Emit) -> None:
    quotient = divide(100, 5)
    if quotient.is_err():
        emit(f"step 1 error: {quotient.error}")
        return
    root = sqrt(quotient.unwrap())
    if root.is_err():
        emit(f"step 2 error: {root.error}")
        return
    emit(f"chain result: {root.unwrap():f}")


def best_practices(emit: Emit) -> None:
    emit("DO:")
    emit("   - check every returned Result before using its value")
    emit("   - return Err instead of raising for expected failures")
    emit("   - use a specific error kind for context")
    emit("   - wrap errors with context instead of replacing them")
    emit("   - register cleanup with frame.defer()")
    emit("DON'T:")
    emit("   - ignore an Err without a reason")
    emit("   - abort() for errors the caller can handle")
    emit("   - write vague error messages")


def checking_patterns(emit: Emit) -> None:
    # check and handle: fall back to a default
    result = check_and_return(-5).inspect_err(
        lambda err: emit(f"error, using default: {err}")
    )
    emit(f"result: {result.unwrap_or(0)}")

    # check and wrap
    wrapped = wrapped_division(10, 0)
    if wrapped.is_err():
        emit(f"wrapped error: {wrapped.error}")


SECTIONS: dict[int, tuple[str, Callable[[Emit], None]]] = {
    1: ("Basic error handling", basic_handling),
    2: ("Formatted errors", formatted_errors),
    3: ("Typed error kinds", typed_kinds),
    4: ("Wrapping and unwrapping", wrapping),
    5: ("Deferred cleanup", deferred_cleanup),
    6: ("Abort and recover", abort_and_recover),
    7: ("Multiple error checking", multiple_checks),
    8: ("Best practices", best_practices),
    9: ("Error checking patterns", checking_patterns),
}


def run_walkthrough(emit: Emit, sections: Iterable[int] | None = None) -> Result[int]:
    """Run the selected sections (all by default) and return how many ran."""
    selected = sorted(SECTIONS) if sections is None else list(sections)
    for number in selected:
        if number not in SECTIONS:
            return Err(new_not_found_error("Section", str(number)))

    for index, number in enumerate(selected):
        title, section = SECTIONS[number]
        if index:
            emit("")
        emit(f"--- {number}. {title} ---")
        with LogContext(section=number):
            logger.debug("section.start", title=title)
            section(emit)
    return Ok(len(selected))


__all__ = ["SECTIONS", "run_walkthrough"]
