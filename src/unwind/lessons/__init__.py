"""Fallible example operations and the guided walkthrough."""

from unwind.lessons.operations import (
    check_and_return,
    divide,
    find_user,
    get_user_from_db,
    math_chain,
    process_file,
    safe_divide,
    sqrt,
    validate_age,
    wrapped_division,
)
from unwind.lessons.walkthrough import SECTIONS, run_walkthrough

__all__ = [
    "check_and_return",
    "divide",
    "find_user",
    "get_user_from_db",
    "math_chain",
    "process_file",
    "safe_divide",
    "sqrt",
    "validate_age",
    "wrapped_division",
    "SECTIONS",
    "run_walkthrough",
]
