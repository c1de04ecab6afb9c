"""
Sequential composition of fallible operations.

Each step takes the previous value and returns a Result. The first Err
short-circuits the pipeline: remaining steps are skipped and that Err is
returned to the caller unchanged.

Examples:
    >>> from unwind.core.errors import new_generic_error
    >>> def halve(x: int) -> Result[int]:
    ...     return Ok(x // 2) if x % 2 == 0 else Err(new_generic_error("odd"))
    >>> run_pipeline(Ok(8), halve, halve)
    Ok(2)
    >>> run_pipeline(Ok(6), halve, halve).error.render()
    'odd'

    A named pipeline, with context added to failures of one step:

    >>> chain = Pipeline("quarter").then(halve).then(wrap_step("second halving", halve))
    >>> chain.run(6).error.render()
    'second halving: odd'
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from unwind.core.errors import wrap_error
from unwind.core.logging import get_logger
from unwind.core.result import Err, Ok, Result

logger = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")

Step = Callable[[Any], Result[Any]]


def run_pipeline(initial: Result[Any], *steps: Step) -> Result[Any]:
    """Feed ``initial`` through ``steps`` in order, stopping at the first Err."""
    current = initial
    for step in steps:
        if current.is_err():
            break
        current = step(current.unwrap())
    return current


def wrap_step(context: str, step: Callable[[T], Result[U]]) -> Callable[[T], Result[U]]:
    """Return ``step`` with any Err wrapped in ``context`` (check and wrap)."""

    def wrapped(value: T) -> Result[U]:
        return step(value).map_err(lambda err: wrap_error(context, err))

    wrapped.__name__ = getattr(step, "__name__", "step")
    return wrapped


class Pipeline:
    """
    Named, reusable list of steps.

    Logs one ``pipeline.step`` event per executed step and a
    ``pipeline.short_circuit`` event naming the step that failed.
    """

    def __init__(self, name: str, steps: list[Step] | None = None):
        self.name = name
        self.steps: list[Step] = list(steps or [])

    def then(self, step: Step) -> Pipeline:
        """Append ``step`` and return self for chaining."""
        self.steps.append(step)
        return self

    def __len__(self) -> int:
        return len(self.steps)

    def run(self, initial: Any) -> Result[Any]:
        """Run every step starting from ``initial`` (a plain value or a Result)."""
        current: Result[Any] = initial if isinstance(initial, (Ok, Err)) else Ok(initial)
        if current.is_err():
            logger.info("pipeline.short_circuit", pipeline=self.name, step=None, index=0)
            return current
        for index, step in enumerate(self.steps):
            step_name = getattr(step, "__name__", repr(step))
            current = step(current.unwrap())
            logger.debug("pipeline.step", pipeline=self.name, step=step_name, index=index)
            if current.is_err():
                logger.info(
                    "pipeline.short_circuit",
                    pipeline=self.name,
                    step=step_name,
                    index=index,
                    skipped=len(self.steps) - index - 1,
                    error=current.error.render(),
                )
                break
        return current

    def __repr__(self) -> str:
        return f"Pipeline({self.name!r}, steps={len(self.steps)})"


__all__ = ["Step", "run_pipeline", "wrap_step", "Pipeline"]
