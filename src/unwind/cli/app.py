"""
Root Typer application for the unwind CLI.

Commands run the example operations and print their Result: the value on
success, or the rendered error on stderr with exit code 1.
"""

from __future__ import annotations

import typer
from typer import Typer

from unwind.cli.utils import console, output_result
from unwind.core.logging import bind_context, configure_logging
from unwind.core.recovery import Frame, abort, run_guarded
from unwind.core.result import Err, Ok
from unwind.core.settings import get_settings

app = Typer(
    name="unwind",
    help="unwind: error values, deferred cleanup and abort recovery.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError, version as pkg_version

        try:
            v = pkg_version("unwind-core")
        except PackageNotFoundError:
            from unwind import __version__ as v
        typer.echo(f"unwind {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Override UNWIND_LOG_LEVEL for this run."
    ),
) -> None:
    """unwind CLI: run the error-handling operations and walkthrough."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.json_logs,
        service=settings.service_name,
    )


# ── Operations ───────────────────────────────────────────────────────────

# Lets "-7" reach an argument instead of being parsed as an unknown option.
_NUMERIC_ARGS = {"ignore_unknown_options": True}


@app.command("demo")
def demo(
    section: list[int] | None = typer.Option(
        None, "--section", "-s", help="Run only these sections (repeatable)."
    ),
) -> None:
    """Run the error-handling walkthrough."""
    from unwind.lessons.walkthrough import run_walkthrough

    bind_context(command="demo")
    result = run_walkthrough(console.print, section or None)
    if result.is_err():
        output_result(result)


@app.command("divide", context_settings=_NUMERIC_ARGS)
def divide_cmd(
    a: int = typer.Argument(..., help="Dividend"),
    b: int = typer.Argument(..., help="Divisor"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Integer division (returns an error for a zero divisor)."""
    from unwind.lessons.operations import divide

    output_result(divide(a, b), as_json=json_out)


@app.command("sqrt", context_settings=_NUMERIC_ARGS)
def sqrt_cmd(
    x: float = typer.Argument(..., help="Input value"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Square root (returns an error for negative input)."""
    from unwind.lessons.operations import sqrt

    output_result(sqrt(x), as_json=json_out)


@app.command("find-user")
def find_user_cmd(
    user_id: str = typer.Argument(..., help="User ID, e.g. 001"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Look up a user by ID."""
    from unwind.lessons.operations import find_user

    output_result(find_user(user_id), as_json=json_out)


@app.command("validate-age", context_settings=_NUMERIC_ARGS)
def validate_age_cmd(
    age: int = typer.Argument(..., help="Age to validate"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Validate an age between 0 and 150."""
    from unwind.lessons.operations import validate_age

    error = validate_age(age)
    output_result(Err(error) if error is not None else Ok(age), as_json=json_out)


@app.command("safe-divide", context_settings=_NUMERIC_ARGS)
def safe_divide_cmd(
    a: int = typer.Argument(..., help="Dividend"),
    b: int = typer.Argument(..., help="Divisor"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Division that aborts on zero and recovers into an error."""
    from unwind.lessons.operations import safe_divide

    output_result(safe_divide(a, b), as_json=json_out)


@app.command("chain", context_settings=_NUMERIC_ARGS)
def chain_cmd(
    a: int = typer.Argument(..., help="Dividend"),
    b: int = typer.Argument(..., help="Divisor"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """divide(a, b) followed by sqrt, stopping at the first error."""
    from unwind.lessons.operations import math_chain

    output_result(math_chain(a, b), as_json=json_out)


@app.command("abort")
def abort_cmd(
    message: str = typer.Argument(..., help="Abort payload"),
    recover: bool = typer.Option(
        True, "--recover/--no-recover", help="Catch the abort in a recovery scope."
    ),
) -> None:
    """Raise an abort, either recovered or fatal."""

    def body(frame: Frame) -> None:
        frame.defer(console.print, "deferred cleanup ran")
        abort(message)

    bind_context(command="abort")
    frame = Frame("abort_cmd", recover=recover)
    run_guarded(frame.run, body)
    output_result(frame.result())
