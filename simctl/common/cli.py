from __future__ import annotations

from typing import NoReturn

import typer

EXIT_FAILURE = 2


def fail(command: str, exc: BaseException) -> NoReturn:
    """Report ``exc`` for ``command`` (e.g. ``"generate node"``) and exit."""

    typer.echo(f"Failed to {command}: {exc}", err=True)
    raise typer.Exit(code=EXIT_FAILURE)


__all__ = ["EXIT_FAILURE", "fail"]
