from __future__ import annotations

import logging
import subprocess

import typer

from simctl import version
from simctl.apply.cli import apply
from simctl.generate.cli import app as generate_app

app = typer.Typer(
    help="simctl controls test resources on simulator/kubernetes.",
    no_args_is_help=True,
    add_completion=False,
)
app.add_typer(generate_app, name="generate")
app.command("apply")(apply)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str) -> None:
    name = level.upper()
    if name not in LOG_LEVELS:
        raise typer.BadParameter(f"expected one of {', '.join(LOG_LEVELS)}, got {level!r}", param_hint="--log-level")
    logging.basicConfig(level=getattr(logging, name), format="%(levelname)s: %(message)s")


@app.callback()
def main(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    ),
) -> None:
    configure_logging(log_level)


@app.command("version")
def version_cmd() -> None:
    """Print the version information."""

    for line in version.info():
        typer.echo(line)


@app.command(
    "kubectl",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def kubectl(
    ctx: typer.Context,
    kubectl_cmd: str = typer.Option("kubectl", "--kubectl", help="Kubectl binary to forward to."),
) -> None:
    """Run kubectl with the remaining arguments."""

    try:
        completed = subprocess.run([kubectl_cmd, *ctx.args], check=False)
    except FileNotFoundError:
        typer.echo(f"Failed to kubectl: kubectl executable not found: {kubectl_cmd}", err=True)
        raise typer.Exit(code=2)
    raise typer.Exit(code=completed.returncode)


if __name__ == "__main__":  # pragma: no cover
    app()
