"""
Root Typer application for the smalljob CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="smalljob",
    help="smalljob — single-slot deferred job scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from smalljob import __version__

        typer.echo(f"smalljob {__version__}")
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
) -> None:
    """smalljob CLI — run the server and schedule, inspect or cancel the job."""


# ── Sub-command registration ─────────────────────────────────────────────

from smalljob.cli.config import app as config_app  # noqa: E402
from smalljob.cli.job import app as job_app  # noqa: E402
from smalljob.cli.serve import app as serve_app  # noqa: E402

app.add_typer(serve_app, name="serve", help="Run the API server.")
app.add_typer(job_app, name="job", help="Talk to a running server.")
app.add_typer(config_app, name="config", help="Configuration inspection.")
