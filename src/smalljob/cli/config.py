"""
CLI: ``smalljob config`` — configuration inspection.
"""

from __future__ import annotations

import typer

from smalljob.cli.utils import console, print_dict

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show the resolved configuration."""
    from smalljob.api.settings import SmallJobAPISettings

    settings = SmallJobAPISettings()

    if format == "json":
        console.print_json(settings.model_dump_json())
        return

    if format == "env":
        for key, value in sorted(settings.model_dump().items()):
            console.print(f"SMALLJOB_{key.upper()}={value}", markup=False, highlight=False)
        return

    print_dict(settings.model_dump(), title="smalljob settings")


@app.command("validate")
def validate_config() -> None:
    """Validate configuration (timezone, backend) and exit non-zero on error."""
    from pydantic import ValidationError

    from smalljob.api.settings import SmallJobAPISettings
    from smalljob.core.errors import ConfigError
    from smalljob.core.scheduling import Clock

    try:
        settings = SmallJobAPISettings()
        Clock(settings.timezone)
    except (ValidationError, ConfigError) as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print("[green]Configuration OK[/green]")
