"""
CLI: ``smalljob serve`` — start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from smalljob.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: SMALLJOB_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: SMALLJOB_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default: SMALLJOB_LOG_LEVEL)"),
) -> None:
    """Start the smalljob REST API server.

    Always runs a single worker: the scheduler slot lives in process memory.
    """
    from smalljob.api.deps import get_settings
    from smalljob.core.logging import configure_logging

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    level = (log_level or settings.log_level).upper()

    configure_logging(level=level, json_format=settings.log_json, service="smalljob")

    console.print(
        f"[bold green]Starting smalljob API[/bold green] on {host}:{port} "
        f"(timezone {settings.timezone}, backend {settings.timer_backend})"
    )
    uvicorn.run(
        "smalljob.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1,
        log_level=level.lower(),
    )
