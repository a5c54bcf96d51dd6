"""
CLI: ``smalljob job`` — drive a running smalljob server over HTTP.

These commands are a terminal stand-in for the browser client: they call
``/small/api/status``, ``/small/api/set`` and ``/small/api/cancel``.
"""

from __future__ import annotations

from typing import Any

import httpx
import typer

from smalljob.cli.utils import console, fail, print_dict, print_json, print_rows

app = typer.Typer(no_args_is_help=True)

_URL_OPTION = typer.Option(
    "http://localhost:8080",
    "--url",
    "-u",
    envvar="SMALLJOB_URL",
    help="Base URL of the smalljob server",
)
_PREFIX_OPTION = typer.Option("/small/api", "--prefix", help="API prefix on the server")


def _request(method: str, url: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
    try:
        response = httpx.request(method, url, json=json, timeout=10.0)
    except httpx.HTTPError as e:
        fail(f"Cannot reach {url}: {e}", code="UNAVAILABLE")
    try:
        body = response.json()
    except ValueError:
        fail(f"Unexpected response from {url}: {response.text[:200]}", code=str(response.status_code))
    if response.is_error:
        fail(body.get("title", response.text), code=str(response.status_code))
    return body


@app.command("status")
def status(
    url: str = _URL_OPTION,
    prefix: str = _PREFIX_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show slot status and recent history."""
    body = _request("GET", f"{url}{prefix}/status")
    if as_json:
        print_json(body)
        return
    history = body.pop("history", [])
    print_dict(body, title="Slot")
    print_rows(history, title="History (newest first)")


@app.command("set")
def set_schedule(
    time: str = typer.Argument(..., help="ISO-8601 time; without offset it is server-local"),
    sleep: int | None = typer.Option(None, "--sleep", "-s", help="Base job pause in seconds"),
    random_sleep: int = typer.Option(0, "--random-sleep", "-r", help="Max random extra pause in seconds"),
    url: str = _URL_OPTION,
    prefix: str = _PREFIX_OPTION,
) -> None:
    """Schedule the job, replacing any pending one."""
    payload: dict[str, Any] = {"time": time, "randomSleep": random_sleep}
    if sleep is not None:
        payload["sleep"] = sleep
    body = _request("POST", f"{url}{prefix}/set", json=payload)
    console.print(
        f"[green]{body['message']}[/green] for {body['scheduledTime']} "
        f"(server time {body['serverTime']}, {body['timezone']})"
    )


@app.command("cancel")
def cancel(
    url: str = _URL_OPTION,
    prefix: str = _PREFIX_OPTION,
) -> None:
    """Cancel the pending job (a running job is not interrupted)."""
    body = _request("POST", f"{url}{prefix}/cancel")
    console.print(body["message"])
