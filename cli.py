"""
CLI tool for running and poking the relay.

Provides commands for starting the server, listing its routes and sending
a message through a running relay.
"""

import json
import time
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from starlette.routing import WebSocketRoute
from websockets.exceptions import WebSocketException
from websockets.sync.client import connect

from relay.api.ws.constants import ERROR_ENVELOPE_TYPE
from relay.settings import app_settings
from relay.uvicorn_filters import uvicorn_log_config

# Initialize Typer app with help text
typer_app = typer.Typer(
    name="relay-cli",
    help="WebSocket relay CLI - Run the server and inspect it",
    add_completion=False,
)
console = Console()


@typer_app.command(name="serve")
def serve(
    host: str = typer.Option(app_settings.HOST, help="Bind address"),
    port: int = typer.Option(app_settings.PORT, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """
    Start the HTTP API and WebSocket relay with uvicorn.

    SIGINT/SIGTERM stop accepting connections, close open transports and
    exit.

    Example:
        python cli.py serve --port 3000
    """
    console.print(
        Panel.fit(
            f"[bold cyan]Relay listening on {host}:{port}[/bold cyan]\n"
            f"WebSocket path: [yellow]{app_settings.WS_PATH}[/yellow]",
            border_style="cyan",
        )
    )
    uvicorn.run(
        "relay:application",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=uvicorn_log_config(),
    )


@typer_app.command(name="routes")
def routes():
    """
    Display a table of all HTTP and WebSocket routes.

    Example:
        python cli.py routes
    """
    from relay import application

    table = Table(
        "Kind",
        "Path",
        "Methods",
        "Endpoint",
        title="Relay routes",
        show_lines=True,
    )

    for route in application().routes:
        if isinstance(route, WebSocketRoute):
            table.add_row(
                "[magenta]ws[/magenta]",
                route.path,
                "-",
                f"[yellow]{route.name}[/yellow]",
            )
        else:
            table.add_row(
                "[green]http[/green]",
                route.path,
                ", ".join(sorted(getattr(route, "methods", None) or [])),
                f"[yellow]{route.name}[/yellow]",
            )

    console.print()
    console.print(table)
    console.print()


@typer_app.command(name="send")
def send(
    message_type: str = typer.Argument(..., help="Envelope type"),
    payload: str = typer.Argument("null", help="Envelope payload as JSON"),
    url: Optional[str] = typer.Option(
        None, help="Relay URL, defaults to the local server"
    ),
    wait: float = typer.Option(
        1.0, help="Seconds to wait for an error reply"
    ),
):
    """
    Send one envelope through a running relay.

    Prints the error envelope if the relay rejects the message.

    Example:
        python cli.py send chat '{"text": "hi"}'
    """
    try:
        payload_value = json.loads(payload)
    except ValueError:
        console.print(f"[red]✗ Payload is not valid JSON:[/red] {payload}")
        raise typer.Exit(code=1)

    url = url or f"ws://localhost:{app_settings.PORT}{app_settings.WS_PATH}"
    frame = json.dumps({"type": message_type, "payload": payload_value})

    try:
        with connect(url) as websocket:
            websocket.send(frame)
            error = wait_for_error(websocket, wait)
    except (OSError, WebSocketException) as ex:
        console.print(f"[red]✗ Could not reach relay at {url}:[/red] {ex}")
        raise typer.Exit(code=1)

    if error is None:
        console.print(f"[green]✓ Sent[/green] {frame}")
    else:
        console.print(f"[yellow]Relay rejected the message:[/yellow] {error}")


def wait_for_error(websocket, wait: float) -> Optional[str]:
    """
    Return the first error envelope received within `wait` seconds.

    Broadcasts from other peers arriving meanwhile are skipped.
    """
    deadline = time.monotonic() + wait

    while time.monotonic() < deadline:
        try:
            reply = websocket.recv(
                timeout=max(deadline - time.monotonic(), 0)
            )
        except TimeoutError:
            return None

        try:
            envelope = json.loads(reply)
        except ValueError:
            continue

        if (
            isinstance(envelope, dict)
            and envelope.get("type") == ERROR_ENVELOPE_TYPE
        ):
            return reply

    return None


if __name__ == "__main__":
    typer_app()
