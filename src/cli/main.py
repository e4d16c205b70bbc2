"""espresso-idling CLI.

Thin caller of `RemoteCommandInvoker`: every command builds a proxy from the
settings, runs one operation and renders the result with Rich.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.espresso_proxy import EspressoProxy
from cli import doctor
from cli.ui_components import build_idling_resources_table, print_error
from core.config import AppSettings, load_settings
from core.errors import EspressoClientError
from core.services.idling_resources import RemoteCommandInvoker

T = TypeVar("T")

app = typer.Typer(
    no_args_is_help=True,
    help="Manage Espresso idling resources on a running instrumentation server.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

SessionOption = typer.Option(
    None,
    "--session-id",
    "-s",
    help="Session id to target (defaults to ESPRESSO_IDLING_SESSION_ID).",
)


def configure_logging(level: str) -> None:
    """Route library logging through Rich. Only the CLI installs handlers."""

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False)],
        force=True,
    )


def build_proxy(settings: AppSettings, session_id: str | None = None) -> EspressoProxy:
    return EspressoProxy(settings, session_id=session_id)


def _run(
    session_id: str | None,
    operation: Callable[[RemoteCommandInvoker], Awaitable[T]],
) -> T:
    async def _invoke(settings: AppSettings) -> T:
        async with build_proxy(settings, session_id) as proxy:
            return await operation(RemoteCommandInvoker(proxy))

    try:
        return asyncio.run(_invoke(load_settings()))
    except EspressoClientError as exc:
        print_error(_console, exc)
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    try:
        settings = load_settings()
    except EspressoClientError as exc:
        print_error(_console, exc)
        raise typer.Exit(code=1) from exc
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def register(
    class_names: str = typer.Argument(
        ...,
        help="Comma-separated fully qualified class names, e.g. com.example.MyIdler",
    ),
    session_id: str | None = SessionOption,
) -> None:
    """Register one or more idling resources."""

    _run(session_id, lambda invoker: invoker.register_idling_resources(class_names))
    _console.print(f"[green]Registered:[/green] {class_names}")


@app.command()
def unregister(
    class_names: str = typer.Argument(..., help="Comma-separated fully qualified class names."),
    session_id: str | None = SessionOption,
) -> None:
    """Unregister one or more idling resources."""

    _run(session_id, lambda invoker: invoker.unregister_idling_resources(class_names))
    _console.print(f"[green]Unregistered:[/green] {class_names}")


@app.command(name="list")
def list_resources(
    session_id: str | None = SessionOption,
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON list."),
) -> None:
    """List the currently registered idling resources."""

    names = _run(session_id, lambda invoker: invoker.list_idling_resources())
    if as_json:
        typer.echo(json.dumps(names))
        return
    if not names:
        _console.print("[dim]No idling resources registered.[/dim]")
        return
    _console.print(build_idling_resources_table(names))


@app.command(name="wait-ui")
def wait_ui(session_id: str | None = SessionOption) -> None:
    """Block until the application's UI thread is idle."""

    _run(session_id, lambda invoker: invoker.wait_for_ui_thread())
    _console.print("[green]UI thread is idle.[/green]")


def run() -> None:
    app()
