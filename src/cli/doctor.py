"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.espresso_proxy import EspressoProxy
from cli.ui_components import print_error
from core.config import (
    ENV_PREFIX,
    AppSettings,
    get_user_env_file,
    load_settings,
    write_user_env_vars,
)
from core.errors import EspressoClientError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _load_settings() -> AppSettings:
    try:
        return load_settings()
    except EspressoClientError as exc:
        print_error(_console, exc)
        raise typer.Exit(code=1) from exc


async def _check_server(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with EspressoProxy(settings) as proxy:
            status = await proxy.status()
    except EspressoClientError as exc:
        return False, str(exc)
    if isinstance(status, dict):
        build = status.get("build")
        if isinstance(build, dict) and build.get("version"):
            return True, f"server version {build['version']}"
    return True, "reachable"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = _load_settings()

    table = Table(title="espresso-idling Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Server URL", "OK", settings.server_url)
    if settings.session_id:
        table.add_row("Session", "OK", settings.session_id)
    else:
        table.add_row("Session", "OPTIONAL", "No session id -> commands use session-less paths")
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("User config", "OK" if get_user_env_file().exists() else "MISSING", str(get_user_env_file()))

    ok_server, detail_server = asyncio.run(_check_server(settings))
    table.add_row("Server status", "OK" if ok_server else "FAIL", detail_server)

    _console.print(table)

    if not ok_server:
        _console.print(
            "\n[yellow]Note:[/yellow] Is the Espresso server running and port-forwarded? "
            "Try `adb forward tcp:6791 tcp:6791`."
        )
        raise typer.Exit(code=1)


@app.command(name="configure")
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = _load_settings()

    server_url = typer.prompt("Server URL", default=settings.server_url, show_default=True).strip()
    session_id = typer.prompt(
        "Session id (empty for none)",
        default=settings.session_id or "",
        show_default=False,
    ).strip()

    if not server_url.startswith(("http://", "https://")):
        raise typer.BadParameter("server URL must start with http:// or https://")

    env_path = write_user_env_vars(
        {
            f"{ENV_PREFIX}SERVER_URL": server_url,
            f"{ENV_PREFIX}SESSION_ID": session_id or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
