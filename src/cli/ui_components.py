"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets tables/panels be reused across commands.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.errors import RemoteInvocationError


def build_idling_resources_table(class_names: list[str]) -> Table:
    """Table of registered idling resources, in server order."""

    table = Table(title="Idling Resources")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Class", style="cyan")
    for index, name in enumerate(class_names, start=1):
        table.add_row(str(index), name)
    return table


def print_error(console: Console, exc: Exception) -> None:
    """Print a failed command, keeping the server's message as is."""

    text = Text("Error: ", style="bold red")
    text.append(str(exc))
    if isinstance(exc, RemoteInvocationError) and exc.error:
        text.append(f" ({exc.error})", style="dim")
    console.print(text)
