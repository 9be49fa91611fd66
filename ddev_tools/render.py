"""Table output for listing and describing applications."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .app import (
    SITE_CONFIG_MISSING,
    SITE_DIR_MISSING,
    SITE_NOT_FOUND,
    SITE_STOPPED,
    LocalApp,
)
from .router import router_status
from .utils import format_plural

MAX_COL_WIDTH = 140


def create_app_table() -> Table:
    """Create a new app table for describe and list output."""
    table = Table(box=None, show_header=True, header_style="bold", pad_edge=False)
    for header in ("NAME", "TYPE", "LOCATION", "URL", "STATUS"):
        table.add_column(header, max_width=MAX_COL_WIDTH, overflow="fold")
    return table


def render_home_rooted_dir(path: str) -> str:
    """Shorten a directory name by replacing the home directory with ~."""
    result = path.replace(str(Path.home()), "~", 1)
    return result.replace("\\", "/")


def status_style(status: str) -> str:
    """Style for a status: yellow when stopped, red when broken, cyan otherwise."""
    if SITE_STOPPED in status:
        return "yellow"
    for problem in (SITE_NOT_FOUND, SITE_DIR_MISSING, SITE_CONFIG_MISSING):
        if problem in status:
            return "red"
    return "cyan"


def colorize_status(status: str) -> Text:
    return Text(status, style=status_style(status))


def render_app_row(table: Table, app: LocalApp) -> None:
    """Add an application row to an existing table."""
    # Text cells so names and paths are never read as console markup
    table.add_row(
        Text(app.name),
        Text(app.app_type),
        Text(render_home_rooted_dir(app.app_root)),
        Text(app.url),
        colorize_status(app.site_status()),
    )


def render_app_table(kind: str, apps: list[LocalApp], console: Optional[Console] = None) -> None:
    """Print a table of apps of one kind, followed by the router status."""
    if not apps:
        return
    console = console or Console()
    console.print(f"{len(apps)} {kind} {format_plural(len(apps), 'site', 'sites')} found.", highlight=False)
    table = create_app_table()
    for app in apps:
        render_app_row(table, app)
    console.print(table)
    console.print()
    console.print(router_status(), highlight=False)


def render_app(app: LocalApp, console: Optional[Console] = None) -> None:
    """Print a single app's row, followed by the router status."""
    console = console or Console()
    table = create_app_table()
    render_app_row(table, app)
    console.print(table)
    console.print()
    console.print(router_status(), highlight=False)
