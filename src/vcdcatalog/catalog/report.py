"""Console rendering of catalog results and errors."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .errors import CatalogError, CreatedStatusUnknownError, RemoteCallError
from .models import CatalogResult, SyncOutcome

console = Console()

_OUTCOME_STYLE = {
    SyncOutcome.SUCCESS: ("green", "Ready"),
    SyncOutcome.IN_PROGRESS: ("yellow", "Sync in progress"),
    SyncOutcome.ERROR: ("red", "Sync failed"),
    SyncOutcome.UNKNOWN: ("yellow", "Status unknown"),
}


def render_result(result: CatalogResult, out: Optional[Console] = None) -> None:
    """Print a catalog result as a panel, followed by any warnings."""
    out = out or console

    lines = [
        f"[bold]Host:[/bold] {escape(result.host)}",
        f"[bold]Organization:[/bold] {escape(result.org)}",
        f"[bold]Catalog:[/bold] {escape(result.catalog_name)}",
    ]

    if result.published_url:
        lines.append(f"[bold]Published URL:[/bold] [green]{escape(result.published_url)}[/green]")
        border = "green"
    elif result.outcome is not None:
        style, label = _OUTCOME_STYLE[result.outcome.status]
        status = f"[{style}]{label}[/{style}]"
        if result.outcome.detail:
            status += f" ({escape(result.outcome.detail)})"
        lines.append(f"[bold]Status:[/bold] {status}")
        border = style
    else:
        lines.append("[bold]Status:[/bold] [dim]No status reported[/dim]")
        border = "yellow"

    out.print(Panel("\n".join(lines), title="Catalog", border_style=border))

    for warning in result.warnings:
        out.print(Text(f"Warning: {warning}", style="yellow"))


def render_error(exc: CatalogError, out: Optional[Console] = None) -> None:
    """Print a catalog error with whatever upstream detail it carries."""
    out = out or console

    if isinstance(exc, CreatedStatusUnknownError):
        out.print(f"[yellow]Catalog '{escape(exc.catalog)}' was created but its status is unknown.[/yellow]")
        out.print(Text(str(exc.cause), style="dim"))
        return

    out.print(Text(str(exc).partition("\n")[0], style="red"))
    if isinstance(exc, RemoteCallError) and exc.body:
        out.print(Text(exc.body, style="dim"))
