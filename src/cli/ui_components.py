"""Rich components for the CLI.

Kept apart from the commands so tables and panels can be reused by
`search`, `show` and `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import NormalizedEntry


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in non-interactive modes)."""

    title = Text("comfy-catalog", style="bold cyan")
    subtitle = Text("CivitAI • HuggingFace • ComfyUI Registry", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _flag(value: bool | None) -> str:
    if value is None:
        return "-"
    return "yes" if value else "no"


def build_entries_table(entries: list[NormalizedEntry], *, title: str = "Catalog entries") -> Table:
    table = Table(title=title)
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("ID", style="white", no_wrap=True)
    table.add_column("Name", style="bold white")
    table.add_column("Type", style="magenta")
    table.add_column("Base model", style="dim")
    table.add_column("Size", style="green", justify="right")
    table.add_column("Safe", style="yellow")

    for entry in entries:
        table.add_row(
            entry.provider.label(),
            entry.id,
            entry.name,
            entry.type.value,
            entry.base_model or "-",
            entry.formatted_size,
            "yes" if entry.safety.is_safe else "[red]no[/red]",
        )
    return table


def build_entry_panel(entry: NormalizedEntry) -> Panel:
    """Detail panel for a single entry (`show`)."""

    body = Text()
    rows = (
        ("Provider", entry.provider.label()),
        ("Type", entry.type.value),
        ("Author", entry.author or "-"),
        ("Version", entry.version_id or "-"),
        ("Base model", entry.base_model or "-"),
        ("File", entry.file_name or "-"),
        ("Size", entry.formatted_size),
        ("Download", entry.download_url or "-"),
        ("Source", entry.source_url or "-"),
        ("License", entry.license.name or "-"),
        ("Commercial use", _flag(entry.license.commercial_use)),
        ("Credit required", _flag(entry.license.credit_required)),
        ("NSFW", _flag(entry.safety.nsfw)),
        ("Scan passed", _flag(entry.safety.scan_passed)),
        ("Gated", _flag(entry.safety.gated)),
    )
    for label, value in rows:
        body.append(f"{label}: ", style="bold")
        body.append(f"{value}\n")
    if entry.tags:
        body.append("Tags: ", style="bold")
        body.append(", ".join(entry.tags) + "\n")
    if entry.description:
        body.append("\n" + entry.description, style="dim")

    return Panel(body, title=Text(entry.name, style="bold yellow"), border_style="yellow")
