"""comfy-catalog CLI (Typer + Rich).

- `search`: one catalog or all of them, rendered as a table.
- `show`: a single normalized entry.
- `doctor`: diagnostics and token setup.

Commands stay thin: fan-out lives in `core.services.catalog_search`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.catalog_sources import create_catalog_source
from adapters.json_exporter import export_entries_json
from cli import doctor
from cli.ui_components import build_entries_table, build_entry_panel, print_banner
from core.config import AppSettings
from core.domain.errors import CatalogError, NotFoundError
from core.domain.models import NormalizedEntry, Provider
from core.services.catalog_search import (
    CatalogSearchResult,
    SearchHooks,
    sanitize_query_for_filename,
    search_catalogs,
)

app = typer.Typer(no_args_is_help=True, help="Search CivitAI, HuggingFace and the ComfyUI Registry.")
app.add_typer(doctor.app, name="doctor")

console = Console()

ALL_PROVIDERS = "all"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and rate-limit waits."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


def _parse_providers(value: str) -> list[Provider]:
    if value.lower() == ALL_PROVIDERS:
        return list(Provider)
    try:
        return [Provider(value.lower())]
    except ValueError:
        choices = ", ".join([ALL_PROVIDERS, *(p.value for p in Provider)])
        raise typer.BadParameter(f"Unknown provider '{value}'. Choose one of: {choices}") from None


async def _run_search(
    providers: list[Provider],
    query: str | None,
    page: int,
    limit: int,
    cursor: str | None = None,
) -> CatalogSearchResult:
    settings = AppSettings()
    sources = [await create_catalog_source(provider, settings) for provider in providers]
    hooks = SearchHooks(warning=lambda message: console.print(f"[yellow]Warning:[/yellow] {message}"))
    try:
        return await search_catalogs(sources, query, page=page, limit=limit, cursor=cursor, hooks=hooks)
    finally:
        await asyncio.gather(*(source.aclose() for source in sources))


async def _run_show(provider: Provider, entry_id: str) -> NormalizedEntry:
    source = await create_catalog_source(provider, AppSettings())
    try:
        return await source.get_entry(entry_id)
    finally:
        await source.aclose()


@app.command()
def search(
    provider: str = typer.Argument(..., help="civitai, huggingface, comfyui_registry or all."),
    query: Optional[str] = typer.Argument(None, help="Free-text query; omit to browse."),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(20, "--limit", min=1, max=100),
    cursor: Optional[str] = typer.Option(
        None,
        "--cursor",
        help="Continue a cursor-paginated search (CivitAI text search).",
    ),
    json_out: Optional[Path] = typer.Option(
        None,
        "--json-out",
        help="Export results to JSON (file or directory).",
    ),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the banner."),
) -> None:
    """Search one catalog (or all of them) and print normalized entries."""

    providers = _parse_providers(provider)
    if not no_banner:
        print_banner(console)

    result = asyncio.run(_run_search(providers, query, page, limit, cursor))
    entries = result.entries
    console.print(build_entries_table(entries, title=f"Results for '{query}'" if query else "Latest entries"))

    for item_provider, catalog_page in result.pages.items():
        if catalog_page.has_more:
            hint = f"--cursor {catalog_page.next_cursor}" if catalog_page.next_cursor else f"--page {page + 1}"
            console.print(f"[dim]{item_provider.label()}: more results available ({hint})[/dim]")

    if json_out is not None:
        output = json_out
        if output.suffix.lower() != ".json":
            output = output / f"{sanitize_query_for_filename(query)}.json"
        export_entries_json(
            entries=entries,
            output_path=output,
            query=query,
            errors={p.value: message for p, message in result.errors.items()},
        )
        console.print(f"[green]Saved JSON:[/green] {output}")

    if result.errors and not result.pages:
        raise typer.Exit(code=1)


@app.command()
def show(
    provider: str = typer.Argument(..., help="civitai, huggingface or comfyui_registry."),
    entry_id: str = typer.Argument(..., help="Model id, repo id or node id."),
) -> None:
    """Fetch and print a single entry."""

    providers = _parse_providers(provider)
    if len(providers) != 1:
        raise typer.BadParameter("`show` needs a single provider")

    try:
        entry = asyncio.run(_run_show(providers[0], entry_id))
    except NotFoundError:
        console.print(f"[red]Not found:[/red] {entry_id} on {providers[0].label()}")
        raise typer.Exit(code=1) from None
    except CatalogError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from None

    console.print(build_entry_panel(entry))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
