"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.catalog_sources import create_catalog_source
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import AuthError, CatalogError
from core.domain.models import Provider

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

TOKEN_ENV_VARS: dict[Provider, str] = {
    Provider.CIVITAI: "COMFY_CATALOG_CIVITAI_API_KEY",
    Provider.HUGGINGFACE: "COMFY_CATALOG_HUGGINGFACE_API_KEY",
    Provider.COMFYUI_REGISTRY: "COMFY_CATALOG_COMFYUI_REGISTRY_API_KEY",
}


def _configured_token(settings: AppSettings, provider: Provider) -> str | None:
    return {
        Provider.CIVITAI: settings.civitai_api_key,
        Provider.HUGGINGFACE: settings.huggingface_api_key,
        Provider.COMFYUI_REGISTRY: settings.comfyui_registry_api_key,
    }[provider]


async def _check_catalog(settings: AppSettings, provider: Provider) -> tuple[str, str]:
    """One-entry search against `provider`; returns (status, details)."""

    source = await create_catalog_source(provider, settings)
    try:
        page = await source.search_entries(None, page=1, limit=1)
    except AuthError as exc:
        return "FAIL", f"Token rejected (HTTP {exc.status})"
    except CatalogError as exc:
        return "FAIL", str(exc)
    finally:
        await source.aclose()
    return "OK", f"{len(page.entries)} entry returned"


@app.command()
def run(
    offline: bool = typer.Option(False, "--offline", help="Skip the connectivity checks."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="comfy-catalog Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("User config", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")

    for provider in Provider:
        if _configured_token(settings, provider):
            table.add_row(f"{provider.label()} token", "OK", "Configured")
        else:
            table.add_row(f"{provider.label()} token", "OPTIONAL", "Anonymous access (lower limits, no gated files)")

    failures = 0
    if not offline:
        for provider in Provider:
            status, detail = asyncio.run(_check_catalog(settings, provider))
            failures += status != "OK"
            table.add_row(f"{provider.label()} API", status, detail)

    _console.print(table)

    if failures:
        _console.print(
            "\n[yellow]Note:[/yellow] Run `comfy-catalog doctor setup-tokens` to store API tokens."
        )


@app.command(name="setup-tokens")
def setup_tokens() -> None:
    """Interactive token setup (stores tokens in the user config .env).

    Leave a prompt empty to keep the current value.
    """

    values: dict[str, str | None] = {}
    for provider, env_var in TOKEN_ENV_VARS.items():
        token = typer.prompt(
            f"{provider.label()} API token",
            default="",
            show_default=False,
            hide_input=True,
        ).strip()
        values[env_var] = token or None

    if not any(values.values()):
        _console.print("[yellow]No tokens entered; nothing saved.[/yellow]")
        return

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved tokens to:[/green] {env_path}")
