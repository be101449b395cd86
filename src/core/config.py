"""Core configuration.

- Centralizes environment variables (pydantic-settings) away from the CLI.
- Adapters (HTTP clients, token lookup) read their settings from here.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "comfy-catalog"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "comfy-catalog"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "comfy-catalog"
    return Path.home() / ".config" / "comfy-catalog"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# comfy-catalog user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Every catalog gets its own base URL, optional API token and request
    budget (`*_max_requests` per `*_window_seconds`).
    """

    model_config = SettingsConfigDict(
        env_prefix="COMFY_CATALOG_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the per-user file.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="ComfyUI-Deployment-Builder/1.0",
        min_length=1,
        description="User-Agent sent to every catalog.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Root log level used by the CLI.",
    )

    civitai_base_url: str = Field(
        default="https://civitai.com/api/v1",
        min_length=8,
    )
    civitai_api_key: str | None = Field(
        default=None,
        description="Bearer token for CivitAI (optional).",
    )
    civitai_max_requests: int = Field(default=100, ge=1)
    civitai_window_seconds: float = Field(default=60.0, gt=0)

    huggingface_base_url: str = Field(
        default="https://huggingface.co/api",
        min_length=8,
    )
    huggingface_site_url: str = Field(
        default="https://huggingface.co",
        min_length=8,
        description="Site root used for model cards and resolve/ download links.",
    )
    huggingface_api_key: str | None = Field(
        default=None,
        description="Bearer token for HuggingFace (optional, needed for gated repos).",
    )
    huggingface_max_requests: int = Field(default=1000, ge=1)
    huggingface_window_seconds: float = Field(default=3600.0, gt=0)

    comfyui_registry_base_url: str = Field(
        default="https://api.comfy.org",
        min_length=8,
    )
    comfyui_registry_api_key: str | None = Field(
        default=None,
        description="Bearer token for the ComfyUI Registry (optional).",
    )
    comfyui_registry_max_requests: int = Field(default=60, ge=1)
    comfyui_registry_window_seconds: float = Field(default=60.0, gt=0)
