"""JSON export of normalized entries.

JSON keeps search results usable by other tools (deployment manifests,
spreadsheets) without going through the back-office.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.domain.models import NormalizedEntry


def export_entries_json(
    *,
    entries: Sequence[NormalizedEntry],
    output_path: Path,
    query: str | None = None,
    errors: dict[str, str] | None = None,
) -> Path:
    """Write entries as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "query": query,
        "count": len(entries),
        "entries": [entry.model_dump(mode="json") for entry in entries],
        "errors": errors or {},
    }
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
