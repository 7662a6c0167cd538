"""JSON export of every client, fetched fresh from the API."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from app.core.errors import ExportError
from app.core.logging import get_logger
from app.models.client import ClientExport
from app.services.client_api import ClientAPI

LOG = get_logger("exporter")

EXPORT_PREFIX = "all_clients"


def export_filename(today: date | None = None) -> str:
    return f"{EXPORT_PREFIX}_{(today or date.today()).isoformat()}.json"


@dataclass(frozen=True)
class ExportDocument:
    filename: str
    content: str
    client_count: int


async def build_export(
    api: ClientAPI, *, today: Callable[[], date] = date.today
) -> ExportDocument:
    """Snapshot all clients as 2-space indented JSON in the import file shape."""
    try:
        clients = await api.get_all_clients()
        payload = [
            ClientExport.model_validate(c.model_dump()).model_dump(mode="json")
            for c in clients
        ]
        content = json.dumps(payload, indent=2, ensure_ascii=False)
    except Exception as e:
        LOG.error("Error exporting data: %s", e)
        raise ExportError(f"Failed to export data: {e}") from e
    return ExportDocument(
        filename=export_filename(today()),
        content=content,
        client_count=len(payload),
    )


async def export_to_directory(
    api: ClientAPI,
    directory: str | Path,
    *,
    today: Callable[[], date] = date.today,
) -> Path:
    """Write the export file; nothing is written unless serialization succeeded."""
    document = await build_export(api, today=today)
    target = Path(directory) / document.filename
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(document.content + "\n", encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Failed to export data: {e}") from e
    LOG.info("Exported %d clients to %s", document.client_count, target)
    return target
