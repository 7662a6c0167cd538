"""Bulk JSON import of clients with their tasks.

Records are processed one at a time, in document order: validate, look up the
id, normalize tasks, create. A bad record is reported and the loop moves on;
nothing already created is rolled back.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import ClientNotFoundError, ClientValidationError, ImportFormatError
from app.core.logging import get_logger
from app.db.schema import TaskPriority, TaskStatus
from app.models.client import ClientCreate
from app.models.report import ImportReport
from app.models.task import ClientTaskCreate
from app.services.client_api import ClientAPI
from app.services.clients import generate_client_id
from app.services.sla import default_sla_date

LOG = get_logger("importer")

REQUIRED_CLIENT_FIELDS = ("name", "company", "origin")
REQUIRED_TASK_FIELDS = ("description", "date", "status", "priority")
VALID_STATUSES = {s.value for s in TaskStatus}
VALID_PRIORITIES = {p.value for p in TaskPriority}
DEFAULT_TASK_DESCRIPTION = "Initial task"
NO_CHANGES_MESSAGE = "Import completed with no changes."

RefreshCallback = Callable[[], Awaitable[None]]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return not value


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            if err["loc"] else err["msg"]
            for err in exc.errors()
        )
    return str(exc).strip() or type(exc).__name__


def _sample(entries: list[str], limit: int) -> str:
    lines = "\n".join(entries[:limit])
    if len(entries) > limit:
        lines += f"\n... and {len(entries) - limit} more"
    return lines


@dataclass
class ImportOutcome:
    """Per-record results of one import run."""

    succeeded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def summary(self, sample_size: int | None = None) -> str:
        limit = settings.import_report_sample_size if sample_size is None else sample_size
        sections: list[str] = []
        if self.succeeded:
            sections.append(f"Successfully imported {len(self.succeeded)} clients!")
        if self.skipped:
            sections.append(
                f"Skipped {len(self.skipped)} existing clients:\n"
                + _sample(self.skipped, limit)
            )
        if self.failed:
            sections.append(
                f"{len(self.failed)} failed to import:\n" + _sample(self.failed, limit)
            )
        return "\n\n".join(sections) or NO_CHANGES_MESSAGE

    def to_report(self, sample_size: int | None = None) -> ImportReport:
        limit = settings.import_report_sample_size if sample_size is None else sample_size
        return ImportReport(
            succeeded=len(self.succeeded),
            skipped=len(self.skipped),
            failed=len(self.failed),
            skipped_samples=self.skipped[:limit],
            failed_samples=self.failed[:limit],
            message=self.summary(limit),
        )


class ClientImporter:
    """Imports client records through a ClientAPI."""

    def __init__(
        self,
        api: ClientAPI,
        *,
        refresh: RefreshCallback | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._api = api
        self._refresh = refresh
        self._today = today

    @staticmethod
    def parse_document(document: str | bytes) -> list[Any]:
        """Decode the uploaded file; the top level must be a JSON array."""
        try:
            data = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ImportFormatError(f"Invalid JSON: {e}") from e
        if not isinstance(data, list):
            raise ImportFormatError(
                "Invalid JSON format. Expected an array of clients."
            )
        return data

    async def import_json(self, document: str | bytes) -> ImportOutcome:
        return await self.import_records(self.parse_document(document))

    async def import_records(self, records: list[Any]) -> ImportOutcome:
        if not isinstance(records, list):
            raise ImportFormatError(
                "Invalid JSON format. Expected an array of clients."
            )
        LOG.info("Starting import of %d clients...", len(records))
        outcome = ImportOutcome()
        for record in records:
            await self._import_one(record, outcome)

        if self._refresh is not None:
            await self._refresh()

        LOG.info(
            "Import finished: %d imported, %d skipped, %d failed",
            len(outcome.succeeded),
            len(outcome.skipped),
            len(outcome.failed),
        )
        return outcome

    async def _import_one(self, record: Any, outcome: ImportOutcome) -> None:
        data = record if isinstance(record, dict) else {}
        label = str(data.get("name") or data.get("id") or "Unknown")
        try:
            client = self._validate_client(data)

            try:
                await self._api.get_client(client.id)
            except ClientNotFoundError:
                pass
            else:
                outcome.skipped.append(f"{client.name} ({client.id}) - already exists")
                LOG.info("Skipping existing client %s", client.id)
                return

            tasks = self._normalize_tasks(data.get("tasks"), client.name)
            LOG.info("Importing client: %s with %d tasks", client.name, len(tasks))
            await self._api.create_client_with_tasks(client, tasks)
        except Exception as e:
            message = f"{label}: {_error_message(e)}"
            outcome.failed.append(message)
            LOG.error("Failed to import client %s: %s", label, _error_message(e))
            return

        outcome.succeeded.append(client.id)
        LOG.info("Successfully imported: %s", client.name)

    def _validate_client(self, data: dict[str, Any]) -> ClientCreate:
        if any(_is_blank(data.get(f)) for f in REQUIRED_CLIENT_FIELDS):
            label = data.get("name") or data.get("id") or "Unknown"
            raise ClientValidationError(
                "Missing required fields (name, company, origin) "
                f"for client: {label}"
            )
        client_id = data.get("id")
        if _is_blank(client_id):
            client_id = generate_client_id()
        return ClientCreate(
            id=str(client_id),
            name=str(data["name"]),
            company=str(data["company"]),
            origin=str(data["origin"]),
        )

    def _normalize_tasks(self, raw_tasks: Any, client_name: str) -> list[ClientTaskCreate]:
        tasks = raw_tasks if isinstance(raw_tasks, list) else []
        valid: list[ClientTaskCreate] = []
        for index, task in enumerate(tasks, start=1):
            if not isinstance(task, dict) or any(
                _is_blank(task.get(f)) for f in REQUIRED_TASK_FIELDS
            ):
                LOG.warning(
                    "Skipping invalid task %d for client %s: %r", index, client_name, task
                )
                continue

            status = task["status"]
            if not isinstance(status, str) or status not in VALID_STATUSES:
                LOG.warning('Invalid status "%s" for task, setting to "pending"', status)
                status = TaskStatus.PENDING
            priority = task["priority"]
            if not isinstance(priority, str) or priority not in VALID_PRIORITIES:
                LOG.warning('Invalid priority "%s" for task, setting to "medium"', priority)
                priority = TaskPriority.MEDIUM

            valid.append(
                ClientTaskCreate(
                    date=task["date"],
                    description=task["description"],
                    status=status,
                    priority=priority,
                    sla_date=task.get("sla_date") or None,
                )
            )

        if not valid:
            today = self._today()
            valid.append(
                ClientTaskCreate(
                    date=today.isoformat(),
                    description=DEFAULT_TASK_DESCRIPTION,
                    status=TaskStatus.PENDING,
                    priority=TaskPriority.MEDIUM,
                    sla_date=default_sla_date(today).isoformat(),
                )
            )
        return valid
