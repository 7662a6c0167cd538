from __future__ import annotations

from pydantic import BaseModel


class ImportReport(BaseModel):
    """Result of a bulk import; samples are capped for display."""

    succeeded: int
    skipped: int
    failed: int
    skipped_samples: list[str] = []
    failed_samples: list[str] = []
    message: str


class ClientStats(BaseModel):

    total_clients: int
    total_tasks: int
    pending: int
    in_progress: int
    completed: int
