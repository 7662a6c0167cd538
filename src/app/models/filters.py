"""Filter criteria for the client list."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel

StatusFilter = Literal[
    "all", "active", "pending", "in progress", "completed", "awaiting client"
]
PriorityFilter = Literal["all", "low", "medium", "high"]
SlaFilter = Literal[
    "all", "overdue", "due_today", "due_this_week", "on_track", "no_sla"
]


class ClientFilters(BaseModel):
    """View state for the dashboard list; defaults match every client."""

    search: str = ""
    task_search: str = ""
    status: StatusFilter = "all"
    priority: PriorityFilter = "all"
    sla: SlaFilter = "all"
    date_start: Optional[date] = None
    date_end: Optional[date] = None
