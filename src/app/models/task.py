"""Client task API schemas."""

from __future__ import annotations

import datetime as dt
import re
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.db.schema import TaskPriority, TaskStatus

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _iso_date(v: str, field: str) -> str:
    value = v.strip()
    if not ISO_DATE_PATTERN.fullmatch(value):
        raise ValueError(f"{field} must be ISO date (YYYY-MM-DD)")
    try:
        dt.date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{field} is not a valid calendar date") from None
    return value


class ClientTaskCreate(BaseModel):
    """Schema for creating a task (standalone or as part of a client)."""

    date: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    sla_date: Optional[str] = None

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("description must not be empty")
        return v.strip()

    @field_validator("date")
    @classmethod
    def date_iso(cls, v: str) -> str:
        return _iso_date(v, "date")

    @field_validator("sla_date")
    @classmethod
    def sla_date_iso(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return _iso_date(v, "sla_date")


class ClientTaskUpdate(BaseModel):
    """Schema for updating a task (all fields optional)."""

    date: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    sla_date: Optional[str] = None

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("description must not be empty")
        return v.strip()

    @field_validator("date")
    @classmethod
    def date_iso(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _iso_date(v, "date")

    @field_validator("sla_date")
    @classmethod
    def sla_date_iso(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return _iso_date(v, "sla_date")


class TaskExport(BaseModel):
    """Task as written to (and read back from) an export file."""

    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    description: str
    status: TaskStatus
    priority: TaskPriority
    sla_date: Optional[dt.date] = None


class TaskResponse(TaskExport):
    """Schema for task response."""

    id: uuid.UUID
