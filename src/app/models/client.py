"""Client API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.models.task import ClientTaskCreate, TaskExport, TaskResponse

# Path segments routed under /api/clients/ ahead of /{client_id}
RESERVED_CLIENT_IDS = frozenset({"all", "stats", "export"})


def _required_text(v: str, field: str) -> str:
    if not v or not v.strip():
        raise ValueError(f"{field} must not be empty")
    return v.strip()


class ClientCreate(BaseModel):
    """Client stub sent alongside its tasks; id is generated when omitted."""

    id: Optional[str] = None
    name: str
    company: str
    origin: str

    @field_validator("id")
    @classmethod
    def id_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if "/" in v:
            raise ValueError("client id must not contain '/'")
        if v in RESERVED_CLIENT_IDS:
            raise ValueError(f"client id '{v}' is reserved")
        return v

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _required_text(v, "name")

    @field_validator("company")
    @classmethod
    def company_not_empty(cls, v: str) -> str:
        return _required_text(v, "company")

    @field_validator("origin")
    @classmethod
    def origin_not_empty(cls, v: str) -> str:
        return _required_text(v, "origin")


class ClientWithTasksCreate(BaseModel):
    """Body for POST /api/clients."""

    client: ClientCreate
    tasks: list[ClientTaskCreate] = []


class ClientUpdate(BaseModel):
    """Schema for updating a client (all fields optional)."""

    name: Optional[str] = None
    company: Optional[str] = None
    origin: Optional[str] = None

    @field_validator("name", "company", "origin")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class ClientExport(BaseModel):
    """Client in the import/export file shape."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    company: str
    origin: str
    tasks: list[TaskExport] = []

    @field_validator("tasks", mode="before")
    @classmethod
    def coerce_none_to_list(cls, v: Any) -> list:
        if v is None:
            return []
        return v


class ClientResponse(ClientExport):
    """Schema for client response with nested tasks."""

    tasks: list[TaskResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
