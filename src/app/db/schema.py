"""SQLAlchemy Base, enums, and declarative models."""

import datetime as dt
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    type_annotation_map = {date: Date()}

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


# Enums

class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in progress"
    COMPLETED = "completed"
    AWAITING_CLIENT = "awaiting client"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SlaStatus(str, Enum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_THIS_WEEK = "due_this_week"
    ON_TRACK = "on_track"
    NO_SLA = "no_sla"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    # Store "in progress", not "IN_PROGRESS"
    return [member.value for member in enum_cls]


# MODELS

class Client(Base):
    __tablename__ = "client"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    name: Mapped[str]
    company: Mapped[str]
    origin: Mapped[str]

    tasks: Mapped[List["ClientTask"]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="ClientTask.position",
    )


class ClientTask(Base):
    __tablename__ = "client_task"

    id = mapped_column(
        UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    client_id: Mapped[str] = mapped_column(
        ForeignKey("client.id", ondelete="CASCADE"),
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date)
    description: Mapped[str]
    status: Mapped[TaskStatus] = mapped_column(
        SAEnum(TaskStatus, name="task_status", values_callable=_enum_values),
        default=TaskStatus.PENDING,
        index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        SAEnum(TaskPriority, name="task_priority", values_callable=_enum_values),
        default=TaskPriority.MEDIUM,
        index=True,
    )
    sla_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    position: Mapped[int] = mapped_column(default=0)

    client: Mapped["Client"] = relationship(back_populates="tasks")
