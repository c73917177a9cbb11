from sqlmodel import SQLModel, Field, Relationship, Column
from pydantic import NaiveDatetime
from sqlalchemy import DateTime, Enum as SAEnum
from typing import Optional
from datetime import datetime, timezone
import uuid
from enum import Enum


def utcnow() -> datetime:
    # Timestamps are stored as naive UTC in plain DATETIME columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in-progress"
    done = "done"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


def _enum_column(enum_cls, name: str, default) -> Column:
    # Persist the enum *values* ("in-progress") and reject anything else
    return Column(
        SAEnum(
            enum_cls,
            name=name,
            values_callable=lambda members: [m.value for m in members],
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
        default=default,
    )


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, ondelete="CASCADE", index=True)
    title: str = Field(nullable=False, max_length=100)
    description: Optional[str] = Field(default=None)
    status: TaskStatus = Field(
        default=TaskStatus.todo,
        sa_column=_enum_column(TaskStatus, "task_status", TaskStatus.todo),
    )
    priority: TaskPriority = Field(
        default=TaskPriority.medium,
        sa_column=_enum_column(TaskPriority, "task_priority", TaskPriority.medium),
    )
    due_date: Optional[NaiveDatetime] = Field(default=None, sa_type=DateTime())

    created_at: NaiveDatetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime())
    updated_at: NaiveDatetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime())

    # Relationship to user
    user: Optional["User"] = Relationship(back_populates="tasks")
