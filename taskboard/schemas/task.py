from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlmodel import SQLModel
from typing import ClassVar, Optional, Tuple
from datetime import datetime, timezone
import uuid
from ..models.task import TaskStatus, TaskPriority


class _TaskPayload(BaseModel):
    # Owner fields ("userId", "user_id") are not declared and are dropped
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    due_date: Optional[datetime] = Field(default=None, alias="dueDate")

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date(cls, value):
        # Blank form fields mean "no due date"
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("due_date", mode="after")
    @classmethod
    def due_date_as_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TaskCreate(_TaskPayload):
    title: str = Field(min_length=3, max_length=100)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium


class TaskUpdate(_TaskPayload):
    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    # Only these may be explicitly cleared with null
    NULLABLE: ClassVar[Tuple[str, ...]] = ("description", "due_date")


class TaskRead(SQLModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class TaskSummary(SQLModel):
    todo: int
    in_progress: int
    done: int
    total: int
