"""Ownership-checked task operations.

Every operation takes the caller's identity explicitly. A task's owner is
set once, at creation, from that identity; owner fields in request
payloads are never read.
"""
import logging
import uuid
from typing import Any, List, Optional, Union

from ..core.errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from ..core.security import Identity
from ..db.stores import TaskStore
from ..models.task import Task, TaskStatus, utcnow
from ..schemas.task import TaskSummary
from .validation import Invalid, validate_status_filter, validate_task_create, validate_task_update

logger = logging.getLogger(__name__)


def _require(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise UnauthorizedError()
    return identity


class TaskAccess:
    def __init__(self, tasks: TaskStore):
        self.tasks = tasks

    def create(self, identity: Optional[Identity], payload: Any) -> Task:
        caller = _require(identity)

        result = validate_task_create(payload)
        if isinstance(result, Invalid):
            raise ValidationError(result.violations)
        data = result.value

        task = Task(
            user_id=caller.id,
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
        )
        return self.tasks.add(task)

    def list(self, identity: Optional[Identity], status: Union[TaskStatus, str, None] = None) -> List[Task]:
        caller = _require(identity)

        result = validate_status_filter(status)
        if isinstance(result, Invalid):
            raise ValidationError(result.violations)
        return self.tasks.list_for_owner(caller.id, status=result.value)

    def read(self, identity: Optional[Identity], task_id: Union[uuid.UUID, str]) -> Task:
        """
        Fetch a task owned by the caller.

        Raises NotFoundError when the task does not exist (or the id is not
        a well-formed id) and ForbiddenError when it belongs to someone
        else; the HTTP layer reports both as 404.
        """
        caller = _require(identity)

        if not isinstance(task_id, uuid.UUID):
            try:
                task_id = uuid.UUID(str(task_id))
            except ValueError:
                raise NotFoundError()

        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError()
        if task.user_id != caller.id:
            logger.warning("User %s denied access to task %s", caller.id, task_id)
            raise ForbiddenError()
        return task

    def update(self, identity: Optional[Identity], task_id: Union[uuid.UUID, str], payload: Any) -> Task:
        task = self.read(identity, task_id)

        result = validate_task_update(payload)
        if isinstance(result, Invalid):
            raise ValidationError(result.violations)

        changes = result.value.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(task, key, value)

        task.updated_at = utcnow()
        return self.tasks.save(task)

    def delete(self, identity: Optional[Identity], task_id: Union[uuid.UUID, str]) -> None:
        task = self.read(identity, task_id)
        self.tasks.delete(task)

    def summary(self, identity: Optional[Identity]) -> TaskSummary:
        caller = _require(identity)
        counts = self.tasks.count_by_status(caller.id)
        return TaskSummary(
            todo=counts[TaskStatus.todo],
            in_progress=counts[TaskStatus.in_progress],
            done=counts[TaskStatus.done],
            total=sum(counts.values()),
        )
