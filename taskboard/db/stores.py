"""Persistence handles for users and tasks.

Both stores wrap an explicitly passed SQLModel ``Session``; nothing here
reaches for a global engine, so tests can hand in any session they like.
Database failures leave this module as ``InternalError`` with the driver
error chained as ``__cause__``.
"""
import logging
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select, func

from ..core.errors import ConflictError, InternalError
from ..models.task import Task, TaskStatus
from ..models.user import User

logger = logging.getLogger(__name__)


@contextmanager
def _guard(session: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        raise InternalError(f"Database error while trying to {action}") from exc


class UserStore:
    """Credential store: lookup by email and insert-if-absent."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: uuid.UUID) -> Optional[User]:
        with _guard(self.session, "load a user"):
            return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email)
        with _guard(self.session, "look up a user by email"):
            return self.session.exec(statement).first()

    def add(self, user: User) -> User:
        """Insert a user; a unique-email violation becomes ``ConflictError``."""
        with _guard(self.session, "create a user"):
            self.session.add(user)
            try:
                self.session.commit()
            except IntegrityError:
                self.session.rollback()
                logger.info("Lost registration race for an existing email")
                raise ConflictError()
            self.session.refresh(user)
        return user

    def delete(self, user: User) -> None:
        with _guard(self.session, "delete a user"):
            self.session.delete(user)
            self.session.commit()


class TaskStore:
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: Task) -> Task:
        with _guard(self.session, "create a task"):
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)
        return task

    def get(self, task_id: uuid.UUID) -> Optional[Task]:
        with _guard(self.session, "load a task"):
            return self.session.get(Task, task_id)

    def list_for_owner(self, owner_id: uuid.UUID, status: Optional[TaskStatus] = None) -> List[Task]:
        """All tasks owned by ``owner_id``, newest first."""
        statement = select(Task).where(Task.user_id == owner_id)
        if status is not None:
            statement = statement.where(Task.status == status)
        statement = statement.order_by(Task.created_at.desc())
        with _guard(self.session, "list tasks"):
            return list(self.session.exec(statement).all())

    def save(self, task: Task) -> Task:
        with _guard(self.session, "update a task"):
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)
        return task

    def delete(self, task: Task) -> None:
        with _guard(self.session, "delete a task"):
            self.session.delete(task)
            self.session.commit()

    def count_by_status(self, owner_id: uuid.UUID) -> Dict[TaskStatus, int]:
        statement = (
            select(Task.status, func.count(Task.id))
            .where(Task.user_id == owner_id)
            .group_by(Task.status)
        )
        counts = {status: 0 for status in TaskStatus}
        with _guard(self.session, "count tasks"):
            rows = self.session.exec(statement).all()
        for status, count in rows:
            counts[TaskStatus(status)] = count
        return counts
