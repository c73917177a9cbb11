"""Tests for the ownership-checked task operations."""
import uuid
from datetime import datetime

import pytest
from sqlalchemy import DateTime
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from taskboard.core.errors import ForbiddenError, InternalError, NotFoundError, UnauthorizedError, ValidationError
from taskboard.models.user import User
from taskboard.models.task import Task, TaskPriority, TaskStatus
from taskboard.services import task_access

from .helpers import make_task


def test_create_sets_owner_from_identity(access, ana):
    task = access.create(ana, {"title": "Buy milk", "status": "todo", "priority": "low"})
    assert task.user_id == ana.id
    assert task.status is TaskStatus.todo
    assert task.priority is TaskPriority.low


def test_create_ignores_owner_in_payload(access, ana, bruno):
    task = access.create(ana, {"title": "Buy milk", "userId": str(bruno.id), "user_id": str(bruno.id)})
    assert task.user_id == ana.id


def test_create_without_identity_persists_nothing(access, session):
    with pytest.raises(UnauthorizedError):
        access.create(None, {"title": "Buy milk"})
    assert session.exec(select(Task)).all() == []


def test_create_without_identity_checks_identity_before_payload(access):
    with pytest.raises(UnauthorizedError):
        access.create(None, {"title": "x"})


def test_create_invalid_payload_carries_field_detail(access, ana, session):
    with pytest.raises(ValidationError) as excinfo:
        access.create(ana, {"title": "ab", "priority": "urgent"})
    assert {v.field for v in excinfo.value.violations} == {"title", "priority"}
    assert session.exec(select(Task)).all() == []


def test_status_and_priority_round_trip(access, ana, session):
    created = access.create(ana, {"title": "Write report", "status": "in-progress", "priority": "high"})
    session.expire_all()
    task = access.read(ana, created.id)
    assert task.status is TaskStatus.in_progress
    assert task.priority is TaskPriority.high


def test_list_is_newest_first(access, tasks, ana):
    make_task(tasks, ana.id, "oldest", created_at=datetime(2030, 1, 1))
    make_task(tasks, ana.id, "newest", created_at=datetime(2030, 1, 3))
    make_task(tasks, ana.id, "middle", created_at=datetime(2030, 1, 2))
    assert [t.title for t in access.list(ana)] == ["newest", "middle", "oldest"]


def test_list_is_idempotent(access, ana):
    for title in ("one", "two", "three"):
        access.create(ana, {"title": title})
    first = [t.id for t in access.list(ana)]
    second = [t.id for t in access.list(ana)]
    assert first == second


def test_list_filters_by_status(access, ana):
    access.create(ana, {"title": "Buy milk"})
    done = access.create(ana, {"title": "Pay rent", "status": "done"})
    assert [t.id for t in access.list(ana, status=TaskStatus.done)] == [done.id]


def test_list_excludes_other_users_tasks(access, ana, bruno):
    access.create(ana, {"title": "Buy milk"})
    assert access.list(bruno) == []


def test_list_without_identity(access):
    with pytest.raises(UnauthorizedError):
        access.list(None)


def test_list_rejects_unknown_status(access, ana):
    with pytest.raises(ValidationError) as excinfo:
        access.list(ana, status="bogus")
    assert [v.field for v in excinfo.value.violations] == ["status"]


def test_list_checks_identity_before_status(access):
    with pytest.raises(UnauthorizedError):
        access.list(None, status="bogus")


def test_list_accepts_status_as_string(access, ana):
    access.create(ana, {"title": "Buy milk"})
    done = access.create(ana, {"title": "Pay rent", "status": "done"})
    assert [t.id for t in access.list(ana, status="done")] == [done.id]
    assert len(access.list(ana, status="")) == 2


def test_read_missing_task(access, ana):
    with pytest.raises(NotFoundError):
        access.read(ana, uuid.uuid4())


def test_read_malformed_id(access, ana):
    with pytest.raises(NotFoundError):
        access.read(ana, "not-a-uuid")


def test_read_accepts_string_id(access, ana):
    task = access.create(ana, {"title": "Buy milk"})
    assert access.read(ana, str(task.id)).id == task.id


def test_read_other_users_task(access, ana, bruno):
    task = access.create(ana, {"title": "Buy milk"})
    with pytest.raises(ForbiddenError):
        access.read(bruno, task.id)


def test_update_applies_supplied_fields(access, ana):
    task = access.create(ana, {"title": "Buy milk", "description": "2 litres"})
    updated = access.update(ana, task.id, {"status": "done", "dueDate": "2030-05-01T08:00:00"})
    assert updated.status is TaskStatus.done
    assert updated.due_date == datetime(2030, 5, 1, 8, 0, 0)
    assert updated.title == "Buy milk"
    assert updated.description == "2 litres"


def test_update_allows_any_status_transition(access, ana):
    task = access.create(ana, {"title": "Buy milk", "status": "done"})
    assert access.update(ana, task.id, {"status": "todo"}).status is TaskStatus.todo
    assert access.update(ana, task.id, {"status": "in-progress"}).status is TaskStatus.in_progress


def test_update_refreshes_updated_at(access, ana, monkeypatch):
    task = access.create(ana, {"title": "Buy milk"})
    created_at = task.created_at
    later = datetime(2099, 1, 1, 12, 0, 0)
    monkeypatch.setattr(task_access, "utcnow", lambda: later)

    updated = access.update(ana, task.id, {"title": "Buy oat milk"})
    assert updated.updated_at == later
    assert updated.created_at == created_at


def test_update_never_changes_owner(access, ana, bruno):
    task = access.create(ana, {"title": "Buy milk"})
    updated = access.update(ana, task.id, {"userId": str(bruno.id), "user_id": str(bruno.id)})
    assert updated.user_id == ana.id


def test_update_invalid_payload_leaves_task_unchanged(access, ana, session):
    task = access.create(ana, {"title": "Buy milk"})
    with pytest.raises(ValidationError):
        access.update(ana, task.id, {"title": "x" * 101})
    session.expire_all()
    assert access.read(ana, task.id).title == "Buy milk"


def test_update_other_users_task(access, ana, bruno, session):
    task = access.create(ana, {"title": "Buy milk"})
    with pytest.raises(ForbiddenError):
        access.update(bruno, task.id, {"title": "Hijacked"})
    session.expire_all()
    assert access.read(ana, task.id).title == "Buy milk"


def test_delete_removes_task(access, ana):
    task = access.create(ana, {"title": "Buy milk"})
    access.delete(ana, task.id)
    with pytest.raises(NotFoundError):
        access.read(ana, task.id)


def test_delete_other_users_task(access, ana, bruno):
    task = access.create(ana, {"title": "Buy milk"})
    with pytest.raises(ForbiddenError):
        access.delete(bruno, task.id)
    assert access.read(ana, task.id).id == task.id


def test_summary_counts_per_status(access, ana, bruno):
    access.create(ana, {"title": "Buy milk"})
    access.create(ana, {"title": "Pay rent", "status": "done"})
    access.create(ana, {"title": "Write report", "status": "in-progress"})
    access.create(ana, {"title": "Call mum", "status": "done"})
    access.create(bruno, {"title": "Not counted"})

    summary = access.summary(ana)
    assert (summary.todo, summary.in_progress, summary.done, summary.total) == (1, 1, 2, 4)


def test_deleting_user_cascades_to_tasks(access, users, ana, session):
    access.create(ana, {"title": "Buy milk"})
    access.create(ana, {"title": "Pay rent"})

    users.delete(users.get(ana.id))
    assert session.exec(select(Task)).all() == []


def test_timestamps_are_plain_datetime_columns():
    for column in (Task.__table__.c.created_at, Task.__table__.c.updated_at, Task.__table__.c.due_date):
        assert type(column.type) is DateTime
    assert type(User.__table__.c.created_at.type) is DateTime


def test_due_date_survives_a_reload_as_naive_utc(access, ana, session):
    task = access.create(ana, {"title": "Buy milk", "dueDate": "2030-03-01T12:00:00+02:00"})

    session.expire_all()
    reloaded = access.read(ana, task.id)

    assert reloaded.due_date == datetime(2030, 3, 1, 10, 0)
    assert reloaded.due_date.tzinfo is None
    assert reloaded.created_at.tzinfo is None


def test_database_failure_becomes_internal_error(access, ana, session, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT INTO tasks", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)

    with pytest.raises(InternalError) as excinfo:
        access.create(ana, {"title": "Buy milk"})

    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert "disk I/O error" not in excinfo.value.message
