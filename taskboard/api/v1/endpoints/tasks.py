from fastapi import APIRouter, Depends, Query, Response, status
from typing import Any, List, Optional

from taskboard.core.security import Identity
from taskboard.schemas.task import TaskRead, TaskSummary
from taskboard.services.task_access import TaskAccess
from taskboard.api.deps import get_json_payload, get_task_access, require_identity

router = APIRouter()

# require_identity is resolved before the body or query string is looked at,
# so a caller without a session always gets 401


@router.get("/stats", response_model=TaskSummary)
def get_task_summary(
    identity: Identity = Depends(require_identity),
    access: TaskAccess = Depends(get_task_access),
):
    return access.summary(identity)


@router.get("", response_model=List[TaskRead])
def list_user_tasks(
    identity: Identity = Depends(require_identity),
    access: TaskAccess = Depends(get_task_access),
    status_filter: Optional[str] = Query(default=None, alias="status"),
):
    return access.list(identity, status=status_filter)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    identity: Identity = Depends(require_identity),
    payload: Any = Depends(get_json_payload),
    access: TaskAccess = Depends(get_task_access),
):
    return access.create(identity, payload)


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: str,
    identity: Identity = Depends(require_identity),
    access: TaskAccess = Depends(get_task_access),
):
    return access.read(identity, task_id)


@router.api_route("/{task_id}", methods=["PATCH", "PUT"], response_model=TaskRead)
def update_task(
    task_id: str,
    identity: Identity = Depends(require_identity),
    payload: Any = Depends(get_json_payload),
    access: TaskAccess = Depends(get_task_access),
):
    return access.update(identity, task_id, payload)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    identity: Identity = Depends(require_identity),
    access: TaskAccess = Depends(get_task_access),
):
    access.delete(identity, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
