import json
from fastapi import Depends, Request
from sqlmodel import Session
from typing import Any, Optional

from taskboard.core.config import Settings
from taskboard.core.errors import FieldViolation, UnauthorizedError, ValidationError
from taskboard.core.security import Identity, PasswordHasher, extract_token, resolve_identity
from taskboard.db.session import get_session
from taskboard.db.stores import TaskStore, UserStore
from taskboard.services.registration import Registration
from taskboard.services.task_access import TaskAccess


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_user_store(session: Session = Depends(get_session)) -> UserStore:
    return UserStore(session)


def get_task_store(session: Session = Depends(get_session)) -> TaskStore:
    return TaskStore(session)


def get_task_access(tasks: TaskStore = Depends(get_task_store)) -> TaskAccess:
    return TaskAccess(tasks)


def get_registration(
    users: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
) -> Registration:
    return Registration(users, hasher)


def get_identity(
    request: Request,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> Optional[Identity]:
    token = extract_token(
        request.headers.get("Authorization"),
        request.cookies.get(settings.SESSION_COOKIE_NAME),
    )
    return resolve_identity(token, users, settings)


def require_identity(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    if identity is None:
        raise UnauthorizedError()
    return identity


async def get_json_payload(request: Request, identity: Identity = Depends(require_identity)) -> Any:
    """Request body decoded only once the caller is known to be authenticated."""
    body = await request.body()
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError:
        raise ValidationError([FieldViolation("body", "Request body is not valid JSON")])
