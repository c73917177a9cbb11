"""Per-operation payload validation returning tagged results.

Each ``validate_*`` function returns either ``Valid(value)`` holding a typed
payload, or ``Invalid(violations)`` holding one ``FieldViolation`` per failed
field, so callers can redisplay a form next to the offending inputs.
"""
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Type, TypeVar, Union

import pydantic

from ..core.errors import FieldViolation
from ..models.task import TaskStatus
from ..schemas.task import TaskCreate, TaskUpdate
from ..schemas.user import UserCreate, UserLogin

T = TypeVar("T")
M = TypeVar("M", bound=pydantic.BaseModel)


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    violations: List[FieldViolation]


ValidationResult = Union[Valid[T], Invalid]


def _field_name(loc) -> str:
    name = ".".join(str(part) for part in loc)
    return name or "body"


def _violations(exc: pydantic.ValidationError) -> List[FieldViolation]:
    return [FieldViolation(_field_name(err["loc"]), err["msg"]) for err in exc.errors()]


def _validate(model: Type[M], payload: Any) -> "ValidationResult[M]":
    try:
        return Valid(model.model_validate(payload))
    except pydantic.ValidationError as exc:
        return Invalid(_violations(exc))


def validate_registration(payload: Any) -> "ValidationResult[UserCreate]":
    return _validate(UserCreate, payload)


def validate_login(payload: Any) -> "ValidationResult[UserLogin]":
    return _validate(UserLogin, payload)


def validate_task_create(payload: Any) -> "ValidationResult[TaskCreate]":
    return _validate(TaskCreate, payload)


def validate_task_update(payload: Any) -> "ValidationResult[TaskUpdate]":
    result = _validate(TaskUpdate, payload)
    if isinstance(result, Invalid):
        return result

    update = result.value
    nulls = [
        FieldViolation(name, "Field may not be null")
        for name in sorted(update.model_fields_set)
        if getattr(update, name) is None and name not in TaskUpdate.NULLABLE
    ]
    if nulls:
        return Invalid(nulls)
    return result


def validate_status_filter(value: Any) -> "ValidationResult[Optional[TaskStatus]]":
    if value is None or value == "":
        return Valid(None)
    try:
        return Valid(TaskStatus(value))
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        return Invalid([FieldViolation("status", f"Input should be one of: {allowed}")])
