import logging
from typing import Any

from ..core.errors import ConflictError, ValidationError
from ..core.security import PasswordHasher
from ..db.stores import UserStore
from ..models.user import User
from .validation import Invalid, validate_registration

logger = logging.getLogger(__name__)


class Registration:
    """Creates user accounts from ``{name, email, password}`` payloads."""

    def __init__(self, users: UserStore, hasher: PasswordHasher):
        self.users = users
        self.hasher = hasher

    def register(self, payload: Any) -> User:
        result = validate_registration(payload)
        if isinstance(result, Invalid):
            raise ValidationError(result.violations)
        data = result.value

        # Exact-match lookup; the unique constraint in UserStore.add covers races
        if self.users.get_by_email(data.email) is not None:
            raise ConflictError()

        user = self.users.add(
            User(
                name=data.name,
                email=data.email,
                password_hash=self.hasher.hash(data.password),
                role="user",
            )
        )
        logger.info("Registered user %s", user.id)
        return user
