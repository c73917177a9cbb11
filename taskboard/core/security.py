from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import uuid

import jwt
from passlib.context import CryptContext

from .config import Settings
from ..db.stores import UserStore
from ..models.user import User
from ..schemas.user import MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller of a request."""

    id: uuid.UUID
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class PasswordHasher:
    """Salted bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = 10):
        self.context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self.context.verify(plain_password, hashed_password)


# Session token functions
def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_subject(token: str, settings: Settings) -> Optional[uuid.UUID]:
    """User id carried by ``token``, or None for any invalid token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.exceptions.PyJWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return uuid.UUID(str(subject))
    except ValueError:
        return None


def extract_token(authorization: Optional[str], cookie: Optional[str]) -> Optional[str]:
    # Bearer header wins over the session cookie
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return cookie or None


def resolve_identity(token: Optional[str], users: UserStore, settings: Settings) -> Optional[Identity]:
    """
    Resolve a session token to the caller's identity.

    Absence is a normal outcome: a missing, malformed, expired or forged
    token, or one for a user that no longer exists, yields None.
    """
    if not token:
        return None

    user_id = decode_subject(token, settings)
    if user_id is None:
        logger.debug("Rejected an invalid session token")
        return None

    user = users.get(user_id)
    if user is None:
        return None
    return Identity.from_user(user)


def authenticate_user(users: UserStore, hasher: PasswordHasher, email: str, password: str) -> Optional[User]:
    # Find user by email
    user = users.get_by_email(email)
    if user is None:
        return None

    # Longer passwords are refused at registration, so none can match
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return None

    if not hasher.verify(password, user.password_hash):
        return None

    return user
