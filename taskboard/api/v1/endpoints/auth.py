import logging
from fastapi import APIRouter, Body, Depends, Response, status
from typing import Any

from taskboard.core.config import Settings
from taskboard.core.errors import UnauthorizedError, ValidationError
from taskboard.core.security import Identity, PasswordHasher, authenticate_user, create_access_token
from taskboard.db.stores import UserStore
from taskboard.schemas.user import Token, UserRead
from taskboard.services.registration import Registration
from taskboard.services.validation import Invalid, validate_login
from ...deps import get_hasher, get_registration, get_settings, get_user_store, require_identity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: Any = Body(default=None),
    registration: Registration = Depends(get_registration),
) -> dict:
    registration.register(payload)
    # Nothing about the new account is echoed back
    return {"message": "User registered successfully"}


@router.post("/login", response_model=Token)
def login(
    response: Response,
    payload: Any = Body(default=None),
    users: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
    settings: Settings = Depends(get_settings),
):
    result = validate_login(payload)
    if isinstance(result, Invalid):
        raise ValidationError(result.violations)
    credentials = result.value

    user = authenticate_user(users, hasher, credentials.email, credentials.password)
    if user is None:
        logger.info("Failed login attempt")
        raise UnauthorizedError("Incorrect email or password")

    access_token = create_access_token(data={"sub": str(user.id)}, settings=settings)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    logger.info("User %s logged in", user.id)
    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(settings: Settings = Depends(get_settings)):
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/me", response_model=UserRead)
def get_current_user_profile(identity: Identity = Depends(require_identity)):
    return UserRead(id=identity.id, name=identity.name, email=identity.email, role=identity.role)
