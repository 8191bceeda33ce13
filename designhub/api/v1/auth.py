"""Auth routes and the caller-resolution dependencies (get_current_user, get_optional_user)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from designhub.core.config import get_settings
from designhub.core.database import get_db
from designhub.core.errors import UnauthenticatedError
from designhub.core.security import decode_session_token
from designhub.models.user import User
from designhub.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetRequestResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
)
from designhub.schemas.common import SuccessResponse
from designhub.services import identity, persistence

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _session_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    """Session cookie first, then Authorization: Bearer."""
    cookie = request.cookies.get(get_settings().SESSION_COOKIE_NAME)
    if cookie:
        return cookie
    if credentials is not None:
        return credentials.credentials
    return None


def _resolve_user(db: Session, token: str) -> User:
    try:
        payload = decode_session_token(token)
    except jwt.PyJWTError as e:
        raise UnauthenticatedError("Invalid or expired session") from e
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as e:
        raise UnauthenticatedError("Invalid session payload") from e
    user = persistence.get_user_by_id(db, user_id)
    if user is None or user.open_id != payload.get("uid"):
        raise UnauthenticatedError("User not found")
    return user


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid session and return the caller as currently persisted. 401 otherwise."""
    token = _session_token(request, credentials)
    if not token:
        raise UnauthenticatedError("Not authenticated")
    return CurrentUser.model_validate(_resolve_user(db, token))


def get_optional_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Dependency for public routes: the caller if a valid session is present, else None."""
    token = _session_token(request, credentials)
    if not token:
        return None
    try:
        return _resolve_user(db, token)
    except UnauthenticatedError:
        return None


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        path="/",
    )


@router.get("/me", response_model=UserOut | None)
def me(user: Annotated[User | None, Depends(get_optional_user)]) -> User | None:
    """Current caller, or null when not signed in."""
    return user


@router.post("/logout", response_model=SuccessResponse)
def logout(response: Response) -> SuccessResponse:
    """Clear the session cookie. Always succeeds."""
    settings = get_settings()
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
    )
    return SuccessResponse()


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """Create a client or designer account. 409 if the email is taken."""
    user = identity.register(
        db,
        email=body.email,
        password=body.password,
        user_type=body.user_type,
        profile=body.model_dump(include=set(identity.PROFILE_FIELDS)),
        software_ids=body.software_ids,
    )
    return RegisterResponse(user=UserOut.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password. Sets the session cookie and also returns
    the token; send it as `Authorization: Bearer <token>` where cookies are unavailable.
    """
    user, token = identity.login(db, body.email, body.password)
    _set_session_cookie(response, token)
    return LoginResponse(user=UserOut.model_validate(user), token=token)


@router.post("/password-reset/request", response_model=PasswordResetRequestResponse)
def request_password_reset(
    body: PasswordResetRequest,
    db: Annotated[Session, Depends(get_db)],
) -> PasswordResetRequestResponse:
    """Always succeeds, whether or not the email is registered."""
    token = identity.request_password_reset(db, body.email)
    if get_settings().RESET_TOKEN_IN_RESPONSE:
        return PasswordResetRequestResponse(token=token)
    return PasswordResetRequestResponse()


@router.post("/password-reset/confirm", response_model=SuccessResponse)
def reset_password(
    body: PasswordResetConfirm,
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Redeem a reset token (single use). 400 if the token is unknown, used or expired."""
    identity.reset_password(db, body.token, body.new_password)
    return SuccessResponse()
