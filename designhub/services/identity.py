"""Registration, credential checks, sessions, password reset and profile updates."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from designhub.core.config import get_settings
from designhub.core.errors import BadRequestError, ConflictError, NotFoundError, UnauthenticatedError
from designhub.core.security import (
    create_session_token,
    generate_open_id,
    generate_reset_token,
    hash_password,
    verify_password,
)
from designhub.models import DesignerSoftware, User
from designhub.models.base import utcnow
from designhub.models.user import ROLE_USER, USER_TYPE_CLIENT, USER_TYPE_DESIGNER
from designhub.services import persistence

logger = logging.getLogger(__name__)

LOGIN_METHOD_LOCAL = "local"

# Profile columns a user may change on their own account.
PROFILE_FIELDS = ("first_name", "last_name", "username", "phone_number")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def display_name(
    user_type: str,
    first_name: str | None,
    last_name: str | None,
    username: str | None,
) -> str | None:
    """Clients are shown by full name, designers by their handle."""
    if user_type == USER_TYPE_CLIENT:
        full = f"{first_name or ''} {last_name or ''}".strip()
        return full or None
    return username or None


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _link_software(db: Session, designer_id: int, software_ids: list[int]) -> None:
    wanted = list(dict.fromkeys(software_ids))
    known = persistence.existing_software_ids(db, wanted)
    unknown = [sid for sid in wanted if sid not in known]
    if unknown:
        raise BadRequestError(f"Unknown design software ids: {unknown}")
    persistence.add_designer_software(db, designer_id, wanted)


def register(
    db: Session,
    email: str,
    password: str,
    user_type: str,
    profile: dict[str, Any] | None = None,
    software_ids: list[int] | None = None,
    role: str = ROLE_USER,
) -> User:
    """
    Create a client or designer account.

    Raises ConflictError if the email is already registered; the check is backed by
    the unique index so a concurrent duplicate also surfaces as a conflict.
    """
    email = normalize_email(email)
    profile = {k: v for k, v in (profile or {}).items() if k in PROFILE_FIELDS}

    if persistence.get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered")

    try:
        user = persistence.create_user(
            db,
            open_id=generate_open_id(),
            email=email,
            password_hash=hash_password(password),
            user_type=user_type,
            role=role,
            login_method=LOGIN_METHOD_LOCAL,
            name=display_name(
                user_type,
                profile.get("first_name"),
                profile.get("last_name"),
                profile.get("username"),
            ),
            **profile,
        )
        if user_type == USER_TYPE_DESIGNER and software_ids:
            _link_software(db, user.id, software_ids)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email already registered") from e
    except BadRequestError:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(
        "User registered",
        extra={"user_id": user.id, "user_type": user.user_type},
    )
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials; raise UnauthenticatedError otherwise."""
    user = persistence.get_user_by_email(db, normalize_email(email))
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"reason": "invalid_credentials"})
        raise UnauthenticatedError("Invalid email or password")
    return user


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    """Verify credentials, stamp last_signed_in and issue a session token."""
    user = authenticate(db, email, password)
    persistence.update_user(db, user, {"last_signed_in": utcnow()})
    db.commit()
    db.refresh(user)
    token = create_session_token(
        user_id=user.id,
        open_id=user.open_id,
        role=user.role,
        user_type=user.user_type,
    )
    logger.info("User logged in", extra={"user_id": user.id})
    return user, token


def request_password_reset(db: Session, email: str) -> str | None:
    """
    Issue a single-use reset token if the account exists.

    Returns the token (for delivery) or None; callers must respond identically in
    both cases so the endpoint does not reveal which emails are registered.
    """
    user = persistence.get_user_by_email(db, normalize_email(email))
    if user is None:
        return None

    settings = get_settings()
    token = generate_reset_token()
    expires_at = datetime.now(UTC) + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    persistence.create_reset_token(db, user_id=user.id, token=token, expires_at=expires_at)
    db.commit()
    logger.info(
        "Password reset requested",
        extra={"user_id": user.id, "expires_at": expires_at.isoformat()},
    )
    return token


def reset_password(db: Session, token: str, new_password: str) -> None:
    """Redeem a reset token exactly once and replace the user's password."""
    row = persistence.get_unused_reset_token(db, token)
    if row is None or _as_utc(row.expires_at) < datetime.now(UTC):
        raise BadRequestError("Invalid or expired token")

    if not persistence.consume_reset_token(db, row.id):
        db.rollback()
        raise BadRequestError("Invalid or expired token")

    user = persistence.get_user_by_id(db, row.user_id)
    if user is None:
        db.rollback()
        raise BadRequestError("Invalid or expired token")
    persistence.update_user(db, user, {"password_hash": hash_password(new_password)})
    db.commit()
    logger.info("Password reset completed", extra={"user_id": user.id})


def get_profile(db: Session, user_id: int) -> tuple[User, list[DesignerSoftware]]:
    user = persistence.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    software: list[DesignerSoftware] = []
    if user.user_type == USER_TYPE_DESIGNER:
        software = persistence.get_designer_software(db, user.id)
    return user, software


def update_profile(
    db: Session,
    user_id: int,
    changes: dict[str, Any],
    software_ids: list[int] | None = None,
) -> User:
    """
    Apply a partial update. Keys absent from changes are left alone; keys present
    with None are cleared. software_ids (designers only) replaces existing links.
    """
    user = persistence.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    values = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
    merged = {field: values.get(field, getattr(user, field)) for field in PROFILE_FIELDS}
    values["name"] = display_name(
        user.user_type,
        merged["first_name"],
        merged["last_name"],
        merged["username"],
    )
    try:
        persistence.update_user(db, user, values)
        if user.user_type == USER_TYPE_DESIGNER and software_ids is not None:
            persistence.remove_designer_software(db, user.id)
            if software_ids:
                _link_software(db, user.id, software_ids)
        db.commit()
    except BadRequestError:
        db.rollback()
        raise
    db.refresh(user)
    return user
