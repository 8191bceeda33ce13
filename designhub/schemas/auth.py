"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from designhub.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN

UserType = Literal["client", "designer"]
Role = Literal["user", "admin"]


class RegisterRequest(BaseModel):
    """New client or designer account. softwareIds only applies to designers."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    user_type: UserType
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    username: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=20)
    software_ids: list[int] | None = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class UserOut(BaseModel):
    """Public view of a user (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    open_id: str
    name: str | None = None
    email: str
    role: Role
    user_type: UserType
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    phone_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_signed_in: datetime | None = None


class CurrentUser(BaseModel):
    """Authenticated caller resolved for a single request."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: Role
    user_type: UserType


class RegisterResponse(BaseModel):
    success: Literal[True] = True
    user: UserOut


class LoginResponse(BaseModel):
    """Session token is also set as an HttpOnly cookie."""

    success: Literal[True] = True
    user: UserOut
    token: str = Field(..., description="Session token; send as Bearer if cookies are unavailable")


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetRequestResponse(BaseModel):
    success: Literal[True] = True
    token: str | None = Field(
        default=None,
        description="Only populated when RESET_TOKEN_IN_RESPONSE is enabled",
    )


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1, max_length=255)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
