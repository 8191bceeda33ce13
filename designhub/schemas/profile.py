"""Schemas for the caller's own profile."""

from pydantic import BaseModel, ConfigDict, Field

from designhub.schemas.auth import UserOut
from designhub.schemas.catalog import DesignerSoftwareOut


class ProfileOut(UserOut):
    software: list[DesignerSoftwareOut] = Field(default_factory=list)


class ProfileUpdate(BaseModel):
    """
    Partial profile update.

    Omitted fields are left unchanged; fields sent as null are cleared.
    software_ids replaces the designer's links when present (ignored for clients).
    user_type cannot be changed, so unknown fields are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    username: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=20)
    software_ids: list[int] | None = Field(default=None, max_length=100)
