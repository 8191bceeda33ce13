"""The caller's own profile."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from designhub.api.v1.auth import get_current_user
from designhub.core.database import get_db
from designhub.schemas.auth import CurrentUser, UserOut
from designhub.schemas.catalog import DesignerSoftwareOut
from designhub.schemas.profile import ProfileOut, ProfileUpdate
from designhub.services import identity

router = APIRouter()


def _profile_out(db: Session, user_id: int) -> ProfileOut:
    user, links = identity.get_profile(db, user_id)
    return ProfileOut(
        **UserOut.model_validate(user).model_dump(),
        software=[DesignerSoftwareOut.from_link(link) for link in links],
    )


@router.get("", response_model=ProfileOut)
def get_profile(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ProfileOut:
    """Profile plus linked design software for designers."""
    return _profile_out(db, user.id)


@router.patch("", response_model=ProfileOut)
def update_profile(
    body: ProfileUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ProfileOut:
    """
    Partial update: omitted fields are unchanged, explicit nulls clear the field.
    software_ids replaces a designer's software links.
    """
    changes = body.model_dump(exclude_unset=True)
    software_ids = changes.pop("software_ids", None)
    identity.update_profile(db, user.id, changes, software_ids=software_ids)
    return _profile_out(db, user.id)
