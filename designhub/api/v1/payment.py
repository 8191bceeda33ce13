"""Client payment methods (simulated; only the last four digits are stored)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from designhub.api.v1.auth import get_current_user
from designhub.core.database import get_db
from designhub.schemas.auth import CurrentUser
from designhub.schemas.common import SuccessResponse
from designhub.schemas.payment import PaymentMethodCreate, PaymentMethodOut, PaymentMethodUpdate
from designhub.services import payments

router = APIRouter()


@router.get("", response_model=list[PaymentMethodOut])
def list_payment_methods(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[PaymentMethodOut]:
    return [PaymentMethodOut.model_validate(m) for m in payments.list_methods(db, user)]


@router.post("", response_model=PaymentMethodOut, status_code=201)
def add_payment_method(
    body: PaymentMethodCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PaymentMethodOut:
    """The CVV is validated by the schema and then dropped."""
    method = payments.add_method(
        db,
        user,
        card_holder_name=body.card_holder_name,
        card_number=body.card_number,
        expiry_month=body.expiry_month,
        expiry_year=body.expiry_year,
        is_default=body.is_default,
    )
    return PaymentMethodOut.model_validate(method)


@router.patch("/{method_id}", response_model=PaymentMethodOut)
def update_payment_method(
    method_id: Annotated[int, Path(gt=0)],
    body: PaymentMethodUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PaymentMethodOut:
    return PaymentMethodOut.model_validate(payments.set_default(db, user, method_id, body.is_default))


@router.delete("/{method_id}", response_model=SuccessResponse)
def delete_payment_method(
    method_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> SuccessResponse:
    payments.delete_method(db, user, method_id)
    return SuccessResponse()
