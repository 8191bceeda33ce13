"""Mock card-on-file management for clients. No real payment processing."""

import logging

from sqlalchemy.orm import Session

from designhub.core.errors import NotFoundError
from designhub.models import PaymentMethod
from designhub.services import persistence
from designhub.services.authorization import Caller, Capability, authorize

logger = logging.getLogger(__name__)


def _owned_method(db: Session, caller: Caller, method_id: int) -> PaymentMethod:
    # Someone else's card looks the same as a missing one.
    method = persistence.get_payment_method(db, method_id)
    if method is None or method.client_id != caller.id:
        raise NotFoundError("Payment method not found")
    return method


def list_methods(db: Session, caller: Caller) -> list[PaymentMethod]:
    authorize(caller, Capability.MANAGE_PAYMENT_METHODS)
    return persistence.list_payment_methods(db, caller.id)


def add_method(
    db: Session,
    caller: Caller,
    card_holder_name: str,
    card_number: str,
    expiry_month: str,
    expiry_year: str,
    is_default: bool = False,
) -> PaymentMethod:
    """Keep only the last four digits of card_number. The CVV never reaches this layer."""
    authorize(caller, Capability.MANAGE_PAYMENT_METHODS)
    if is_default:
        persistence.clear_default_payment_methods(db, caller.id)
    method = persistence.create_payment_method(
        db,
        client_id=caller.id,
        card_holder_name=card_holder_name,
        card_number_last4=card_number[-4:],
        expiry_month=expiry_month,
        expiry_year=expiry_year,
        is_default=is_default,
    )
    db.commit()
    db.refresh(method)
    logger.info("Payment method added", extra={"client_id": caller.id, "payment_method_id": method.id})
    return method


def set_default(db: Session, caller: Caller, method_id: int, is_default: bool) -> PaymentMethod:
    authorize(caller, Capability.MANAGE_PAYMENT_METHODS)
    method = _owned_method(db, caller, method_id)
    if is_default:
        persistence.clear_default_payment_methods(db, caller.id, except_id=method.id)
    method.is_default = is_default
    db.commit()
    db.refresh(method)
    return method


def delete_method(db: Session, caller: Caller, method_id: int) -> None:
    authorize(caller, Capability.MANAGE_PAYMENT_METHODS)
    method = _owned_method(db, caller, method_id)
    persistence.delete_payment_method(db, method)
    db.commit()
    logger.info("Payment method deleted", extra={"client_id": caller.id, "payment_method_id": method_id})
