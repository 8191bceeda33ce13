"""Typed data access for every relation. No business rules beyond filters and joins.

Functions add and flush; committing is left to the calling service so that one
operation maps to one transaction.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from designhub.models import (
    Deliverable,
    DesignerSoftware,
    DesignSoftware,
    Message,
    Order,
    OrderFile,
    PasswordResetToken,
    PaymentMethod,
    Service,
    User,
)
from designhub.models.base import utcnow
from designhub.models.order import STATUS_ASSIGNED, STATUS_PENDING
from designhub.models.user import USER_TYPE_DESIGNER

# ---------------------------------------------------------------- users


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, **fields: Any) -> User:
    user = User(**fields)
    db.add(user)
    db.flush()
    return user


def update_user(db: Session, user: User, values: dict[str, Any]) -> User:
    for key, value in values.items():
        setattr(user, key, value)
    db.flush()
    return user


def list_designers(db: Session) -> list[User]:
    return (
        db.query(User)
        .filter(User.user_type == USER_TYPE_DESIGNER)
        .order_by(User.id)
        .all()
    )


# ---------------------------------------------------------------- design software


def list_design_software(db: Session) -> list[DesignSoftware]:
    return db.query(DesignSoftware).order_by(DesignSoftware.id).all()


def existing_software_ids(db: Session, software_ids: Iterable[int]) -> set[int]:
    ids = set(software_ids)
    if not ids:
        return set()
    rows = db.query(DesignSoftware.id).filter(DesignSoftware.id.in_(ids)).all()
    return {row[0] for row in rows}


def add_designer_software(db: Session, designer_id: int, software_ids: Iterable[int]) -> None:
    for software_id in software_ids:
        db.add(DesignerSoftware(designer_id=designer_id, software_id=software_id))
    db.flush()


def remove_designer_software(db: Session, designer_id: int) -> None:
    db.query(DesignerSoftware).filter(DesignerSoftware.designer_id == designer_id).delete(
        synchronize_session=False
    )


def get_designer_software(db: Session, designer_id: int) -> list[DesignerSoftware]:
    return (
        db.query(DesignerSoftware)
        .options(joinedload(DesignerSoftware.software))
        .filter(DesignerSoftware.designer_id == designer_id)
        .order_by(DesignerSoftware.id)
        .all()
    )


def get_designer_categories(db: Session, designer_id: int) -> set[str]:
    rows = (
        db.query(DesignSoftware.category)
        .join(DesignerSoftware, DesignerSoftware.software_id == DesignSoftware.id)
        .filter(DesignerSoftware.designer_id == designer_id)
        .distinct()
        .all()
    )
    return {row[0] for row in rows if row[0]}


# ---------------------------------------------------------------- services


def list_active_services(db: Session) -> list[Service]:
    return db.query(Service).filter(Service.is_active.is_(True)).order_by(Service.id).all()


def get_service(db: Session, service_id: int) -> Service | None:
    return db.query(Service).filter(Service.id == service_id).first()


def active_service_ids_in_categories(db: Session, categories: Iterable[str]) -> list[int]:
    cats = list(categories)
    if not cats:
        return []
    rows = (
        db.query(Service.id)
        .filter(Service.category.in_(cats), Service.is_active.is_(True))
        .all()
    )
    return [row[0] for row in rows]


# ---------------------------------------------------------------- payment methods


def list_payment_methods(db: Session, client_id: int) -> list[PaymentMethod]:
    return (
        db.query(PaymentMethod)
        .filter(PaymentMethod.client_id == client_id)
        .order_by(PaymentMethod.id)
        .all()
    )


def get_payment_method(db: Session, method_id: int) -> PaymentMethod | None:
    return db.query(PaymentMethod).filter(PaymentMethod.id == method_id).first()


def create_payment_method(db: Session, **fields: Any) -> PaymentMethod:
    method = PaymentMethod(**fields)
    db.add(method)
    db.flush()
    return method


def clear_default_payment_methods(db: Session, client_id: int, except_id: int | None = None) -> None:
    query = db.query(PaymentMethod).filter(
        PaymentMethod.client_id == client_id,
        PaymentMethod.is_default.is_(True),
    )
    if except_id is not None:
        query = query.filter(PaymentMethod.id != except_id)
    query.update({PaymentMethod.is_default: False}, synchronize_session=False)


def delete_payment_method(db: Session, method: PaymentMethod) -> None:
    db.delete(method)
    db.flush()


# ---------------------------------------------------------------- orders


def create_order(
    db: Session,
    client_id: int,
    service_id: int,
    price: int,
    description: str,
) -> Order:
    now = utcnow()
    order = Order(
        client_id=client_id,
        service_id=service_id,
        price=price,
        description=description,
        status=STATUS_PENDING,
        created_at=now,
        updated_at=now,
    )
    db.add(order)
    db.flush()
    return order


def get_order(db: Session, order_id: int) -> Order | None:
    return db.query(Order).filter(Order.id == order_id).first()


def list_client_orders(db: Session, client_id: int) -> list[Order]:
    return (
        db.query(Order)
        .options(joinedload(Order.service))
        .filter(Order.client_id == client_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_pending_orders_for_services(db: Session, service_ids: Iterable[int]) -> list[Order]:
    ids = list(service_ids)
    if not ids:
        return []
    return (
        db.query(Order)
        .options(joinedload(Order.service), joinedload(Order.client))
        .filter(Order.status == STATUS_PENDING, Order.service_id.in_(ids))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_designer_orders(db: Session, designer_id: int) -> list[Order]:
    return (
        db.query(Order)
        .options(joinedload(Order.service), joinedload(Order.client))
        .filter(Order.designer_id == designer_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def assign_order_if_pending(db: Session, order_id: int, designer_id: int) -> bool:
    """
    Conditional update: assign designer and move to 'assigned' only while the row is
    still 'pending'. Returns False when no row matched (already taken or missing).
    """
    updated = (
        db.query(Order)
        .filter(Order.id == order_id, Order.status == STATUS_PENDING)
        .update(
            {
                Order.designer_id: designer_id,
                Order.status: STATUS_ASSIGNED,
                Order.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    return updated == 1


def set_order_designer(
    db: Session,
    order_id: int,
    designer_id: int,
    allowed_statuses: Iterable[str],
) -> bool:
    updated = (
        db.query(Order)
        .filter(Order.id == order_id, Order.status.in_(list(allowed_statuses)))
        .update(
            {
                Order.designer_id: designer_id,
                Order.status: STATUS_ASSIGNED,
                Order.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    return updated == 1


def transition_order_status(
    db: Session,
    order_id: int,
    from_statuses: Iterable[str],
    to_status: str,
    designer_id: int | None = None,
    completed_at: datetime | None = None,
) -> bool:
    """
    Compare-and-set the status. Matches only while the current status is one of
    from_statuses (and, when given, the assigned designer is designer_id).
    """
    query = db.query(Order).filter(
        Order.id == order_id,
        Order.status.in_(list(from_statuses)),
    )
    if designer_id is not None:
        query = query.filter(Order.designer_id == designer_id)
    values: dict[Any, Any] = {Order.status: to_status, Order.updated_at: utcnow()}
    if completed_at is not None:
        values[Order.completed_at] = completed_at
    return query.update(values, synchronize_session=False) == 1


# ---------------------------------------------------------------- order files and deliverables


def create_order_file(db: Session, **fields: Any) -> OrderFile:
    row = OrderFile(**fields)
    db.add(row)
    db.flush()
    return row


def list_order_files(db: Session, order_id: int) -> list[OrderFile]:
    return (
        db.query(OrderFile)
        .filter(OrderFile.order_id == order_id)
        .order_by(OrderFile.id)
        .all()
    )


def get_order_file(db: Session, order_id: int, file_id: int) -> OrderFile | None:
    return (
        db.query(OrderFile)
        .filter(OrderFile.id == file_id, OrderFile.order_id == order_id)
        .first()
    )


def create_deliverable(db: Session, **fields: Any) -> Deliverable:
    row = Deliverable(**fields)
    db.add(row)
    db.flush()
    return row


def list_deliverables(db: Session, order_id: int) -> list[Deliverable]:
    return (
        db.query(Deliverable)
        .filter(Deliverable.order_id == order_id)
        .order_by(Deliverable.id)
        .all()
    )


def get_deliverable(db: Session, order_id: int, deliverable_id: int) -> Deliverable | None:
    return (
        db.query(Deliverable)
        .filter(Deliverable.id == deliverable_id, Deliverable.order_id == order_id)
        .first()
    )


# ---------------------------------------------------------------- messages


def create_message(
    db: Session,
    order_id: int,
    sender_id: int,
    receiver_id: int,
    content: str,
) -> Message:
    message = Message(
        order_id=order_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        is_read=False,
        created_at=utcnow(),
    )
    db.add(message)
    db.flush()
    return message


def list_order_messages(db: Session, order_id: int) -> list[Message]:
    """Oldest first; id breaks ties between equal timestamps."""
    return (
        db.query(Message)
        .filter(Message.order_id == order_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def get_message(db: Session, message_id: int) -> Message | None:
    return db.query(Message).filter(Message.id == message_id).first()


def mark_message_read(db: Session, message_id: int) -> None:
    db.query(Message).filter(Message.id == message_id).update(
        {Message.is_read: True}, synchronize_session=False
    )


def count_unread_messages(db: Session, receiver_id: int) -> int:
    count = (
        db.query(func.count(Message.id))
        .filter(Message.receiver_id == receiver_id, Message.is_read.is_(False))
        .scalar()
    )
    return int(count or 0)


# ---------------------------------------------------------------- password reset tokens


def create_reset_token(db: Session, user_id: int, token: str, expires_at: datetime) -> PasswordResetToken:
    row = PasswordResetToken(user_id=user_id, token=token, expires_at=expires_at, used=False)
    db.add(row)
    db.flush()
    return row


def get_unused_reset_token(db: Session, token: str) -> PasswordResetToken | None:
    return (
        db.query(PasswordResetToken)
        .filter(PasswordResetToken.token == token, PasswordResetToken.used.is_(False))
        .first()
    )


def consume_reset_token(db: Session, token_id: int) -> bool:
    """Flip used=False -> True; returns False if another request consumed it first."""
    updated = (
        db.query(PasswordResetToken)
        .filter(PasswordResetToken.id == token_id, PasswordResetToken.used.is_(False))
        .update({PasswordResetToken.used: True}, synchronize_session=False)
    )
    return updated == 1
