"""Per-order chat between the client and the assigned designer."""

import logging

from sqlalchemy.orm import Session

from designhub.core.errors import BadRequestError, ForbiddenError, NotFoundError
from designhub.models import Message
from designhub.services import persistence
from designhub.services.authorization import Caller, Capability
from designhub.services.orders import get_order_for

logger = logging.getLogger(__name__)


def send_message(db: Session, caller: Caller, order_id: int, receiver_id: int, content: str) -> Message:
    """
    Post a message on an order. The receiver must be the sender's counterpart:
    client -> assigned designer, designer -> client.
    """
    order = get_order_for(db, caller, order_id, Capability.MESSAGE_ORDER)
    if order.designer_id is None:
        raise BadRequestError("Order has no assigned designer yet")
    counterpart = order.designer_id if caller.id == order.client_id else order.client_id
    if receiver_id != counterpart:
        raise BadRequestError("Receiver must be the other party on this order")

    message = persistence.create_message(
        db,
        order_id=order.id,
        sender_id=caller.id,
        receiver_id=receiver_id,
        content=content,
    )
    db.commit()
    logger.info(
        "Message sent",
        extra={"order_id": order.id, "message_id": message.id, "sender_id": caller.id},
    )
    return message


def list_order_messages(db: Session, caller: Caller, order_id: int) -> list[Message]:
    """Messages on the order, oldest first."""
    order = get_order_for(db, caller, order_id, Capability.VIEW_ORDER)
    return persistence.list_order_messages(db, order.id)


def mark_read(db: Session, caller: Caller, message_id: int) -> None:
    message = persistence.get_message(db, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if message.receiver_id != caller.id:
        raise ForbiddenError("Only the receiver can mark a message as read")
    if not message.is_read:
        persistence.mark_message_read(db, message.id)
        db.commit()


def unread_count(db: Session, caller: Caller) -> int:
    return persistence.count_unread_messages(db, caller.id)
