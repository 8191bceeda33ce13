"""Per-order messaging routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from designhub.api.v1.auth import get_current_user
from designhub.core.database import get_db
from designhub.schemas.auth import CurrentUser
from designhub.schemas.common import SuccessResponse
from designhub.schemas.message import (
    MessageCreate,
    MessageOut,
    MessageSendResponse,
    UnreadCountResponse,
)
from designhub.services import messaging

router = APIRouter()


@router.post("", response_model=MessageSendResponse, status_code=201)
def send_message(
    body: MessageCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageSendResponse:
    message = messaging.send_message(db, user, body.order_id, body.receiver_id, body.content)
    return MessageSendResponse(message=MessageOut.model_validate(message))


@router.get("/order/{order_id}", response_model=list[MessageOut])
def get_order_messages(
    order_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[MessageOut]:
    """Thread for an order, oldest first."""
    return [MessageOut.model_validate(m) for m in messaging.list_order_messages(db, user, order_id)]


@router.post("/{message_id}/read", response_model=SuccessResponse)
def mark_message_read(
    message_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> SuccessResponse:
    messaging.mark_read(db, user, message_id)
    return SuccessResponse()


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UnreadCountResponse:
    return UnreadCountResponse(count=messaging.unread_count(db, user))
