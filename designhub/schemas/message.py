"""Schemas for per-order messages."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    order_id: int = Field(..., gt=0)
    receiver_id: int = Field(..., gt=0)
    content: str = Field(..., min_length=1, max_length=10_000)


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    created_at: datetime


class MessageSendResponse(BaseModel):
    success: bool = True
    message: MessageOut


class UnreadCountResponse(BaseModel):
    count: int = Field(..., ge=0)
