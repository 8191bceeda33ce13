"""Schemas for orders, attachments and lifecycle operations."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from designhub.schemas.catalog import ServiceOut
from designhub.schemas.message import MessageOut

OrderStatus = Literal["pending", "assigned", "in_progress", "completed", "cancelled"]

# Statuses a caller may request through the generic status update.
SettableStatus = Literal["in_progress", "completed", "cancelled"]

FILE_NAME_MAX_LENGTH = 255
FILE_TYPE_MAX_LENGTH = 100
# Base64 of the largest upload MAX_UPLOAD_FILE_BYTES allows (100 MB), plus room for a data: URL prefix.
FILE_DATA_MAX_LENGTH = (100 * 1024 * 1024 + 2) // 3 * 4 + 256


class OrderCreate(BaseModel):
    service_id: int = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=10_000)


class OrderCreateResponse(BaseModel):
    success: Literal[True] = True
    order_id: int


class FileUpload(BaseModel):
    """Binary content as base64 (a data: URL prefix is tolerated)."""

    file_name: str = Field(..., min_length=1, max_length=FILE_NAME_MAX_LENGTH)
    file_data: str = Field(..., min_length=1, max_length=FILE_DATA_MAX_LENGTH)
    file_type: str | None = Field(default=None, max_length=FILE_TYPE_MAX_LENGTH)


class StatusUpdate(BaseModel):
    status: SettableStatus


class AssignDesigner(BaseModel):
    designer_id: int = Field(..., gt=0)


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    service_id: int
    designer_id: int | None = None
    status: OrderStatus
    price: int
    description: str
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


class PartyOut(BaseModel):
    """The other party shown alongside an order."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    email: str


class OrderSummary(BaseModel):
    """Order row with its service and (for designer views) the client."""

    order: OrderOut
    service: ServiceOut | None = None
    client: PartyOut | None = None


class OrderFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    file_name: str
    file_url: str
    file_key: str
    file_type: str | None = None
    uploaded_by: int
    created_at: datetime


class DeliverableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    file_name: str
    file_url: str
    file_key: str
    file_type: str | None = None
    created_at: datetime


class OrderDetail(OrderOut):
    service: ServiceOut | None = None
    files: list[OrderFileOut] = Field(default_factory=list)
    deliverables: list[DeliverableOut] = Field(default_factory=list)
    messages: list[MessageOut] = Field(default_factory=list)


class UploadResponse(BaseModel):
    success: Literal[True] = True
    id: int
    file_url: str
