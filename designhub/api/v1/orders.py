"""Order routes: creation, listings, lifecycle transitions and attachments."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.orm import Session

from designhub.api.v1.auth import get_current_user
from designhub.core.config import get_settings
from designhub.core.database import get_db
from designhub.models import Order
from designhub.schemas.auth import CurrentUser
from designhub.schemas.catalog import ServiceOut
from designhub.schemas.message import MessageOut
from designhub.schemas.order import (
    AssignDesigner,
    DeliverableOut,
    FileUpload,
    OrderCreate,
    OrderCreateResponse,
    OrderDetail,
    OrderFileOut,
    OrderOut,
    OrderSummary,
    PartyOut,
    StatusUpdate,
    UploadResponse,
)
from designhub.services import orders
from designhub.services.storage import BlobStore, get_blob_store

router = APIRouter()

OrderId = Annotated[int, Path(gt=0)]


def _summary(order: Order, include_client: bool) -> OrderSummary:
    return OrderSummary(
        order=OrderOut.model_validate(order),
        service=ServiceOut.model_validate(order.service) if order.service else None,
        client=PartyOut.model_validate(order.client) if include_client and order.client else None,
    )


def _attachment(data: bytes, file_name: str, file_type: str | None) -> Response:
    return Response(
        content=data,
        media_type=file_type or "application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_name)}"},
    )


@router.post("", response_model=OrderCreateResponse, status_code=201)
def create_order(
    body: OrderCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> OrderCreateResponse:
    """Place an order for a service. The service's current price is locked in."""
    order = orders.create_order(db, user, body.service_id, body.description)
    return OrderCreateResponse(order_id=order.id)


@router.get("/mine", response_model=list[OrderSummary])
def my_orders(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[OrderSummary]:
    """Orders the caller placed, newest first."""
    return [_summary(o, include_client=False) for o in orders.list_client_orders(db, user)]


@router.get("/pending", response_model=list[OrderSummary])
def pending_orders(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[OrderSummary]:
    """Designer queue: unassigned orders matching the caller's software categories."""
    return [_summary(o, include_client=True) for o in orders.pending_queue(db, user)]


@router.get("/designs", response_model=list[OrderSummary])
def my_designs(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[OrderSummary]:
    """Orders assigned to the calling designer, newest first."""
    return [_summary(o, include_client=True) for o in orders.designer_orders(db, user)]


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(
    order_id: OrderId,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> OrderDetail:
    """Order with its service, files, deliverables and messages. Parties only."""
    detail = orders.get_order_detail(db, user, order_id)
    service = detail["service"]
    return OrderDetail(
        **OrderOut.model_validate(detail["order"]).model_dump(),
        service=ServiceOut.model_validate(service) if service else None,
        files=[OrderFileOut.model_validate(f) for f in detail["files"]],
        deliverables=[DeliverableOut.model_validate(d) for d in detail["deliverables"]],
        messages=[MessageOut.model_validate(m) for m in detail["messages"]],
    )


@router.post("/{order_id}/files", response_model=UploadResponse, status_code=201)
def upload_file(
    order_id: OrderId,
    body: FileUpload,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> UploadResponse:
    """Attach a reference file (base64 content) to the caller's order."""
    row = orders.upload_order_file(
        db,
        store,
        user,
        order_id,
        file_name=body.file_name,
        file_data=body.file_data,
        file_type=body.file_type,
        max_bytes=get_settings().MAX_UPLOAD_FILE_BYTES,
    )
    return UploadResponse(id=row.id, file_url=row.file_url)


@router.get("/{order_id}/files/{file_id}/content")
def download_file(
    order_id: OrderId,
    file_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> Response:
    row, data = orders.read_order_file(db, store, user, order_id, file_id)
    return _attachment(data, row.file_name, row.file_type)


@router.post("/{order_id}/accept", response_model=OrderOut)
def accept_order(
    order_id: OrderId,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> OrderOut:
    """Take a pending order. 400 if another designer got there first."""
    return OrderOut.model_validate(orders.accept_order(db, user, order_id))


@router.post("/{order_id}/assign", response_model=OrderOut)
def assign_designer(
    order_id: OrderId,
    body: AssignDesigner,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> OrderOut:
    """Admin only: assign or reassign the designer of a pending/assigned order."""
    return OrderOut.model_validate(orders.assign_designer(db, user, order_id, body.designer_id))


@router.post("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: OrderId,
    body: StatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> OrderOut:
    """Move the order along its lifecycle (start work, complete, cancel)."""
    return OrderOut.model_validate(orders.update_status(db, user, order_id, body.status))


@router.post("/{order_id}/deliverables", response_model=UploadResponse, status_code=201)
def upload_deliverable(
    order_id: OrderId,
    body: FileUpload,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> UploadResponse:
    """Upload the final work; the order becomes completed."""
    row = orders.upload_deliverable(
        db,
        store,
        user,
        order_id,
        file_name=body.file_name,
        file_data=body.file_data,
        file_type=body.file_type,
        max_bytes=get_settings().MAX_UPLOAD_FILE_BYTES,
    )
    return UploadResponse(id=row.id, file_url=row.file_url)


@router.get("/{order_id}/deliverables/{deliverable_id}/content")
def download_deliverable(
    order_id: OrderId,
    deliverable_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> Response:
    row, data = orders.read_deliverable(db, store, user, order_id, deliverable_id)
    return _attachment(data, row.file_name, row.file_type)
