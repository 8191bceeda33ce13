"""Order lifecycle: creation, designer matching and acceptance, status changes, deliverables.

State machine:

    pending -> assigned -> in_progress -> completed
       |          |             |
       +----------+-------------+------> cancelled

Every transition is written as a conditional update on the current status, so two
concurrent requests cannot both win (e.g. two designers accepting the same order).
"""

import base64
import binascii
import logging
import re
import secrets

from sqlalchemy.orm import Session

from designhub.core.errors import BadRequestError, NotFoundError
from designhub.models import Deliverable, Order, OrderFile
from designhub.models.base import utcnow
from designhub.models.order import (
    STATUS_ASSIGNED,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    TERMINAL_STATUSES,
)
from designhub.models.user import USER_TYPE_DESIGNER
from designhub.services import persistence
from designhub.services.authorization import Caller, Capability, authorize, is_allowed
from designhub.services.storage import BlobStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    STATUS_PENDING: frozenset({STATUS_ASSIGNED, STATUS_CANCELLED}),
    STATUS_ASSIGNED: frozenset({STATUS_IN_PROGRESS, STATUS_CANCELLED}),
    STATUS_IN_PROGRESS: frozenset({STATUS_COMPLETED, STATUS_CANCELLED}),
    STATUS_COMPLETED: frozenset(),
    STATUS_CANCELLED: frozenset(),
}

# Reached only through accept/assign, never through the generic status update.
ASSIGNMENT_ONLY_STATUSES = frozenset({STATUS_PENDING, STATUS_ASSIGNED})

# Statuses in which an admin may (re)assign a designer.
ASSIGNABLE_STATUSES = (STATUS_PENDING, STATUS_ASSIGNED)

# Statuses from which a deliverable completes the order.
DELIVERABLE_STATUSES = (STATUS_ASSIGNED, STATUS_IN_PROGRESS)

_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,", re.IGNORECASE)
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def decode_file_data(file_data: str, max_bytes: int) -> bytes:
    """Decode base64 upload content (optionally a data: URL). Raises BadRequestError."""
    payload = _DATA_URL_PREFIX.sub("", file_data.strip(), count=1)
    padding = len(payload) - len(payload.rstrip("="))
    if len(payload) * 3 // 4 - padding > max_bytes:
        raise BadRequestError(f"File size must not exceed {max_bytes} bytes")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BadRequestError("File data is not valid base64") from e
    if not data:
        raise BadRequestError("File is empty")
    if len(data) > max_bytes:
        raise BadRequestError(f"File size must not exceed {max_bytes} bytes")
    return data


def storage_key(order_id: int, kind: str, file_name: str) -> str:
    """orders/<id>/<kind>/<random>-<sanitized name>"""
    safe = _UNSAFE_FILENAME_CHARS.sub("_", file_name).strip("._") or "file"
    return f"orders/{order_id}/{kind}/{secrets.token_hex(8)}-{safe[:120]}"


def load_order(db: Session, order_id: int) -> Order:
    order = persistence.get_order(db, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def get_order_for(db: Session, caller: Caller, order_id: int, capability: Capability) -> Order:
    """Load the order and check capability against its current parties."""
    order = load_order(db, order_id)
    authorize(caller, capability, order)
    return order


# ---------------------------------------------------------------- creation and listings


def create_order(db: Session, caller: Caller, service_id: int, description: str) -> Order:
    """Place a pending order; the service price is copied onto the order."""
    authorize(caller, Capability.CREATE_ORDER)
    service = persistence.get_service(db, service_id)
    if service is None or not service.is_active:
        raise NotFoundError("Service not found")

    order = persistence.create_order(
        db,
        client_id=caller.id,
        service_id=service.id,
        price=service.price,
        description=description,
    )
    db.commit()
    logger.info(
        "Order created",
        extra={"order_id": order.id, "client_id": caller.id, "service_id": service.id, "price": order.price},
    )
    return order


def list_client_orders(db: Session, caller: Caller) -> list[Order]:
    return persistence.list_client_orders(db, caller.id)


def pending_queue(db: Session, caller: Caller) -> list[Order]:
    """
    Pending orders for services in categories the designer is competent in, newest first.
    A designer with no linked software gets an empty list.
    """
    authorize(caller, Capability.VIEW_PENDING_QUEUE)
    categories = persistence.get_designer_categories(db, caller.id)
    if not categories:
        return []
    service_ids = persistence.active_service_ids_in_categories(db, categories)
    return persistence.list_pending_orders_for_services(db, service_ids)


def designer_orders(db: Session, caller: Caller) -> list[Order]:
    authorize(caller, Capability.VIEW_ASSIGNED_ORDERS)
    return persistence.list_designer_orders(db, caller.id)


def get_order_detail(db: Session, caller: Caller, order_id: int) -> dict:
    """Order plus service, client files, deliverables and the message thread."""
    order = get_order_for(db, caller, order_id, Capability.VIEW_ORDER)
    return {
        "order": order,
        "service": order.service,
        "files": persistence.list_order_files(db, order.id),
        "deliverables": persistence.list_deliverables(db, order.id),
        "messages": persistence.list_order_messages(db, order.id),
    }


# ---------------------------------------------------------------- transitions


def accept_order(db: Session, caller: Caller, order_id: int) -> Order:
    """Take a pending order. Exactly one of several concurrent accepts succeeds."""
    authorize(caller, Capability.ACCEPT_ORDER)
    load_order(db, order_id)

    if not persistence.assign_order_if_pending(db, order_id, caller.id):
        db.rollback()
        raise BadRequestError("Order already assigned")
    db.commit()
    order = load_order(db, order_id)
    logger.info(
        "Order accepted",
        extra={"order_id": order.id, "designer_id": caller.id, "status": order.status},
    )
    return order


def assign_designer(db: Session, caller: Caller, order_id: int, designer_id: int) -> Order:
    """Admin assignment (or reassignment) of a designer while the order is not yet in progress."""
    authorize(caller, Capability.ASSIGN_DESIGNER)
    order = load_order(db, order_id)

    designer = persistence.get_user_by_id(db, designer_id)
    if designer is None or designer.user_type != USER_TYPE_DESIGNER:
        raise BadRequestError("Assignee must be an existing designer")
    if order.status not in ASSIGNABLE_STATUSES:
        raise BadRequestError(f"Cannot assign a designer to an order that is {order.status}")

    if not persistence.set_order_designer(db, order_id, designer_id, ASSIGNABLE_STATUSES):
        db.rollback()
        raise BadRequestError("Order status changed; assignment not applied")
    db.commit()
    order = load_order(db, order_id)
    logger.info(
        "Designer assigned by admin",
        extra={"order_id": order.id, "designer_id": designer_id, "admin_id": caller.id},
    )
    return order


def update_status(db: Session, caller: Caller, order_id: int, status: str) -> Order:
    """
    Apply a transition from ALLOWED_TRANSITIONS.

    The assigned designer and admins may make any legal move; the client may only
    cancel while the order is still pending. Completing stamps completed_at.
    """
    order = load_order(db, order_id)
    current = order.status

    if status == STATUS_CANCELLED:
        authorize(caller, Capability.CANCEL_ORDER, order)
        if not is_allowed(caller, Capability.UPDATE_ORDER_STATUS, order) and current != STATUS_PENDING:
            raise BadRequestError("Only pending orders can be cancelled by the client")
    else:
        authorize(caller, Capability.UPDATE_ORDER_STATUS, order)

    if status in ASSIGNMENT_ONLY_STATUSES:
        raise BadRequestError(f"Status '{status}' can only be set by accepting or assigning an order")

    if not can_transition(current, status):
        raise BadRequestError(f"Cannot change order status from {current} to {status}")

    completed_at = utcnow() if status == STATUS_COMPLETED else None
    if not persistence.transition_order_status(
        db, order_id, from_statuses=[current], to_status=status, completed_at=completed_at
    ):
        db.rollback()
        raise BadRequestError("Order status changed concurrently; reload and retry")
    db.commit()
    order = load_order(db, order_id)
    logger.info(
        "Order status changed",
        extra={"order_id": order.id, "from_status": current, "status": order.status, "actor_id": caller.id},
    )
    return order


# ---------------------------------------------------------------- attachments


def upload_order_file(
    db: Session,
    store: BlobStore,
    caller: Caller,
    order_id: int,
    file_name: str,
    file_data: str,
    file_type: str | None,
    max_bytes: int,
) -> OrderFile:
    """Client reference attachment; not accepted once the order is finished."""
    order = get_order_for(db, caller, order_id, Capability.UPLOAD_ORDER_FILE)
    if order.status in TERMINAL_STATUSES:
        raise BadRequestError(f"Order is already {order.status}")

    data = decode_file_data(file_data, max_bytes)
    stored = store.put(storage_key(order.id, "files", file_name), data, file_type)
    row = persistence.create_order_file(
        db,
        order_id=order.id,
        file_name=file_name,
        file_url=stored.url,
        file_key=stored.key,
        file_type=file_type,
        uploaded_by=caller.id,
    )
    db.commit()
    logger.info(
        "Order file uploaded",
        extra={"order_id": order.id, "file_id": row.id, "size_bytes": len(data)},
    )
    return row


def upload_deliverable(
    db: Session,
    store: BlobStore,
    caller: Caller,
    order_id: int,
    file_name: str,
    file_data: str,
    file_type: str | None,
    max_bytes: int,
) -> Deliverable:
    """
    Store the designer's final file and complete the order in one transaction.
    Rejected once the order is completed or cancelled.
    """
    order = get_order_for(db, caller, order_id, Capability.UPLOAD_DELIVERABLE)
    if order.status in TERMINAL_STATUSES:
        raise BadRequestError(f"Order is already {order.status}")

    data = decode_file_data(file_data, max_bytes)
    stored = store.put(storage_key(order.id, "deliverables", file_name), data, file_type)

    row = persistence.create_deliverable(
        db,
        order_id=order.id,
        file_name=file_name,
        file_url=stored.url,
        file_key=stored.key,
        file_type=file_type,
    )
    completed = persistence.transition_order_status(
        db,
        order.id,
        from_statuses=DELIVERABLE_STATUSES,
        to_status=STATUS_COMPLETED,
        designer_id=caller.id,
        completed_at=utcnow(),
    )
    if not completed:
        db.rollback()
        logger.warning(
            "Deliverable rejected after upload; blob left orphaned",
            extra={"order_id": order.id, "storage_key": stored.key},
        )
        raise BadRequestError("Order is already completed or cancelled")
    db.commit()
    logger.info(
        "Deliverable uploaded; order completed",
        extra={"order_id": order.id, "deliverable_id": row.id, "designer_id": caller.id},
    )
    return row


def read_order_file(
    db: Session,
    store: BlobStore,
    caller: Caller,
    order_id: int,
    file_id: int,
) -> tuple[OrderFile, bytes]:
    order = get_order_for(db, caller, order_id, Capability.VIEW_ORDER)
    row = persistence.get_order_file(db, order.id, file_id)
    if row is None:
        raise NotFoundError("File not found")
    return row, store.get(row.file_key)


def read_deliverable(
    db: Session,
    store: BlobStore,
    caller: Caller,
    order_id: int,
    deliverable_id: int,
) -> tuple[Deliverable, bytes]:
    order = get_order_for(db, caller, order_id, Capability.VIEW_ORDER)
    row = persistence.get_deliverable(db, order.id, deliverable_id)
    if row is None:
        raise NotFoundError("Deliverable not found")
    return row, store.get(row.file_key)
