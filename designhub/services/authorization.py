"""Single authorization predicate: may this caller perform this capability on this order?

Callers pass freshly loaded state (the order row read in the same request), so
decisions always reflect what is persisted, never a cached claim.
"""

from enum import Enum
from typing import Protocol

from designhub.core.errors import ForbiddenError
from designhub.models.user import ROLE_ADMIN, USER_TYPE_CLIENT, USER_TYPE_DESIGNER


class Caller(Protocol):
    id: int
    role: str
    user_type: str


class OrderParties(Protocol):
    client_id: int
    designer_id: int | None


class Capability(str, Enum):
    CREATE_ORDER = "order:create"
    VIEW_ORDER = "order:view"
    MESSAGE_ORDER = "order:message"
    UPLOAD_ORDER_FILE = "order:upload_file"
    UPDATE_ORDER_STATUS = "order:update_status"
    CANCEL_ORDER = "order:cancel"
    UPLOAD_DELIVERABLE = "order:upload_deliverable"
    ACCEPT_ORDER = "order:accept"
    VIEW_PENDING_QUEUE = "orders:pending"
    VIEW_ASSIGNED_ORDERS = "orders:assigned"
    ASSIGN_DESIGNER = "order:assign_designer"
    MANAGE_PAYMENT_METHODS = "payment:manage"


# Capabilities that are meaningless without an order.
ORDER_SCOPED = frozenset(
    {
        Capability.VIEW_ORDER,
        Capability.MESSAGE_ORDER,
        Capability.UPLOAD_ORDER_FILE,
        Capability.UPDATE_ORDER_STATUS,
        Capability.CANCEL_ORDER,
        Capability.UPLOAD_DELIVERABLE,
    }
)

DENIAL_MESSAGES = {
    Capability.CREATE_ORDER: "Only clients can place orders",
    Capability.UPLOAD_ORDER_FILE: "Only the order's client can attach files",
    Capability.UPDATE_ORDER_STATUS: "Only the assigned designer can update this order",
    Capability.UPLOAD_DELIVERABLE: "Only the assigned designer can upload deliverables",
    Capability.ACCEPT_ORDER: "Designer access required",
    Capability.VIEW_PENDING_QUEUE: "Designer access required",
    Capability.VIEW_ASSIGNED_ORDERS: "Designer access required",
    Capability.ASSIGN_DESIGNER: "Admin access required",
    Capability.MANAGE_PAYMENT_METHODS: "Payment methods are available to clients only",
}


def is_order_party(caller: Caller, order: OrderParties) -> bool:
    return caller.id == order.client_id or (
        order.designer_id is not None and caller.id == order.designer_id
    )


def is_assigned_designer(caller: Caller, order: OrderParties) -> bool:
    return (
        caller.user_type == USER_TYPE_DESIGNER
        and order.designer_id is not None
        and caller.id == order.designer_id
    )


def is_allowed(
    caller: Caller,
    capability: Capability,
    order: OrderParties | None = None,
) -> bool:
    """Return True if caller holds capability (on order, for order-scoped capabilities)."""
    if capability in ORDER_SCOPED and order is None:
        raise ValueError(f"{capability.value} requires an order")

    is_admin = caller.role == ROLE_ADMIN

    if capability in (Capability.VIEW_ORDER, Capability.MESSAGE_ORDER):
        return is_order_party(caller, order)
    if capability == Capability.UPLOAD_ORDER_FILE:
        return caller.id == order.client_id
    if capability == Capability.UPDATE_ORDER_STATUS:
        return is_admin or is_assigned_designer(caller, order)
    if capability == Capability.CANCEL_ORDER:
        return is_admin or is_order_party(caller, order)
    if capability == Capability.UPLOAD_DELIVERABLE:
        return is_assigned_designer(caller, order)
    if capability in (
        Capability.ACCEPT_ORDER,
        Capability.VIEW_PENDING_QUEUE,
        Capability.VIEW_ASSIGNED_ORDERS,
    ):
        return caller.user_type == USER_TYPE_DESIGNER
    if capability == Capability.ASSIGN_DESIGNER:
        return is_admin
    if capability in (Capability.CREATE_ORDER, Capability.MANAGE_PAYMENT_METHODS):
        return caller.user_type == USER_TYPE_CLIENT
    return False


def authorize(
    caller: Caller,
    capability: Capability,
    order: OrderParties | None = None,
) -> None:
    """Raise ForbiddenError unless is_allowed(caller, capability, order)."""
    if not is_allowed(caller, capability, order):
        raise ForbiddenError(DENIAL_MESSAGES.get(capability, "Access denied"))
