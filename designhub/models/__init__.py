"""SQLAlchemy ORM models."""

from designhub.models.base import Base
from designhub.models.catalog import DesignerSoftware, DesignSoftware, Service
from designhub.models.message import Message
from designhub.models.order import Deliverable, Order, OrderFile
from designhub.models.payment import PaymentMethod
from designhub.models.user import PasswordResetToken, User

__all__ = [
    "Base",
    "Deliverable",
    "DesignSoftware",
    "DesignerSoftware",
    "Message",
    "Order",
    "OrderFile",
    "PasswordResetToken",
    "PaymentMethod",
    "Service",
    "User",
]
