"""ORM model for mock client payment methods."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func

from designhub.models.base import Base


class PaymentMethod(Base):
    """
    Card on file for simulated checkout.

    Only the last four digits are kept; the full number and CVV are never stored.
    """

    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    card_holder_name = Column(String(100), nullable=False)
    card_number_last4 = Column(String(4), nullable=False)
    expiry_month = Column(String(2), nullable=False)
    expiry_year = Column(String(4), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
