"""Schemas for mock payment methods."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PaymentMethodCreate(BaseModel):
    """Card details; only the last four digits are persisted and the CVV is discarded."""

    card_holder_name: str = Field(..., min_length=1, max_length=100)
    card_number: str = Field(..., pattern=r"^\d{12,19}$")
    expiry_month: str = Field(..., pattern=r"^(0[1-9]|1[0-2])$")
    expiry_year: str = Field(..., pattern=r"^\d{4}$")
    cvv: str = Field(..., pattern=r"^\d{3,4}$")
    is_default: bool = False


class PaymentMethodUpdate(BaseModel):
    is_default: bool


class PaymentMethodOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    card_holder_name: str
    card_number_last4: str
    expiry_month: str
    expiry_year: str
    is_default: bool
    created_at: datetime | None = None
