"""Pydantic request/response schemas."""

from designhub.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetRequestResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
)
from designhub.schemas.catalog import (
    DesignerDetail,
    DesignerOut,
    DesignerSoftwareOut,
    ServiceOut,
    SoftwareOut,
)
from designhub.schemas.common import SuccessResponse
from designhub.schemas.health import DatabaseStatus, HealthResponse
from designhub.schemas.message import (
    MessageCreate,
    MessageOut,
    MessageSendResponse,
    UnreadCountResponse,
)
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
    StatusUpdate,
    UploadResponse,
)
from designhub.schemas.payment import PaymentMethodCreate, PaymentMethodOut, PaymentMethodUpdate
from designhub.schemas.profile import ProfileOut, ProfileUpdate

__all__ = [
    "AssignDesigner",
    "CurrentUser",
    "DatabaseStatus",
    "DeliverableOut",
    "DesignerDetail",
    "DesignerOut",
    "DesignerSoftwareOut",
    "FileUpload",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageCreate",
    "MessageOut",
    "MessageSendResponse",
    "OrderCreate",
    "OrderCreateResponse",
    "OrderDetail",
    "OrderFileOut",
    "OrderOut",
    "OrderSummary",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "PasswordResetRequestResponse",
    "PaymentMethodCreate",
    "PaymentMethodOut",
    "PaymentMethodUpdate",
    "ProfileOut",
    "ProfileUpdate",
    "RegisterRequest",
    "RegisterResponse",
    "ServiceOut",
    "SoftwareOut",
    "StatusUpdate",
    "SuccessResponse",
    "UnreadCountResponse",
    "UploadResponse",
]
