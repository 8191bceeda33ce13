"""ORM models for accounts: users and password-reset tokens."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)

from designhub.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)

USER_TYPE_CLIENT = "client"
USER_TYPE_DESIGNER = "designer"
USER_TYPES = (USER_TYPE_CLIENT, USER_TYPE_DESIGNER)


class User(Base):
    """
    Account for a client or a designer.

    role: 'user' or 'admin'. user_type: 'client' or 'designer', fixed at registration.
    Clients use first_name/last_name; designers use username (their public handle).
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        CheckConstraint("user_type IN ('client', 'designer')", name="ck_users_user_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    open_id = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(Text, nullable=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    login_method = Column(String(64), nullable=True)
    role = Column(String(16), nullable=False, default=ROLE_USER)
    user_type = Column(String(16), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    username = Column(String(100), nullable=True)
    phone_number = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    last_signed_in = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_designer(self) -> bool:
        return self.user_type == USER_TYPE_DESIGNER


class PasswordResetToken(Base):
    """One-time password reset ticket. Consumed once or left to expire."""

    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(255), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
