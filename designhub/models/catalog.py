"""ORM models for reference data: design software, designer competencies, services."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from designhub.models.base import Base


class DesignSoftware(Base):
    """Design tool a designer can work with; category drives order routing."""

    __tablename__ = "design_software"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    name_ar = Column(String(100), nullable=False)
    # e.g. "photo", "video", "3d", "ui"; matches Service.category
    category = Column(String(50), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DesignerSoftware(Base):
    """Link between a designer and a design tool they are competent in."""

    __tablename__ = "designer_software"
    __table_args__ = (
        UniqueConstraint("designer_id", "software_id", name="uq_designer_software"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    designer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    software_id = Column(Integer, ForeignKey("design_software.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    software = relationship("DesignSoftware")


class Service(Base):
    """Orderable catalog entry. price is in minor currency units."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    name_ar = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    description_ar = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
