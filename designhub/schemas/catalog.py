"""Schemas for catalog reference data and the designer directory."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from designhub.models import DesignerSoftware


class SoftwareOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    name_ar: str
    category: str


class ServiceOut(BaseModel):
    """Catalog service. price is in minor currency units."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    name_ar: str
    description: str
    description_ar: str
    price: int
    category: str
    image_url: str | None = None
    is_active: bool


class DesignerSoftwareOut(BaseModel):
    """A designer's competency: link id plus the linked software."""

    id: int
    software_id: int
    name: str
    name_ar: str
    category: str

    @classmethod
    def from_link(cls, link: "DesignerSoftware") -> "DesignerSoftwareOut":
        return cls(
            id=link.id,
            software_id=link.software_id,
            name=link.software.name,
            name_ar=link.software.name_ar,
            category=link.software.category,
        )


class DesignerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    username: str | None = None


class DesignerDetail(DesignerOut):
    software: list[DesignerSoftwareOut]
