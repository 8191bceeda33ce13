"""Public catalog routes: design software, services and designers."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from designhub.core.database import get_db
from designhub.schemas.catalog import (
    DesignerDetail,
    DesignerOut,
    DesignerSoftwareOut,
    ServiceOut,
    SoftwareOut,
)
from designhub.services import catalog

software_router = APIRouter()
services_router = APIRouter()
designers_router = APIRouter()


@software_router.get("", response_model=list[SoftwareOut])
def list_software(db: Annotated[Session, Depends(get_db)]) -> list[SoftwareOut]:
    """All design software, used for designer registration and routing."""
    return [SoftwareOut.model_validate(s) for s in catalog.list_software(db)]


@services_router.get("", response_model=list[ServiceOut])
def list_services(db: Annotated[Session, Depends(get_db)]) -> list[ServiceOut]:
    """Active services available to order."""
    return [ServiceOut.model_validate(s) for s in catalog.list_services(db)]


@services_router.get("/{service_id}", response_model=ServiceOut)
def get_service(
    service_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceOut:
    return ServiceOut.model_validate(catalog.get_service(db, service_id))


@designers_router.get("", response_model=list[DesignerOut])
def list_designers(db: Annotated[Session, Depends(get_db)]) -> list[DesignerOut]:
    return [DesignerOut.model_validate(d) for d in catalog.list_designers(db)]


@designers_router.get("/{designer_id}", response_model=DesignerDetail)
def get_designer(
    designer_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
) -> DesignerDetail:
    """Designer profile with the software they work with."""
    designer, links = catalog.get_designer(db, designer_id)
    return DesignerDetail(
        id=designer.id,
        name=designer.name,
        username=designer.username,
        software=[DesignerSoftwareOut.from_link(link) for link in links],
    )
