"""Read-only catalog: design software, services and the designer directory.

Public listings degrade to an empty result when the database is unavailable.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from designhub.core.errors import NotFoundError
from designhub.models import DesignerSoftware, DesignSoftware, Service, User
from designhub.models.user import USER_TYPE_DESIGNER
from designhub.services import persistence

logger = logging.getLogger(__name__)


def list_software(db: Session) -> list[DesignSoftware]:
    try:
        return persistence.list_design_software(db)
    except SQLAlchemyError as e:
        logger.warning("Database unavailable; returning empty software list: %s", e)
        db.rollback()
        return []


def list_services(db: Session) -> list[Service]:
    """Active services only."""
    try:
        return persistence.list_active_services(db)
    except SQLAlchemyError as e:
        logger.warning("Database unavailable; returning empty services list: %s", e)
        db.rollback()
        return []


def get_service(db: Session, service_id: int) -> Service:
    service = persistence.get_service(db, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return service


def list_designers(db: Session) -> list[User]:
    try:
        return persistence.list_designers(db)
    except SQLAlchemyError as e:
        logger.warning("Database unavailable; returning empty designer list: %s", e)
        db.rollback()
        return []


def get_designer(db: Session, designer_id: int) -> tuple[User, list[DesignerSoftware]]:
    designer = persistence.get_user_by_id(db, designer_id)
    if designer is None or designer.user_type != USER_TYPE_DESIGNER:
        raise NotFoundError("Designer not found")
    return designer, persistence.get_designer_software(db, designer.id)
