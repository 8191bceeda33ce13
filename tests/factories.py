"""Shared test helpers: an in-memory SQLite database and row builders."""

import itertools
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from designhub.core.security import hash_password
from designhub.models import Base, DesignerSoftware, DesignSoftware, Service, User
from designhub.models.user import ROLE_USER, USER_TYPE_CLIENT, USER_TYPE_DESIGNER

PASSWORD = "secret1"

_open_ids = itertools.count(1)


def make_session_factory(path: str | None = None) -> sessionmaker[Session]:
    """
    Fresh database with all tables. In memory on one shared connection by default;
    with a file path, every session gets its own connection to that file.
    """
    if path is None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(f"sqlite:///{path}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@lru_cache
def password_hash() -> str:
    return hash_password(PASSWORD)


def make_user(
    db: Session,
    email: str,
    user_type: str = USER_TYPE_CLIENT,
    role: str = ROLE_USER,
    username: str | None = None,
) -> User:
    user = User(
        open_id=f"test-{next(_open_ids)}",
        email=email,
        password_hash=password_hash(),
        login_method="local",
        role=role,
        user_type=user_type,
        username=username,
        name=username,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_designer(db: Session, email: str, software: list[DesignSoftware] | None = None) -> User:
    designer = make_user(db, email, user_type=USER_TYPE_DESIGNER, username=email.split("@")[0])
    for item in software or []:
        db.add(DesignerSoftware(designer_id=designer.id, software_id=item.id))
    db.commit()
    return designer


def make_software(db: Session, name: str = "Adobe Photoshop", category: str = "photo") -> DesignSoftware:
    item = DesignSoftware(name=name, name_ar=name, category=category)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def make_service(
    db: Session,
    name: str = "Poster Design",
    price: int = 8000,
    category: str = "photo",
    is_active: bool = True,
) -> Service:
    service = Service(
        name=name,
        name_ar=name,
        description=f"{name} description",
        description_ar=f"{name} description",
        price=price,
        category=category,
        is_active=is_active,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service
