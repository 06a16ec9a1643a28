"""
Test configuration and fixtures.
"""
import os
from typing import Generator

import pytest

# Set testing environment before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.infrastructure.database import Base, get_db
from app.application.services.auth_service import hash_password, token_for
from app.domain.models.app_config import AppConfig
from app.domain.models.project import ResearchProject, ProjectStatus
from app.domain.models.user import User, Role

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

PASSWORD = "secret123"


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh schema for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db: Session, email: str, role: Role, **fields) -> User:
    user = User(
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
        is_active=True,
        **fields,
    )
    user.profile_completed = user.compute_profile_completed()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_project(db: Session, owner: User, **fields) -> ResearchProject:
    fields.setdefault("title", "Projet test")
    fields.setdefault("status", ProjectStatus.EN_COURS)
    fields.setdefault("progress", 0)
    project = ResearchProject(owner_id=owner.id, version=1, **fields)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def admin(db_session: Session) -> User:
    return make_user(db_session, "admin@esmt.sn", Role.ADMIN, first_name="Awa", last_name="Diop")


@pytest.fixture
def manager(db_session: Session) -> User:
    return make_user(db_session, "manager@esmt.sn", Role.MANAGER, first_name="Moussa", last_name="Fall")


@pytest.fixture
def candidate(db_session: Session) -> User:
    return make_user(
        db_session,
        "ana@x.com",
        Role.CANDIDATE,
        first_name="Ana",
        last_name="Ba",
        institution="ESMT",
        phone="+221770000000",
    )


@pytest.fixture
def other_candidate(db_session: Session) -> User:
    return make_user(
        db_session,
        "omar@x.com",
        Role.CANDIDATE,
        first_name="Omar",
        last_name="Sy",
        institution="UCAD",
        phone="+221771111111",
    )


@pytest.fixture
def app_config(db_session: Session) -> AppConfig:
    config = AppConfig.defaults()
    db_session.add(config)
    db_session.commit()
    db_session.refresh(config)
    return config
