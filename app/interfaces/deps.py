"""
API Dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.domain.models.app_config import AppConfig
from app.domain.models.domain import Domain
from app.domain.models.project import ResearchProject
from app.domain.models.user import User
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.database import get_db
from app.infrastructure.oauth.google_provider import GoogleOAuthProvider, get_google_provider
from app.infrastructure.repositories.domain_repository import (
    SQLAlchemyAppConfigRepository,
    SQLAlchemyDomainRepository,
)
from app.infrastructure.repositories.project_repository import SQLAlchemyProjectRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_project_repository(db: Session = Depends(get_db)) -> ProjectRepository:
    """Get project repository instance."""
    return SQLAlchemyProjectRepository(db, ResearchProject)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_domain_repository(db: Session = Depends(get_db)) -> SQLAlchemyDomainRepository:
    return SQLAlchemyDomainRepository(db, Domain)


def get_config_repository(db: Session = Depends(get_db)) -> SQLAlchemyAppConfigRepository:
    return SQLAlchemyAppConfigRepository(db, AppConfig)


def get_oauth_provider() -> GoogleOAuthProvider:
    return get_google_provider()
