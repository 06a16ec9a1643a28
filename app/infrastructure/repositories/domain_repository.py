"""
SQLAlchemy repositories for research domains and the settings row.
"""

from typing import List, Optional

from sqlalchemy import func

from app.domain.models.app_config import AppConfig, APP_CONFIG_ID
from app.domain.models.domain import Domain
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyDomainRepository(SQLAlchemyRepository[Domain]):

    def get_by_name(self, name: str) -> Optional[Domain]:
        return self.db.query(Domain).filter(func.lower(Domain.name) == name.strip().lower()).first()

    def list(self, skip: int = 0, limit: Optional[int] = None) -> List[Domain]:
        query = self.db.query(Domain).order_by(Domain.name).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


class SQLAlchemyAppConfigRepository(SQLAlchemyRepository[AppConfig]):

    def get_singleton(self) -> Optional[AppConfig]:
        return self.get_by_id(APP_CONFIG_ID)
