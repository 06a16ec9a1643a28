"""
SQLAlchemy Implementation of User Repository.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_

from app.domain.models.user import User, Role
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def get_many(self, ids: List[str]) -> List[User]:
        if not ids:
            return []
        return self.db.query(User).filter(User.id.in_(ids)).order_by(User.email).all()

    def get_by_role(self, role: Role) -> List[User]:
        return self.db.query(User).filter(User.role == role).order_by(User.last_name, User.first_name).all()

    def list(self, skip: int = 0, limit: Optional[int] = None) -> List[User]:
        query = self.db.query(User).order_by(User.created_at.desc(), User.email).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def search(self, keyword: str) -> List[User]:
        pattern = f"%{keyword.strip().lower()}%"
        return (
            self.db.query(User)
            .filter(
                or_(
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                    func.lower(User.email).like(pattern),
                )
            )
            .order_by(User.email)
            .all()
        )

    def count_by_role(self) -> Dict[str, int]:
        rows = self.db.query(User.role, func.count(User.id)).group_by(User.role).all()
        counts = {role.value: 0 for role in Role}
        for role, count in rows:
            counts[Role.parse(role).value] = count
        return counts

    def count_by_institution(self) -> Dict[str, int]:
        count = func.count(User.id).label("count")
        rows = (
            self.db.query(User.institution, count)
            .filter(User.institution.isnot(None))
            .group_by(User.institution)
            .order_by(count.desc(), User.institution)
            .all()
        )
        return {r.institution: r.count for r in rows}

    def creations_since(self, since: datetime) -> List[Tuple[datetime, Role]]:
        rows = self.db.query(User.created_at, User.role).filter(User.created_at >= since).all()
        return [(r.created_at, Role.parse(r.role)) for r in rows if r.created_at is not None]
