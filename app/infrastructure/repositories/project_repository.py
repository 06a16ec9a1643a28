"""
SQLAlchemy Implementation of Project Repository.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from app.domain.models.project import ResearchProject, ProjectStatus
from app.domain.models.user import User
from app.domain.repositories.project_repository import ProjectRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyProjectRepository(SQLAlchemyRepository[ResearchProject], ProjectRepository):
    """Project repository implementation using SQLAlchemy."""

    def _ordered(self, query):
        return query.order_by(ResearchProject.created_at.desc(), ResearchProject.id.desc())

    def get_by_owner(self, owner_id: str) -> List[ResearchProject]:
        return self._ordered(
            self.db.query(ResearchProject).filter(ResearchProject.owner_id == owner_id)
        ).all()

    def get_by_owner_email(self, email: str) -> List[ResearchProject]:
        return self._ordered(
            self.db.query(ResearchProject).join(ResearchProject.owner).filter(User.email == email)
        ).all()

    def get_by_status(self, status: ProjectStatus) -> List[ResearchProject]:
        return self._ordered(
            self.db.query(ResearchProject).filter(ResearchProject.status == status)
        ).all()

    def list_all(self) -> List[ResearchProject]:
        return self._ordered(self.db.query(ResearchProject)).all()

    def search(self, keyword: str, owner_id: Optional[str] = None) -> List[ResearchProject]:
        pattern = f"%{keyword.strip().lower()}%"
        query = self.db.query(ResearchProject).filter(
            or_(
                func.lower(ResearchProject.title).like(pattern),
                func.lower(ResearchProject.domain).like(pattern),
                func.lower(ResearchProject.institution).like(pattern),
                func.lower(ResearchProject.supervisor).like(pattern),
                func.lower(ResearchProject.participants_list).like(pattern),
            )
        )
        if owner_id:
            query = query.filter(ResearchProject.owner_id == owner_id)
        return self._ordered(query).all()

    def count_by_status(self, status: ProjectStatus) -> int:
        return self.db.query(func.count(ResearchProject.id)).filter(
            ResearchProject.status == status
        ).scalar() or 0

    def count_by_owner_id(self, owner_id: str) -> int:
        return self.db.query(func.count(ResearchProject.id)).filter(
            ResearchProject.owner_id == owner_id
        ).scalar() or 0

    def count_by_domain_name(self, domain: str) -> int:
        return self.db.query(func.count(ResearchProject.id)).filter(
            ResearchProject.domain == domain
        ).scalar() or 0

    def average_progress(self) -> Optional[float]:
        value = self.db.query(func.avg(ResearchProject.progress)).filter(
            ResearchProject.progress.isnot(None)
        ).scalar()
        return float(value) if value is not None else None

    def sum_budget(self) -> float:
        value = self.db.query(func.coalesce(func.sum(ResearchProject.budget), 0)).filter(
            ResearchProject.budget.isnot(None)
        ).scalar()
        return float(value or 0)

    def count_overdue(self, today: date) -> int:
        return self.db.query(func.count(ResearchProject.id)).filter(
            ResearchProject.end_date.isnot(None),
            ResearchProject.end_date < today,
            ResearchProject.status != ProjectStatus.TERMINE,
        ).scalar() or 0

    def count_by_domain(self) -> List[Dict[str, Any]]:
        count = func.count(ResearchProject.id).label("count")
        results = (
            self.db.query(ResearchProject.domain, count)
            .filter(ResearchProject.domain.isnot(None))
            .group_by(ResearchProject.domain)
            .order_by(count.desc(), ResearchProject.domain)
            .all()
        )
        return [{"domain": r.domain, "count": r.count} for r in results]

    def sum_budget_by_domain(self) -> List[Dict[str, Any]]:
        budget = func.sum(ResearchProject.budget).label("budget")
        results = (
            self.db.query(ResearchProject.domain, budget)
            .filter(ResearchProject.domain.isnot(None), ResearchProject.budget.isnot(None))
            .group_by(ResearchProject.domain)
            .order_by(budget.desc(), ResearchProject.domain)
            .all()
        )
        return [{"domain": r.domain, "budget": float(r.budget)} for r in results]

    def count_by_owner(self) -> List[Dict[str, Any]]:
        count = func.count(ResearchProject.id).label("count")
        results = (
            self.db.query(User.first_name, User.last_name, User.email, count)
            .join(ResearchProject, ResearchProject.owner_id == User.id)
            .group_by(User.id, User.first_name, User.last_name, User.email)
            .order_by(count.desc(), User.email)
            .all()
        )
        return [
            {"first_name": r.first_name, "last_name": r.last_name, "email": r.email, "count": r.count}
            for r in results
        ]

    def creation_dates_since(self, since: datetime) -> List[datetime]:
        rows = (
            self.db.query(ResearchProject.created_at)
            .filter(ResearchProject.created_at >= since)
            .all()
        )
        return [r.created_at for r in rows if r.created_at is not None]
