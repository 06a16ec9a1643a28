"""
Project Repository Interface.
Defines the queries behind project listings and statistics.
"""

from datetime import date, datetime
from typing import List, Dict, Any, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.project import ResearchProject, ProjectStatus


class ProjectRepository(BaseRepository[ResearchProject]):
    """Interface for ResearchProject-specific operations."""

    def list_all(self) -> List[ResearchProject]:
        """Every project, newest first."""
        ...

    def get_by_owner(self, owner_id: str) -> List[ResearchProject]:
        """Projects owned by one user."""
        ...

    def get_by_owner_email(self, email: str) -> List[ResearchProject]:
        ...

    def get_by_status(self, status: ProjectStatus) -> List[ResearchProject]:
        ...

    def search(self, keyword: str, owner_id: Optional[str] = None) -> List[ResearchProject]:
        """Case-insensitive match on title, domain, institution, supervisor, participants."""
        ...

    def count_by_status(self, status: ProjectStatus) -> int:
        ...

    def count_by_owner_id(self, owner_id: str) -> int:
        ...

    def count_by_domain_name(self, domain: str) -> int:
        ...

    def average_progress(self) -> Optional[float]:
        """Mean progress over projects with a non-null value, None if there are none."""
        ...

    def sum_budget(self) -> float:
        ...

    def count_overdue(self, today: date) -> int:
        """End date strictly before `today` and status not TERMINE."""
        ...

    def count_by_domain(self) -> List[Dict[str, Any]]:
        """[{"domain", "count"}] ordered by count desc."""
        ...

    def sum_budget_by_domain(self) -> List[Dict[str, Any]]:
        """[{"domain", "budget"}] ordered by budget desc."""
        ...

    def count_by_owner(self) -> List[Dict[str, Any]]:
        """[{"first_name", "last_name", "email", "count"}] ordered by count desc."""
        ...

    def creation_dates_since(self, since: datetime) -> List[datetime]:
        ...
