"""
User Repository Interface.
Defines the user directory lookups and the aggregates used by statistics.
"""

from datetime import datetime
from typing import List, Dict, Optional, Tuple

from app.domain.repositories.base import BaseRepository
from app.domain.models.user import User, Role


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_many(self, ids: List[str]) -> List[User]:
        ...

    def get_by_role(self, role: Role) -> List[User]:
        ...

    def search(self, keyword: str) -> List[User]:
        """Case-insensitive match on first name, last name or email."""
        ...

    def count_by_role(self) -> Dict[str, int]:
        """Every role is present, with 0 when no user has it."""
        ...

    def count_by_institution(self) -> Dict[str, int]:
        ...

    def creations_since(self, since: datetime) -> List[Tuple[datetime, Role]]:
        """(created_at, role) of every user created at or after `since`."""
        ...
