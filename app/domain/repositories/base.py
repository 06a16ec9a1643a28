"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import TypeVar, List, Optional, Any, Protocol

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: Any) -> Optional[T]:
        """Get a single entity by primary key."""
        ...

    def list(self, skip: int = 0, limit: Optional[int] = None) -> List[T]:
        """List entities, optionally paginated."""
        ...

    def count(self) -> int:
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Update an existing entity with the given fields."""
        ...

    def save(self, db_obj: T) -> T:
        """Persist an entity mutated by the caller."""
        ...

    def delete(self, db_obj: T) -> None:
        ...
