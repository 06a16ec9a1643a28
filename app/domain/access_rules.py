"""
Project access-control rules.

Pure decisions over (role, owner id, requester id, status). They never touch
the database; callers load the project first so that a missing id surfaces
as a not-found error before any of these run.
"""

import enum
from typing import Optional

from app.core.exceptions import ForbiddenException
from app.domain.models.project import ProjectStatus
from app.domain.models.user import Role


class Action(str, enum.Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


def _is_owner(owner_id: Optional[str], requester_id: Optional[str]) -> bool:
    return owner_id is not None and owner_id == requester_id


def can_read(role: Role, owner_id: Optional[str], requester_id: Optional[str]) -> bool:
    return Role.parse(role).is_staff or _is_owner(owner_id, requester_id)


def can_update(
    role: Role,
    owner_id: Optional[str],
    requester_id: Optional[str],
    status: ProjectStatus,
) -> bool:
    if Role.parse(role).is_staff:
        return True
    return _is_owner(owner_id, requester_id) and ProjectStatus(status) != ProjectStatus.TERMINE


def can_delete(role: Role, owner_id: Optional[str], requester_id: Optional[str]) -> bool:
    return Role.parse(role).is_staff or _is_owner(owner_id, requester_id)


def ensure_allowed(
    action: Action,
    role: Role,
    owner_id: Optional[str],
    requester_id: Optional[str],
    status: ProjectStatus = ProjectStatus.EN_COURS,
) -> None:
    """Raise ForbiddenException when `action` is not permitted."""
    if action == Action.READ:
        allowed = can_read(role, owner_id, requester_id)
    elif action == Action.UPDATE:
        allowed = can_update(role, owner_id, requester_id, status)
    else:
        allowed = can_delete(role, owner_id, requester_id)

    if allowed:
        return

    if action == Action.UPDATE and _is_owner(owner_id, requester_id):
        raise ForbiddenException(
            "Ce projet est terminé et ne peut plus être modifié",
            details={"action": action.value, "status": ProjectStatus(status).value},
        )
    raise ForbiddenException(
        "Accès interdit : vous n'êtes pas propriétaire de ce projet",
        details={"action": action.value},
    )


def listing_owner_filter(role: Role, requester_id: str) -> Optional[str]:
    """Owner id to restrict listings to, or None when every project is visible."""
    return None if Role.parse(role).is_staff else requester_id
