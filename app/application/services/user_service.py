"""User service — admin-side management of the user directory."""

from typing import List, Optional

import structlog

from app.application.services.auth_service import create_user, parse_role
from app.core.exceptions import EntityNotFoundException, ValidationFailedException
from app.domain.models.user import User, Role
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.user import AdminUserCreate, AdminUserUpdate

logger = structlog.get_logger(__name__)


def get_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if user is None:
        raise EntityNotFoundException(f"Utilisateur introuvable : {user_id}", details={"user_id": user_id})
    return user


def list_users(repo: UserRepository, keyword: Optional[str] = None) -> List[User]:
    if keyword and keyword.strip():
        return repo.search(keyword)
    return repo.list()


def list_by_role(repo: UserRepository, role: str) -> List[User]:
    return repo.get_by_role(parse_role(role))


def admin_create_user(repo: UserRepository, data: AdminUserCreate) -> User:
    return create_user(repo, data)


def _ensure_not_self(target: User, current: User, message: str) -> None:
    if target.id == current.id:
        raise ValidationFailedException(message)


def update_user(repo: UserRepository, user_id: str, data: AdminUserUpdate, current: User) -> User:
    user = get_user(repo, user_id)
    changes = data.model_dump(exclude_unset=True)

    if "role" in changes:
        new_role = parse_role(changes.pop("role"))
        if new_role != Role.parse(user.role):
            _ensure_not_self(user, current, "Vous ne pouvez pas modifier votre propre rôle")
        user.role = new_role
    if "is_active" in changes and changes["is_active"] is False:
        _ensure_not_self(user, current, "Vous ne pouvez pas désactiver votre propre compte")

    for field, value in changes.items():
        setattr(user, field, value)

    user.profile_completed = user.compute_profile_completed()
    user = repo.save(user)
    logger.info("User updated", user_id=user.id, fields=sorted(data.model_fields_set))
    return user


def change_role(repo: UserRepository, user_id: str, role: str, current: User) -> User:
    user = get_user(repo, user_id)
    new_role = parse_role(role)
    _ensure_not_self(user, current, "Vous ne pouvez pas modifier votre propre rôle")

    user.role = new_role
    user.profile_completed = user.compute_profile_completed()
    user = repo.save(user)
    logger.info("User role changed", user_id=user.id, role=new_role.value)
    return user


def toggle_active(repo: UserRepository, user_id: str, current: User) -> User:
    user = get_user(repo, user_id)
    _ensure_not_self(user, current, "Vous ne pouvez pas désactiver votre propre compte")

    user.is_active = not user.is_active
    user = repo.save(user)
    logger.info("User active flag toggled", user_id=user.id, is_active=user.is_active)
    return user


def delete_user(
    repo: UserRepository,
    project_repo: ProjectRepository,
    user_id: str,
    current: User,
) -> None:
    user = get_user(repo, user_id)
    _ensure_not_self(user, current, "Vous ne pouvez pas supprimer votre propre compte")

    owned = project_repo.count_by_owner_id(user.id)
    if owned:
        raise ValidationFailedException(
            "Impossible de supprimer un utilisateur propriétaire de projets",
            details={"owned_projects": owned},
        )

    repo.delete(user)
    logger.info("User deleted", user_id=user_id)
