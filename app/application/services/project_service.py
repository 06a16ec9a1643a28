"""Project service — role-aware project CRUD and participant management."""

from datetime import date
from typing import List, Optional

import structlog

from app.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ProfileIncompleteException,
    ValidationFailedException,
)
from app.domain.access_rules import Action, ensure_allowed, listing_owner_filter
from app.domain.models.project import ResearchProject, ProjectStatus, DEFAULT_DOMAIN
from app.domain.models.user import User, Role
from app.domain.participants import format_participants
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.project import ProjectCreate, ProjectUpdate

logger = structlog.get_logger(__name__)


def ensure_profile_complete(user: User) -> None:
    """Candidates must fill in institution and phone before any project action."""
    if Role.parse(user.role) == Role.CANDIDATE and not user.profile_completed:
        raise ProfileIncompleteException()


def refresh_participants_list(project: ResearchProject) -> None:
    project.participants_list = format_participants(project.members, project.external_participants)


def _resolve_members(user_repo: UserRepository, user_ids: List[str]) -> List[User]:
    wanted = list(dict.fromkeys(user_ids))
    users = user_repo.get_many(wanted)
    missing = set(wanted) - {u.id for u in users}
    if missing:
        raise EntityNotFoundException(
            "Utilisateur(s) introuvable(s)", details={"user_ids": sorted(missing)}
        )
    return users


def _check_dates(start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        raise ValidationFailedException(
            "La date de fin doit être postérieure à la date de début",
            details={"start_date": start.isoformat(), "end_date": end.isoformat()},
        )


def find_project(repo: ProjectRepository, project_id: int) -> ResearchProject:
    project = repo.get_by_id(project_id)
    if project is None:
        raise EntityNotFoundException(f"Projet introuvable : {project_id}", details={"project_id": project_id})
    return project


def get_project(repo: ProjectRepository, requester: User, project_id: int) -> ResearchProject:
    project = find_project(repo, project_id)
    ensure_allowed(Action.READ, requester.role, project.owner_id, requester.id)
    return project


def list_visible(
    repo: ProjectRepository,
    requester: User,
    keyword: Optional[str] = None,
) -> List[ResearchProject]:
    """Everything for staff, owned projects only for candidates."""
    owner_id = listing_owner_filter(requester.role, requester.id)
    if keyword and keyword.strip():
        return repo.search(keyword, owner_id=owner_id)
    if owner_id is None:
        return repo.list_all()
    return repo.get_by_owner(owner_id)


def list_by_status(repo: ProjectRepository, status: str) -> List[ResearchProject]:
    try:
        parsed = ProjectStatus(status.upper())
    except ValueError:
        raise ValidationFailedException(
            "Statut invalide",
            details={"status": status, "allowed": [s.value for s in ProjectStatus]},
        )
    return repo.get_by_status(parsed)


def create_project(
    repo: ProjectRepository,
    user_repo: UserRepository,
    requester: User,
    data: ProjectCreate,
) -> ResearchProject:
    ensure_profile_complete(requester)
    _check_dates(data.start_date, data.end_date)

    fields = data.model_dump(exclude={"member_ids"})
    project = ResearchProject(**fields)
    project.owner = requester
    project.owner_id = requester.id
    if not project.domain or not project.domain.strip():
        project.domain = DEFAULT_DOMAIN
    if project.progress is None:
        project.progress = 0
    project.version = 1
    project.members = _resolve_members(user_repo, data.member_ids)
    refresh_participants_list(project)

    project = repo.save(project)
    logger.info("Project created", project_id=project.id, owner_id=requester.id)
    return project


def update_project(
    repo: ProjectRepository,
    user_repo: UserRepository,
    requester: User,
    project_id: int,
    data: ProjectUpdate,
) -> ResearchProject:
    ensure_profile_complete(requester)
    project = find_project(repo, project_id)
    ensure_allowed(Action.UPDATE, requester.role, project.owner_id, requester.id, project.status)

    if data.version is not None and data.version != project.version:
        raise ConflictException(
            "Le projet a été modifié entre-temps, rechargez-le",
            details={"expected_version": data.version, "current_version": project.version},
        )

    changes = data.model_dump(exclude_unset=True, exclude={"member_ids", "version"})
    _check_dates(
        changes.get("start_date", project.start_date),
        changes.get("end_date", project.end_date),
    )

    for field, value in changes.items():
        setattr(project, field, value)
    if "domain" in changes and not (project.domain or "").strip():
        project.domain = DEFAULT_DOMAIN
    if data.member_ids is not None:
        project.members = _resolve_members(user_repo, data.member_ids)

    refresh_participants_list(project)
    project.version = (project.version or 0) + 1

    project = repo.save(project)
    logger.info(
        "Project updated",
        project_id=project.id,
        requester_id=requester.id,
        fields=sorted(changes),
        version=project.version,
    )
    return project


def delete_project(repo: ProjectRepository, requester: User, project_id: int) -> None:
    ensure_profile_complete(requester)
    project = find_project(repo, project_id)
    ensure_allowed(Action.DELETE, requester.role, project.owner_id, requester.id, project.status)
    repo.delete(project)
    logger.info("Project deleted", project_id=project_id, requester_id=requester.id)


def add_members(
    repo: ProjectRepository,
    user_repo: UserRepository,
    project_id: int,
    user_ids: List[str],
) -> ResearchProject:
    """Union the given users into the member set."""
    project = find_project(repo, project_id)
    current = {u.id for u in project.members}
    for user in _resolve_members(user_repo, user_ids):
        if user.id not in current:
            project.members.append(user)

    refresh_participants_list(project)
    project.version = (project.version or 0) + 1
    project = repo.save(project)
    logger.info("Project members added", project_id=project_id, user_ids=user_ids)
    return project


def remove_member(repo: ProjectRepository, project_id: int, user_id: str) -> ResearchProject:
    project = find_project(repo, project_id)
    member = next((u for u in project.members if u.id == user_id), None)
    if member is None:
        raise EntityNotFoundException(
            "Ce membre ne participe pas au projet",
            details={"project_id": project_id, "user_id": user_id},
        )

    project.members.remove(member)
    refresh_participants_list(project)
    project.version = (project.version or 0) + 1
    project = repo.save(project)
    logger.info("Project member removed", project_id=project_id, user_id=user_id)
    return project


def set_external_participants(
    repo: ProjectRepository,
    project_id: int,
    external: Optional[str],
) -> ResearchProject:
    project = find_project(repo, project_id)
    project.external_participants = external
    refresh_participants_list(project)
    project.version = (project.version or 0) + 1
    project = repo.save(project)
    logger.info("External participants updated", project_id=project_id)
    return project
