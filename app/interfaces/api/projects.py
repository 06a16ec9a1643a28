"""Projects API routes — role-filtered CRUD, participants, dashboard, PDF export."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from app.application.services import project_service
from app.application.services.report_service import render_project_pdf
from app.application.services.statistics_service import get_advanced_stats, get_current_date
from app.domain.models.user import User
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.project import (
    ExternalParticipantsUpdate,
    MembersAdd,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)
from app.domain.schemas.statistics import StaffDashboard
from app.interfaces.api.deps import check_maintenance, require_complete_profile, require_staff
from app.interfaces.deps import get_project_repository, get_user_repository

router = APIRouter(
    prefix="/api/projects",
    tags=["Projects"],
    dependencies=[Depends(check_maintenance)],
)

RECENT_PROJECTS = 5


@router.get("", response_model=list[ProjectRead])
def list_projects(
    keyword: Optional[str] = None,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(require_complete_profile),
):
    today = get_current_date()
    return [ProjectRead.from_project(p, today) for p in project_service.list_visible(repo, user, keyword)]


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreate,
    repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(require_complete_profile),
):
    project = project_service.create_project(repo, user_repo, user, body)
    return ProjectRead.from_project(project, get_current_date())


@router.get("/dashboard", response_model=StaffDashboard)
def dashboard(
    repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(require_staff),
):
    today = get_current_date()
    stats = get_advanced_stats(repo, user_repo, today)
    recent = repo.list_all()[:RECENT_PROJECTS]
    return StaffDashboard(stats=stats, recent_projects=[ProjectRead.from_project(p, today) for p in recent])


@router.get("/status/{project_status}", response_model=list[ProjectRead])
def projects_by_status(
    project_status: str,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(require_staff),
):
    today = get_current_date()
    return [ProjectRead.from_project(p, today) for p in project_service.list_by_status(repo, project_status)]


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: int,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(require_complete_profile),
):
    project = project_service.get_project(repo, user, project_id)
    return ProjectRead.from_project(project, get_current_date())


@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    body: ProjectUpdate,
    repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(require_complete_profile),
):
    project = project_service.update_project(repo, user_repo, user, project_id, body)
    return ProjectRead.from_project(project, get_current_date())


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(require_complete_profile),
):
    project_service.delete_project(repo, user, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/members", response_model=ProjectRead)
def add_members(
    project_id: int,
    body: MembersAdd,
    repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(require_staff),
):
    project = project_service.add_members(repo, user_repo, project_id, body.user_ids)
    return ProjectRead.from_project(project, get_current_date())


@router.delete("/{project_id}/members/{user_id}", response_model=ProjectRead)
def remove_member(
    project_id: int,
    user_id: str,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(require_staff),
):
    project = project_service.remove_member(repo, project_id, user_id)
    return ProjectRead.from_project(project, get_current_date())


@router.put("/{project_id}/external-participants", response_model=ProjectRead)
def set_external_participants(
    project_id: int,
    body: ExternalParticipantsUpdate,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(require_staff),
):
    project = project_service.set_external_participants(repo, project_id, body.external_participants)
    return ProjectRead.from_project(project, get_current_date())


@router.get("/{project_id}/export-pdf")
def export_project_pdf(
    project_id: int,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(require_complete_profile),
):
    project = project_service.get_project(repo, user, project_id)
    content = render_project_pdf(project)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="projet_{project.id}.pdf"'},
    )
