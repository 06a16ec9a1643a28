"""Admin API routes — user directory, statistics, reports, site settings."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from app.application.services import user_service
from app.application.services.config_service import get_config, update_config
from app.application.services.report_service import render_statistics_pdf
from app.application.services.statistics_service import get_advanced_stats
from app.domain.models.user import User
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import UserRead
from app.domain.schemas.domain import AppConfigRead, AppConfigUpdate
from app.domain.schemas.statistics import AdvancedStats
from app.domain.schemas.user import AdminUserCreate, AdminUserUpdate, RoleChange
from app.infrastructure.repositories.domain_repository import SQLAlchemyAppConfigRepository
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import get_config_repository, get_project_repository, get_user_repository

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/users", response_model=list[UserRead])
def list_users(
    keyword: Optional[str] = None,
    role: Optional[str] = None,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    if role:
        return user_service.list_by_role(repo, role)
    return user_service.list_users(repo, keyword)


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminUserCreate,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return user_service.admin_create_user(repo, body)


@router.get("/users/{user_id}", response_model=UserRead)
def get_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return user_service.get_user(repo, user_id)


@router.put("/users/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    body: AdminUserUpdate,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return user_service.update_user(repo, user_id, body, admin)


@router.put("/users/{user_id}/role", response_model=UserRead)
def change_role(
    user_id: str,
    body: RoleChange,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return user_service.change_role(repo, user_id, body.role, admin)


@router.post("/users/{user_id}/toggle", response_model=UserRead)
def toggle_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return user_service.toggle_active(repo, user_id, admin)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository),
    project_repo: ProjectRepository = Depends(get_project_repository),
    admin: User = Depends(require_admin),
):
    user_service.delete_user(repo, project_repo, user_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/statistics", response_model=AdvancedStats)
def statistics(
    project_repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return get_advanced_stats(project_repo, user_repo)


@router.get("/statistics/pdf")
def statistics_pdf(
    project_repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    stats = get_advanced_stats(project_repo, user_repo)
    content = render_statistics_pdf(stats, "Rapport statistique global")
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="rapport_statistiques.pdf"'},
    )


@router.get("/settings", response_model=AppConfigRead)
def read_settings(
    repo: SQLAlchemyAppConfigRepository = Depends(get_config_repository),
    admin: User = Depends(require_admin),
):
    return get_config(repo)


@router.put("/settings", response_model=AppConfigRead)
def write_settings(
    body: AppConfigUpdate,
    repo: SQLAlchemyAppConfigRepository = Depends(get_config_repository),
    admin: User = Depends(require_admin),
):
    return update_config(repo, body)
