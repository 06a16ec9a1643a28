"""Manager API routes — statistics and reports."""

from fastapi import APIRouter, Depends, Response

from app.application.services.report_service import render_statistics_pdf
from app.application.services.statistics_service import get_advanced_stats, get_manager_stats
from app.domain.models.user import User
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.statistics import AdvancedStats, ProjectStats
from app.interfaces.api.deps import check_maintenance, require_manager
from app.interfaces.deps import get_project_repository, get_user_repository

router = APIRouter(
    prefix="/api/manager",
    tags=["Manager"],
    dependencies=[Depends(check_maintenance)],
)


@router.get("/statistics", response_model=AdvancedStats)
def statistics(
    project_repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    manager: User = Depends(require_manager),
):
    return get_advanced_stats(project_repo, user_repo)


@router.get("/statistics/mine", response_model=ProjectStats)
def my_statistics(
    project_repo: ProjectRepository = Depends(get_project_repository),
    manager: User = Depends(require_manager),
):
    return get_manager_stats(project_repo, manager.email)


@router.get("/statistics/pdf")
def statistics_pdf(
    project_repo: ProjectRepository = Depends(get_project_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    manager: User = Depends(require_manager),
):
    stats = get_advanced_stats(project_repo, user_repo)
    content = render_statistics_pdf(stats, "Rapport statistique")
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="rapport_statistiques.pdf"'},
    )
