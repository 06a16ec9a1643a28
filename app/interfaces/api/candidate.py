"""Candidate API routes — personal dashboard."""

from fastapi import APIRouter, Depends

from app.application.services.project_service import ensure_profile_complete
from app.application.services.statistics_service import get_candidate_stats, get_current_date
from app.domain.models.user import User
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.schemas.project import ProjectRead
from app.domain.schemas.statistics import CandidateDashboard
from app.interfaces.api.deps import check_maintenance, require_candidate
from app.interfaces.deps import get_project_repository

router = APIRouter(
    prefix="/api/candidate",
    tags=["Candidate"],
    dependencies=[Depends(check_maintenance)],
)


@router.get("/dashboard", response_model=CandidateDashboard)
def dashboard(
    repo: ProjectRepository = Depends(get_project_repository),
    candidate: User = Depends(require_candidate),
):
    ensure_profile_complete(candidate)
    today = get_current_date()
    projects = repo.get_by_owner(candidate.id)
    return CandidateDashboard(
        stats=get_candidate_stats(repo, candidate, today),
        projects=[ProjectRead.from_project(p, today) for p in projects],
    )
