"""Pydantic schemas for dashboard and report statistics."""

from pydantic import BaseModel

from app.domain.schemas.project import ProjectRead


class OwnerProjectCount(BaseModel):
    name: str
    email: str
    count: int


class ProjectStats(BaseModel):
    total_projects: int
    projects_en_cours: int
    projects_suspendus: int
    projects_termines: int
    average_progress: float
    total_budget: float
    projects_by_domain: dict[str, int]
    budget_by_domain: dict[str, float]
    projects_by_owner: dict[str, OwnerProjectCount]  # keyed by owner email


class GlobalStats(ProjectStats):
    total_users: int
    users_by_role: dict[str, int]


class AdvancedStats(GlobalStats):
    overdue_projects: int
    projects_by_month: dict[str, int]
    new_users_by_month: dict[str, int]
    new_users_by_month_by_role: dict[str, dict[str, int]]
    users_by_institution: dict[str, int]


class CandidateStats(BaseModel):
    total_projects: int
    projects_en_cours: int
    projects_suspendus: int
    projects_termines: int
    overdue_projects: int
    average_progress: float


class StaffDashboard(BaseModel):
    stats: AdvancedStats
    recent_projects: list[ProjectRead]


class CandidateDashboard(BaseModel):
    stats: CandidateStats
    projects: list[ProjectRead]
