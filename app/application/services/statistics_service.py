"""Statistics service — dashboard and report aggregates.

Global figures are computed with grouping queries; per-owner figures are
computed in memory over the owner's project list. Nothing is cached.
"""

from collections import Counter
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytz
import structlog

from app.config import get_settings
from app.domain.models.project import ResearchProject, ProjectStatus
from app.domain.models.user import User, Role
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.statistics import (
    AdvancedStats,
    CandidateStats,
    GlobalStats,
    OwnerProjectCount,
    ProjectStats,
)

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)
logger = structlog.get_logger(__name__)

MONTHS_WINDOW = 12


def get_current_date() -> date:
    """Get current date in the configured timezone."""
    return datetime.now(tz).date()


def mean_progress(values: Iterable[Optional[int]]) -> float:
    """Mean of the non-null progress values, one decimal, 0.0 when none."""
    present = [v for v in values if v is not None]
    if not present:
        return 0.0
    return round(sum(present) / len(present), 1)


def month_key(d) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_window(today: date, months: int = MONTHS_WINDOW) -> List[str]:
    """Month keys from `months - 1` months ago up to the current month, oldest first."""
    keys = []
    year, month = today.year, today.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(keys))


def window_start(today: date, months: int = MONTHS_WINDOW) -> datetime:
    first = month_window(today, months)[0]
    year, month = (int(part) for part in first.split("-"))
    return datetime.combine(date(year, month, 1), time.min)


def bucket_by_month(stamps: Iterable[datetime], window: Sequence[str]) -> Dict[str, int]:
    """Count timestamps per month key; every month of the window is present."""
    buckets = {key: 0 for key in window}
    for stamp in stamps:
        key = month_key(stamp)
        if key in buckets:
            buckets[key] += 1
    return buckets


def with_placeholder(grouping: Dict, zero) -> Dict:
    """Empty groupings fall back to the configured placeholder domains."""
    if grouping or not settings.STATS_PLACEHOLDER_DOMAINS:
        return grouping
    return {name: zero for name in settings.STATS_PLACEHOLDER_DOMAINS}


def _owner_counts(rows: Iterable[dict]) -> Dict[str, OwnerProjectCount]:
    result = {}
    for row in rows:
        name = " ".join(p for p in (row["first_name"], row["last_name"]) if p) or row["email"]
        result[row["email"]] = OwnerProjectCount(name=name, email=row["email"], count=row["count"])
    return result


def summarize_projects(projects: List[ResearchProject]) -> ProjectStats:
    """Compute the project metrics over an in-memory project list."""
    statuses = Counter(ProjectStatus(p.status) for p in projects)

    by_domain: Dict[str, int] = {}
    budget_by_domain: Dict[str, float] = {}
    owners: Dict[str, dict] = {}
    for p in projects:
        if p.domain is not None:
            by_domain[p.domain] = by_domain.get(p.domain, 0) + 1
            if p.budget is not None:
                budget_by_domain[p.domain] = budget_by_domain.get(p.domain, 0.0) + p.budget
        if p.owner is not None:
            entry = owners.setdefault(
                p.owner.email,
                {"first_name": p.owner.first_name, "last_name": p.owner.last_name,
                 "email": p.owner.email, "count": 0},
            )
            entry["count"] += 1

    return ProjectStats(
        total_projects=len(projects),
        projects_en_cours=statuses[ProjectStatus.EN_COURS],
        projects_suspendus=statuses[ProjectStatus.SUSPENDU],
        projects_termines=statuses[ProjectStatus.TERMINE],
        average_progress=mean_progress(p.progress for p in projects),
        total_budget=float(sum(p.budget for p in projects if p.budget is not None)),
        projects_by_domain=with_placeholder(by_domain, 0),
        budget_by_domain=with_placeholder(budget_by_domain, 0.0),
        projects_by_owner=_owner_counts(owners.values()),
    )


def get_global_stats(project_repo: ProjectRepository, user_repo: UserRepository) -> GlobalStats:
    average = project_repo.average_progress()
    by_domain = {row["domain"]: row["count"] for row in project_repo.count_by_domain()}
    budget_by_domain = {row["domain"]: row["budget"] for row in project_repo.sum_budget_by_domain()}

    return GlobalStats(
        total_projects=project_repo.count(),
        projects_en_cours=project_repo.count_by_status(ProjectStatus.EN_COURS),
        projects_suspendus=project_repo.count_by_status(ProjectStatus.SUSPENDU),
        projects_termines=project_repo.count_by_status(ProjectStatus.TERMINE),
        average_progress=round(average, 1) if average is not None else 0.0,
        total_budget=project_repo.sum_budget(),
        projects_by_domain=with_placeholder(by_domain, 0),
        budget_by_domain=with_placeholder(budget_by_domain, 0.0),
        projects_by_owner=_owner_counts(project_repo.count_by_owner()),
        total_users=user_repo.count(),
        users_by_role=user_repo.count_by_role(),
    )


def new_users_by_month(
    creations: Iterable[Tuple[datetime, Role]],
    window: Sequence[str],
) -> Tuple[Dict[str, int], Dict[str, Dict[str, int]]]:
    """Monthly totals plus a per-role breakdown summing to the same totals."""
    creations = list(creations)
    by_role = {
        role.value: bucket_by_month((stamp for stamp, r in creations if r == role), window)
        for role in Role
    }
    totals = bucket_by_month((stamp for stamp, _ in creations), window)
    return totals, by_role


def get_advanced_stats(
    project_repo: ProjectRepository,
    user_repo: UserRepository,
    today: Optional[date] = None,
) -> AdvancedStats:
    today = today or get_current_date()
    base = get_global_stats(project_repo, user_repo)
    window = month_window(today)
    since = window_start(today)

    users_total, users_by_role = new_users_by_month(user_repo.creations_since(since), window)

    stats = AdvancedStats(
        **base.model_dump(),
        overdue_projects=project_repo.count_overdue(today),
        projects_by_month=bucket_by_month(project_repo.creation_dates_since(since), window),
        new_users_by_month=users_total,
        new_users_by_month_by_role=users_by_role,
        users_by_institution=user_repo.count_by_institution(),
    )
    logger.info("Advanced statistics computed", today=today.isoformat(), projects=stats.total_projects)
    return stats


def get_manager_stats(project_repo: ProjectRepository, owner_email: str) -> ProjectStats:
    return summarize_projects(project_repo.get_by_owner_email(owner_email))


def get_candidate_stats(
    project_repo: ProjectRepository,
    user: User,
    today: Optional[date] = None,
) -> CandidateStats:
    today = today or get_current_date()
    projects = project_repo.get_by_owner(user.id)
    summary = summarize_projects(projects)
    return CandidateStats(
        total_projects=summary.total_projects,
        projects_en_cours=summary.projects_en_cours,
        projects_suspendus=summary.projects_suspendus,
        projects_termines=summary.projects_termines,
        overdue_projects=sum(1 for p in projects if p.is_overdue(today)),
        average_progress=summary.average_progress,
    )
