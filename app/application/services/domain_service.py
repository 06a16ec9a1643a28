"""Domain service — research domain reference data."""

from typing import List

import structlog

from app.core.exceptions import EntityNotFoundException, ValidationFailedException
from app.domain.models.domain import Domain
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.schemas.domain import DomainCreate, DomainRead
from app.infrastructure.repositories.domain_repository import SQLAlchemyDomainRepository

logger = structlog.get_logger(__name__)


def _to_read(domain: Domain, project_repo: ProjectRepository) -> DomainRead:
    read = DomainRead.model_validate(domain)
    read.project_count = project_repo.count_by_domain_name(domain.name)
    return read


def get_domain(repo: SQLAlchemyDomainRepository, domain_id: int) -> Domain:
    domain = repo.get_by_id(domain_id)
    if domain is None:
        raise EntityNotFoundException(f"Domaine introuvable : {domain_id}", details={"domain_id": domain_id})
    return domain


def list_domains(repo: SQLAlchemyDomainRepository, project_repo: ProjectRepository) -> List[DomainRead]:
    return [_to_read(d, project_repo) for d in repo.list()]


def _ensure_unique_name(repo: SQLAlchemyDomainRepository, name: str, current_id=None) -> None:
    existing = repo.get_by_name(name)
    if existing is not None and existing.id != current_id:
        raise ValidationFailedException("Ce domaine existe déjà", details={"name": name})


def create_domain(
    repo: SQLAlchemyDomainRepository,
    project_repo: ProjectRepository,
    data: DomainCreate,
) -> DomainRead:
    name = data.name.strip()
    _ensure_unique_name(repo, name)
    domain = repo.save(Domain(name=name, description=data.description))
    logger.info("Domain created", domain_id=domain.id, name=name)
    return _to_read(domain, project_repo)


def update_domain(
    repo: SQLAlchemyDomainRepository,
    project_repo: ProjectRepository,
    domain_id: int,
    data: DomainCreate,
) -> DomainRead:
    domain = get_domain(repo, domain_id)
    name = data.name.strip()
    _ensure_unique_name(repo, name, current_id=domain.id)

    domain.name = name
    domain.description = data.description
    domain = repo.save(domain)
    logger.info("Domain updated", domain_id=domain.id, name=name)
    return _to_read(domain, project_repo)


def delete_domain(repo: SQLAlchemyDomainRepository, domain_id: int) -> None:
    # Projects keep their free-text domain value.
    domain = get_domain(repo, domain_id)
    repo.delete(domain)
    logger.info("Domain deleted", domain_id=domain_id)
