"""Domains API routes — research domain reference list."""

from fastapi import APIRouter, Depends, Response, status

from app.application.services import domain_service
from app.domain.models.user import User
from app.domain.repositories.project_repository import ProjectRepository
from app.domain.schemas.domain import DomainCreate, DomainRead
from app.infrastructure.repositories.domain_repository import SQLAlchemyDomainRepository
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_domain_repository, get_project_repository

router = APIRouter(prefix="/api/domains", tags=["Domains"])


@router.get("", response_model=list[DomainRead])
def list_domains(
    repo: SQLAlchemyDomainRepository = Depends(get_domain_repository),
    project_repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(get_current_user),
):
    return domain_service.list_domains(repo, project_repo)


@router.post("", response_model=DomainRead, status_code=status.HTTP_201_CREATED)
def create_domain(
    body: DomainCreate,
    repo: SQLAlchemyDomainRepository = Depends(get_domain_repository),
    project_repo: ProjectRepository = Depends(get_project_repository),
    admin: User = Depends(require_admin),
):
    return domain_service.create_domain(repo, project_repo, body)


@router.put("/{domain_id}", response_model=DomainRead)
def update_domain(
    domain_id: int,
    body: DomainCreate,
    repo: SQLAlchemyDomainRepository = Depends(get_domain_repository),
    project_repo: ProjectRepository = Depends(get_project_repository),
    admin: User = Depends(require_admin),
):
    return domain_service.update_domain(repo, project_repo, domain_id, body)


@router.delete("/{domain_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_domain(
    domain_id: int,
    repo: SQLAlchemyDomainRepository = Depends(get_domain_repository),
    admin: User = Depends(require_admin),
):
    domain_service.delete_domain(repo, domain_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
