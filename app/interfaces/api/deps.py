"""FastAPI dependency — JWT auth and role guards."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.application.services.auth_service import decode_access_token
from app.application.services.config_service import get_config
from app.application.services.project_service import ensure_profile_complete
from app.core.exceptions import ForbiddenException, MaintenanceModeException, UnauthorizedException
from app.domain.models.user import User, Role
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.domain_repository import SQLAlchemyAppConfigRepository
from app.interfaces.deps import get_config_repository, get_user_repository

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Extract and validate the current user from JWT token.

    The user is re-read on every request, so role changes and
    deactivations apply immediately whatever the token says.
    """
    if credentials is None:
        raise UnauthorizedException("Authentification requise")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Token invalide ou expiré")

    email: Optional[str] = payload.get("sub")
    if email is None:
        raise UnauthorizedException("Token invalide")

    user = repo.get_by_email(email)
    if user is None or not user.is_active:
        raise UnauthorizedException("Utilisateur introuvable ou désactivé")

    return user


def require_roles(*roles: Role):
    """Build a dependency that only lets the given roles through."""
    allowed = set(roles)

    def dependency(user: User = Depends(get_current_user)) -> User:
        if Role.parse(user.role) not in allowed:
            raise ForbiddenException(
                "Accès refusé", details={"required_roles": sorted(r.value for r in allowed)}
            )
        return user

    return dependency


require_admin = require_roles(Role.ADMIN)
require_staff = require_roles(Role.ADMIN, Role.MANAGER)
require_manager = require_roles(Role.MANAGER)
require_candidate = require_roles(Role.CANDIDATE)


def check_maintenance(
    user: User = Depends(get_current_user),
    config_repo: SQLAlchemyAppConfigRepository = Depends(get_config_repository),
) -> User:
    """Non-admin users are locked out while maintenance mode is on."""
    if get_config(config_repo).maintenance_mode and Role.parse(user.role) != Role.ADMIN:
        raise MaintenanceModeException()
    return user


def require_complete_profile(user: User = Depends(check_maintenance)) -> User:
    ensure_profile_complete(user)
    return user
