"""Auth API routes — login, register, me, Google OAuth2."""

from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from app.application.services.auth_service import (
    OAUTH_STATE_MINUTES,
    authenticate_user,
    complete_profile,
    create_oauth_state,
    provision_oauth_user,
    register_user,
    token_for,
    verify_oauth_state,
)
from app.application.services.config_service import get_config
from app.core.exceptions import UnauthorizedException, ValidationFailedException
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import (
    AuthorizationUrl,
    LoginRequest,
    ProfileUpdate,
    TokenResponse,
    UserCreate,
    UserRead,
)
from app.infrastructure.oauth.google_provider import GoogleOAuthProvider, PROVIDER_NAME
from app.infrastructure.repositories.domain_repository import SQLAlchemyAppConfigRepository
from app.interfaces.api.deps import get_current_user
from app.interfaces.deps import get_config_repository, get_oauth_provider, get_user_repository

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(access_token=token_for(user), user=UserRead.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    user = authenticate_user(repo, body.email, body.password)
    if not user:
        raise UnauthorizedException("Email ou mot de passe incorrect")
    return _token_response(user)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    body: UserCreate,
    repo: UserRepository = Depends(get_user_repository),
    config_repo: SQLAlchemyAppConfigRepository = Depends(get_config_repository),
):
    user = register_user(repo, get_config(config_repo), body)
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)


@router.put("/me/profile", response_model=UserRead)
def update_my_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    return UserRead.model_validate(complete_profile(repo, user, body))


OAUTH_NONCE_COOKIE = "oauth_state_nonce"


@router.get("/oauth/google/login", response_model=AuthorizationUrl)
def google_login(
    response: Response,
    provider: GoogleOAuthProvider = Depends(get_oauth_provider),
):
    if not provider.configured:
        raise ValidationFailedException("Connexion Google non configurée")
    state, nonce = create_oauth_state()
    response.set_cookie(
        OAUTH_NONCE_COOKIE,
        nonce,
        max_age=OAUTH_STATE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return AuthorizationUrl(authorization_url=provider.get_authorization_url(state))


@router.get("/oauth/google/callback", response_model=TokenResponse)
async def google_callback(
    response: Response,
    code: str,
    state: Optional[str] = None,
    oauth_state_nonce: Optional[str] = Cookie(default=None),
    provider: GoogleOAuthProvider = Depends(get_oauth_provider),
    repo: UserRepository = Depends(get_user_repository),
):
    verify_oauth_state(state, oauth_state_nonce)
    response.delete_cookie(OAUTH_NONCE_COOKIE)

    info = await provider.authenticate(code)
    if info is None:
        raise UnauthorizedException("Échec de l'authentification Google")
    # Session work is blocking; keep it off the event loop
    user = await run_in_threadpool(provision_oauth_user, repo, PROVIDER_NAME, info)
    return await run_in_threadpool(_token_response, user)
