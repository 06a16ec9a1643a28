"""Auth service — JWT tokens, password hashing and account provisioning."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.core.exceptions import ForbiddenException, UnauthorizedException, ValidationFailedException
from app.domain.models.app_config import AppConfig
from app.domain.models.user import User, Role
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import OAuthUserInfo, ProfileUpdate, UserCreate

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None


OAUTH_STATE_PURPOSE = "oauth_state"
OAUTH_STATE_MINUTES = 10


def create_oauth_state() -> Tuple[str, str]:
    """Signed `state` for the authorization URL plus the nonce bound to the browser."""
    nonce = secrets.token_urlsafe(16)
    state = create_access_token(
        data={"purpose": OAUTH_STATE_PURPOSE, "nonce": nonce},
        expires_delta=timedelta(minutes=OAUTH_STATE_MINUTES),
    )
    return state, nonce


def verify_oauth_state(state: Optional[str], nonce: Optional[str]) -> None:
    """The callback state must be ours, unexpired, and match the browser nonce."""
    payload = decode_access_token(state) if state else None
    if (
        payload is None
        or payload.get("purpose") != OAUTH_STATE_PURPOSE
        or not nonce
        or not secrets.compare_digest(str(payload.get("nonce", "")), nonce)
    ):
        raise UnauthorizedException("Paramètre state OAuth invalide")


def token_for(user: User) -> str:
    # The role claim is informational only; authorization re-reads the user.
    return create_access_token(data={"sub": user.email, "role": Role.parse(user.role).value})


def parse_role(value: str) -> Role:
    try:
        return Role.parse(value)
    except ValueError:
        raise ValidationFailedException(
            "Rôle invalide", details={"role": value, "allowed": [r.value for r in Role]}
        )


def authenticate_user(repo: UserRepository, email: str, password: str) -> Optional[User]:
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        return None
    if not user.is_active:
        return None
    return user


def create_user(repo: UserRepository, data: UserCreate) -> User:
    """Create an account with a hashed password; the email must be unused."""
    if data.confirm_password is not None and data.password != data.confirm_password:
        raise ValidationFailedException("Les mots de passe ne correspondent pas")
    if not data.password:
        raise ValidationFailedException("Le mot de passe est obligatoire")
    if repo.get_by_email(data.email):
        raise ValidationFailedException("Email déjà utilisé", details={"email": data.email})

    role = parse_role(data.role)
    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        institution=data.institution,
        role=role,
        is_active=True,
    )
    user.profile_completed = user.compute_profile_completed()
    user = repo.save(user)
    logger.info("User created", user_id=user.id, email=user.email, role=role.value)
    return user


def register_user(repo: UserRepository, config: AppConfig, data: UserCreate) -> User:
    """Self-service registration, gated by the registration toggle."""
    if not config.registration_open:
        raise ForbiddenException("Les inscriptions sont fermées")
    return create_user(repo, data)


def provision_oauth_user(repo: UserRepository, provider: str, info: OAuthUserInfo) -> User:
    """Find or create the account behind an OAuth2 login.

    - unseen email: new CANDIDATE with an incomplete profile
    - existing email without a linked provider: link it and recompute completion
    - unverified provider email: refused, nothing is created or linked
    """
    provider = provider.upper()
    if not info.email_verified:
        logger.warning("OAuth login refused, email not verified", provider=provider)
        raise UnauthorizedException("Adresse email non vérifiée par le fournisseur")

    user = repo.get_by_email(info.email)

    if user is None:
        user = User(
            email=info.email.strip().lower(),
            first_name=info.given_name,
            last_name=info.family_name,
            picture=info.picture,
            oauth_id=info.subject,
            provider=provider,
            role=Role.CANDIDATE,
            is_active=True,
            profile_completed=False,
        )
        user = repo.save(user)
        logger.info("OAuth user created", user_id=user.id, provider=provider)
        return user

    if not user.is_active:
        raise UnauthorizedException("Compte désactivé")

    if user.oauth_id is not None and user.oauth_id != info.subject:
        logger.warning("OAuth login refused, account linked to another subject", user_id=user.id)
        raise UnauthorizedException("Compte déjà lié à un autre compte Google")

    if user.oauth_id is None:
        user.oauth_id = info.subject
        user.provider = provider
        if user.picture is None:
            user.picture = info.picture
        user.profile_completed = user.compute_profile_completed()
        user = repo.save(user)
        logger.info("OAuth provider linked", user_id=user.id, provider=provider)

    return user


def complete_profile(repo: UserRepository, user: User, data: ProfileUpdate) -> User:
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    user.profile_completed = user.compute_profile_completed()
    user = repo.save(user)
    logger.info("Profile updated", user_id=user.id, profile_completed=user.profile_completed)
    return user


def ensure_default_admin(repo: UserRepository, email: str, password: str) -> Optional[User]:
    """Create the bootstrap admin account if it does not exist yet."""
    if repo.get_by_email(email):
        return None
    return create_user(
        repo,
        UserCreate(email=email, password=password, first_name="Admin", role=Role.ADMIN.value),
    )
