"""Pydantic schemas for User and Auth."""

from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional

from app.domain.models.user import Role


class UserCreate(BaseModel):
    email: str
    password: str
    confirm_password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    institution: Optional[str] = None
    role: str = Role.CANDIDATE.value

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Adresse email invalide")
        return v


class UserRead(BaseModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str
    phone: Optional[str] = None
    role: Role
    institution: Optional[str] = None
    department: Optional[str] = None
    specialty: Optional[str] = None
    study_level: Optional[str] = None
    bio: Optional[str] = None
    provider: Optional[str] = None
    picture: Optional[str] = None
    profile_completed: bool
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    institution: Optional[str] = None
    department: Optional[str] = None
    specialty: Optional[str] = None
    study_level: Optional[str] = None
    bio: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class OAuthUserInfo(BaseModel):
    """Normalised identity returned by an OAuth2 provider."""
    subject: str
    email: str
    email_verified: bool = False
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None


class AuthorizationUrl(BaseModel):
    authorization_url: str
