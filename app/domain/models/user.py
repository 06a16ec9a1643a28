"""User domain model — maps to the 'users' table."""

import enum
import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Enum, Text
from sqlalchemy.sql import func

from app.infrastructure.database import Base


class Role(str, enum.Enum):
    CANDIDATE = "CANDIDATE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Normalise free-form role input ("role_candidat", "MANAGER", ...).

        Raises ValueError for anything outside the closed set.
        """
        if isinstance(value, Role):
            return value
        text = (value or "").strip().upper()
        if text.startswith("ROLE_"):
            text = text[len("ROLE_"):]
        text = _LEGACY_ROLE_NAMES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}") from None

    @property
    def is_staff(self) -> bool:
        return self in (Role.ADMIN, Role.MANAGER)


_LEGACY_ROLE_NAMES = {
    "CANDIDAT": "CANDIDATE",
    "GESTIONNAIRE": "MANAGER",
}


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)  # NULL for OAuth-only accounts
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False, default=Role.CANDIDATE, index=True)

    # Profile
    institution = Column(String(255), nullable=True)
    department = Column(String(255), nullable=True)
    specialty = Column(String(255), nullable=True)
    study_level = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)

    # OAuth2
    oauth_id = Column(String(255), nullable=True)
    provider = Column(String(50), nullable=True)
    picture = Column(String(500), nullable=True)

    profile_completed = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.email

    def has_required_profile(self) -> bool:
        """Institution and phone are the fields a candidate must provide."""
        return bool(self.institution and self.institution.strip() and self.phone and self.phone.strip())

    def compute_profile_completed(self) -> bool:
        if Role.parse(self.role).is_staff:
            return True
        return self.has_required_profile()

    def __repr__(self):
        return f"<User {self.email}>"
