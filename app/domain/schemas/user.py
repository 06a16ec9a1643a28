"""Pydantic schemas for admin user management."""

from typing import Optional

from pydantic import BaseModel, model_validator

from app.domain.schemas.auth import UserCreate


class AdminUserCreate(UserCreate):
    pass


class AdminUserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    institution: Optional[str] = None
    department: Optional[str] = None
    specialty: Optional[str] = None
    study_level: Optional[str] = None
    bio: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def flags_not_null(self):
        for field in ("role", "is_active"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class RoleChange(BaseModel):
    role: str
