"""Pydantic schemas for research projects."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.domain.models.project import ProjectStatus

# Columns that may be omitted from a partial update but never cleared
NON_NULLABLE_PROJECT_FIELDS = ("title", "status")


class ProjectBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    domain: Optional[str] = None
    status: ProjectStatus = ProjectStatus.EN_COURS
    progress: Optional[int] = Field(default=0, ge=0, le=100)
    supervisor: Optional[str] = None
    institution: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    external_participants: Optional[str] = None


class ProjectCreate(ProjectBase):
    member_ids: list[str] = []


class ProjectUpdate(BaseModel):
    """Partial update — only the fields sent are applied."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    domain: Optional[str] = None
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    supervisor: Optional[str] = None
    institution: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    external_participants: Optional[str] = None
    member_ids: Optional[list[str]] = None
    version: Optional[int] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for field in NON_NULLABLE_PROJECT_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class MemberRead(BaseModel):
    id: str
    email: str
    full_name: str

    model_config = {"from_attributes": True}


class ProjectRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    short_summary: str
    domain: Optional[str] = None
    status: ProjectStatus
    status_label: str
    progress: Optional[int] = None
    supervisor: Optional[str] = None
    institution: Optional[str] = None
    budget: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    participants_list: Optional[str] = None
    external_participants: Optional[str] = None
    owner: MemberRead
    members: list[MemberRead] = []
    is_modifiable: bool
    overdue: bool = False
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_project(cls, project, today: date) -> "ProjectRead":
        return cls.model_validate(project).model_copy(update={"overdue": project.is_overdue(today)})


class MembersAdd(BaseModel):
    user_ids: list[str]


class ExternalParticipantsUpdate(BaseModel):
    external_participants: Optional[str] = None
