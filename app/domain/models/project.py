"""Research project domain model — maps to the 'research_projects' table."""

import enum
from datetime import date

from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, Enum, ForeignKey, Table, Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.infrastructure.database import Base

DEFAULT_DOMAIN = "Non spécifié"
SUMMARY_LENGTH = 120


class ProjectStatus(str, enum.Enum):
    EN_COURS = "EN_COURS"
    SUSPENDU = "SUSPENDU"
    TERMINE = "TERMINE"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    ProjectStatus.EN_COURS: "En cours",
    ProjectStatus.SUSPENDU: "Suspendu",
    ProjectStatus.TERMINE: "Terminé",
}


project_members = Table(
    "project_members",
    Base.metadata,
    Column("project_id", Integer, ForeignKey("research_projects.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class ResearchProject(Base):
    __tablename__ = "research_projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    participants_list = Column(Text, nullable=True)  # derived from members + external_participants
    external_participants = Column(Text, nullable=True)
    domain = Column(String(255), nullable=True, index=True)
    status = Column(
        Enum(ProjectStatus, native_enum=False, length=20),
        nullable=False,
        default=ProjectStatus.EN_COURS,
        index=True,
    )
    progress = Column(Integer, nullable=True)  # create_project sets 0; NULL means not reported
    supervisor = Column(String(255), nullable=True)
    institution = Column(String(255), nullable=True)
    budget = Column(Float, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True, index=True)
    version = Column(Integer, nullable=False, default=1)

    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    owner = relationship("User", lazy="joined")
    members = relationship(
        "User",
        secondary=project_members,
        lazy="selectin",
        order_by="User.email",
        backref="member_projects",
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_modifiable(self) -> bool:
        return self.status != ProjectStatus.TERMINE

    def is_overdue(self, today: date) -> bool:
        """End date strictly before today and the project is not finished."""
        if self.end_date is None:
            return False
        return self.end_date < today and self.status != ProjectStatus.TERMINE

    @property
    def status_label(self) -> str:
        return ProjectStatus(self.status).label

    @property
    def short_summary(self) -> str:
        if not self.description or not self.description.strip():
            return "Aucune description"
        if len(self.description) <= SUMMARY_LENGTH:
            return self.description
        return self.description[: SUMMARY_LENGTH - 3] + "..."

    def __repr__(self):
        return f"<ResearchProject {self.id} - {self.title}>"
