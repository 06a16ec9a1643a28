"""Pydantic schemas for research domains and site settings."""

from typing import Optional

from pydantic import BaseModel, Field


class DomainCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class DomainRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    project_count: int = 0

    model_config = {"from_attributes": True}


class AppConfigRead(BaseModel):
    site_name: str
    contact_email: str
    maintenance_mode: bool
    registration_open: bool
    version: str

    model_config = {"from_attributes": True}


class AppConfigUpdate(BaseModel):
    site_name: Optional[str] = None
    contact_email: Optional[str] = None
    maintenance_mode: Optional[bool] = None
    registration_open: Optional[bool] = None
