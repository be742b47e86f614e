# models/project.py
from sqlmodel import Field
from typing import Optional
from datetime import datetime

from models.base import ApiModel


class Project(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class ProjectCreate(ApiModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class ProjectUpdate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
