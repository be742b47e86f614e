# models/team.py
from sqlmodel import Field
from typing import Optional
from datetime import datetime

from models.base import ApiModel


class Team(ApiModel):
    id: str
    name: str
    owner_id: str = Field(alias="ownerId")
    project_id: str = Field(alias="projectId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class TeamCreate(ApiModel):
    name: str = Field(min_length=1)
    owner_id: str = Field(min_length=1, alias="ownerId")
    project_id: str = Field(min_length=1, alias="projectId")


class TeamUpdate(ApiModel):
    name: Optional[str] = None
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    project_id: Optional[str] = Field(default=None, alias="projectId")
