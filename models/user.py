# models/user.py
from sqlmodel import Field
from typing import Optional
from datetime import datetime
from enum import Enum

from models.base import ApiModel


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"


class User(ApiModel):
    id: str
    email: str
    name: str
    role: UserRole = UserRole.MEMBER
    team_id: Optional[str] = Field(default=None, alias="teamId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class UserCreate(ApiModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: UserRole = UserRole.MEMBER
    team_id: Optional[str] = Field(default=None, alias="teamId")


class UserUpdate(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)
    name: Optional[str] = None
    role: Optional[UserRole] = None
    team_id: Optional[str] = Field(default=None, alias="teamId")
