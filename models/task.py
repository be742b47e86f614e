# models/task.py
from sqlmodel import Field
from typing import Optional
from datetime import datetime
from enum import Enum

from models.base import ApiModel


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class Task(ApiModel):
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    assigned_to: str = Field(alias="assignedTo")
    # kept as the server sends it ("2025-03-01" or a full ISO timestamp)
    deadline: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class TaskCreate(ApiModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    assigned_to: str = Field(min_length=1, alias="assignedTo")
    deadline: Optional[str] = None


class TaskUpdate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")
    deadline: Optional[str] = None
