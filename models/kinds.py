# models/kinds.py
from enum import Enum

from models.project import Project, ProjectCreate, ProjectUpdate
from models.task import Task, TaskCreate, TaskUpdate
from models.team import Team, TeamCreate, TeamUpdate
from models.user import User, UserCreate, UserUpdate


class EntityKind(str, Enum):
    TEAMS = "teams"
    PROJECTS = "projects"
    TASKS = "tasks"
    USERS = "users"

    @property
    def label(self) -> str:
        return self.value.title()

    @property
    def singular(self) -> str:
        return self.value[:-1]


ENTITY_MODELS = {
    EntityKind.TEAMS: Team,
    EntityKind.PROJECTS: Project,
    EntityKind.TASKS: Task,
    EntityKind.USERS: User,
}

CREATE_MODELS = {
    EntityKind.TEAMS: TeamCreate,
    EntityKind.PROJECTS: ProjectCreate,
    EntityKind.TASKS: TaskCreate,
    EntityKind.USERS: UserCreate,
}

UPDATE_MODELS = {
    EntityKind.TEAMS: TeamUpdate,
    EntityKind.PROJECTS: ProjectUpdate,
    EntityKind.TASKS: TaskUpdate,
    EntityKind.USERS: UserUpdate,
}
