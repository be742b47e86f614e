# models/__init__.py
from .project import Project, ProjectCreate, ProjectUpdate
from .team import Team, TeamCreate, TeamUpdate
from .user import User, UserCreate, UserUpdate, UserRole
from .task import Task, TaskCreate, TaskUpdate, TaskStatus
from .chat import ChatRequest, ChatResponse, ChatSource, ChatMetadata
from .page import Page
from .kinds import EntityKind, ENTITY_MODELS, CREATE_MODELS, UPDATE_MODELS
