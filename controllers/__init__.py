# controllers/__init__.py
from .collection import CollectionViewController, PageWindow, UserPicker, ViewStatus
from .counter import AggregateCounter, CountSnapshot
from .resolver import ParentKind, RelationshipResolver
from .mutations import (
    AssignmentContext, DeleteRequest, MutationCoordinator, MutationResult,
    TaskAssignment, TeamAssignment,
)
from .chat import ChatConversation, ChatMessage
from .dashboard import Dashboard
