# controllers/mutations.py
"""
Single entry point for create / update / delete / assign.

Every successful mutation is followed by the smallest set of refreshes that
keeps the dashboard consistent:

    create  -> refresh the kind's current page, refresh counts
    update  -> refresh the kind's current page, evict changed relationships
    delete  -> refresh the kind's current page, refresh counts, evict
    assign  -> an update of Task.assignedTo or User.teamId

Displayed lists are only ever corrected by re-fetching, never by splicing
records in or out locally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from controllers.collection import CollectionViewController, UserPicker
from controllers.counter import AggregateCounter
from controllers.resolver import ParentKind, RelationshipResolver
from errors import GatewayError
from models import CREATE_MODELS, UPDATE_MODELS, EntityKind, TaskUpdate, UserUpdate

logger = logging.getLogger(__name__)

# (entity kind, attribute) -> resolver entries keyed by that attribute's value
FOREIGN_KEYS: Dict[EntityKind, List[Tuple[str, ParentKind]]] = {
    EntityKind.USERS: [("team_id", ParentKind.TEAM)],
    EntityKind.TEAMS: [("project_id", ParentKind.PROJECT)],
    EntityKind.TASKS: [],
    EntityKind.PROJECTS: [],
}

# views that show records pointing at the deleted kind
DEPENDENT_VIEWS: Dict[EntityKind, List[EntityKind]] = {
    EntityKind.PROJECTS: [EntityKind.TEAMS],
    EntityKind.TEAMS: [EntityKind.USERS],
    EntityKind.USERS: [],
    EntityKind.TASKS: [],
}


@dataclass(frozen=True)
class TaskAssignment:
    """Reassign a task: the chosen user becomes Task.assignedTo."""

    task_id: str
    current_user_id: Optional[str] = None


@dataclass(frozen=True)
class TeamAssignment:
    """Add a user to a team: the chosen user's teamId becomes ``team_id``."""

    team_id: str


AssignmentContext = Union[TaskAssignment, TeamAssignment]


@dataclass(frozen=True)
class DeleteRequest:
    kind: EntityKind
    record_id: str
    label: str = ""
    record: Any = None
    confirmed: bool = False

    def confirm(self) -> "DeleteRequest":
        return replace(self, confirmed=True)


@dataclass
class MutationResult:
    ok: bool
    record: Any = None
    error: Optional[str] = None


def validation_message(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def _changed_fields(patch: Any) -> Dict[str, Any]:
    return {name: getattr(patch, name) for name in patch.model_fields_set}


class MutationCoordinator:
    def __init__(self, gateways: Mapping[EntityKind, Any],
                 views: Mapping[EntityKind, CollectionViewController],
                 counter: AggregateCounter, resolver: RelationshipResolver,
                 picker: Optional[UserPicker] = None):
        self.gateways = dict(gateways)
        self.views = dict(views)
        self.counter = counter
        self.resolver = resolver
        self.picker = picker

    # ---- operations ----
    async def create(self, kind: EntityKind, payload: Any) -> MutationResult:
        kind = EntityKind(kind)
        if isinstance(payload, dict):
            try:
                payload = CREATE_MODELS[kind].model_validate(payload)
            except PydanticValidationError as e:
                return MutationResult(ok=False, error=validation_message(e))
        try:
            record = await self.gateways[kind].create(payload)
        except GatewayError as e:
            logger.warning(f"create {kind.singular} failed: {e}")
            return MutationResult(ok=False, error=str(e))

        logger.info(f"created {kind.singular} {record.id}")
        for attr, parent_kind in FOREIGN_KEYS[kind]:
            self.resolver.evict(parent_kind, getattr(record, attr, None))
        await self.views[kind].refresh()
        await self.counter.refresh()
        return MutationResult(ok=True, record=record)

    async def update(self, kind: EntityKind, record_id: str, patch: Any,
                     previous: Any = None) -> MutationResult:
        kind = EntityKind(kind)
        if isinstance(patch, dict):
            try:
                patch = UPDATE_MODELS[kind].model_validate(patch)
            except PydanticValidationError as e:
                return MutationResult(ok=False, error=validation_message(e))
        previous = previous if previous is not None else self._find_known(kind, record_id)
        try:
            record = await self.gateways[kind].update(record_id, patch)
        except GatewayError as e:
            logger.warning(f"update {kind.singular} {record_id} failed: {e}")
            return MutationResult(ok=False, error=str(e))

        logger.info(f"updated {kind.singular} {record_id}")
        self._evict_after_update(kind, record, previous, _changed_fields(patch))
        await self.views[kind].refresh()
        return MutationResult(ok=True, record=record)

    async def delete(self, request: DeleteRequest) -> MutationResult:
        if not request.confirmed:
            raise ValueError("Delete requests must be confirmed before dispatch")
        kind = EntityKind(request.kind)
        record = request.record if request.record is not None else self._find_known(kind, request.record_id)
        try:
            await self.gateways[kind].delete(request.record_id)
        except GatewayError as e:
            logger.warning(f"delete {kind.singular} {request.record_id} failed: {e}")
            return MutationResult(ok=False, error=str(e))

        logger.info(f"deleted {kind.singular} {request.record_id}")
        self._evict_after_delete(kind, request.record_id, record)
        for dependent in DEPENDENT_VIEWS[kind]:
            self.views[dependent].invalidate()
        await self.views[kind].refresh()
        await self.counter.refresh()
        return MutationResult(ok=True, record=record)

    async def assign(self, context: AssignmentContext, user_id: str) -> MutationResult:
        if isinstance(context, TaskAssignment):
            previous = self._find_known(EntityKind.TASKS, context.task_id)
            return await self.update(EntityKind.TASKS, context.task_id,
                                     TaskUpdate(assigned_to=user_id), previous=previous)
        if isinstance(context, TeamAssignment):
            return await self.update(EntityKind.USERS, user_id,
                                     UserUpdate(team_id=context.team_id))
        raise TypeError(f"Unsupported assignment context: {context!r}")

    # ---- invalidation ----
    def _find_known(self, kind: EntityKind, record_id: str) -> Any:
        view = self.views.get(kind)
        record = view.find(record_id) if view is not None else None
        if record is None and kind is EntityKind.USERS:
            record = self.picker.find(record_id) if self.picker is not None else None
        return record

    def _evict_after_update(self, kind: EntityKind, record: Any, previous: Any,
                            changed: Dict[str, Any]) -> None:
        for attr, parent_kind in FOREIGN_KEYS[kind]:
            if attr not in changed:
                continue
            if previous is not None and getattr(previous, attr, None) == getattr(record, attr, None):
                continue  # sent but unchanged
            if previous is None:
                # old parent unknown: drop every entry of that parent kind
                self.resolver.evict_kind(parent_kind)
            else:
                self.resolver.evict(parent_kind, getattr(previous, attr, None))
            self.resolver.evict(parent_kind, getattr(record, attr, None))
        if (kind is EntityKind.TASKS and "assigned_to" in changed
                and getattr(previous, "assigned_to", None) != record.assigned_to):
            self.resolver.evict(ParentKind.TASK, record.id)
        # cached copies of this record are now outdated
        self.resolver.evict_holding(record.id)

    def _evict_after_delete(self, kind: EntityKind, record_id: str, record: Any) -> None:
        if kind is EntityKind.PROJECTS:
            self.resolver.evict(ParentKind.PROJECT, record_id)
        elif kind is EntityKind.TEAMS:
            self.resolver.evict(ParentKind.TEAM, record_id)
        elif kind is EntityKind.TASKS:
            self.resolver.evict(ParentKind.TASK, record_id)

        for attr, parent_kind in FOREIGN_KEYS[kind]:
            parent_id = getattr(record, attr, None) if record is not None else None
            if parent_id:
                self.resolver.evict(parent_kind, parent_id)
            elif record is None:
                self.resolver.evict_kind(parent_kind)
        self.resolver.evict_holding(record_id)
