# controllers/dashboard.py
"""
Dashboard state: wires operator intents to the controllers.

The Streamlit layer renders this object and forwards clicks to it; it keeps
only transient UI flags (which form, view, picker or confirmation is open)
and owns no records itself.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Set, Tuple

from api import ChatGateway, EntityGateway, SessionContext, build_gateways
from config import Settings
from controllers.chat import ChatConversation
from controllers.collection import CollectionViewController, UserPicker
from controllers.counter import AggregateCounter
from controllers.mutations import AssignmentContext, DeleteRequest, MutationCoordinator
from controllers.resolver import ParentKind, RelationshipResolver
from errors import GatewayError
from models import EntityKind
from utils.retry import RetryPolicy

logger = logging.getLogger(__name__)


def record_label(record: Any) -> str:
    return getattr(record, "name", None) or getattr(record, "title", None) or getattr(record, "id", "")


class Dashboard:
    def __init__(self, session: SessionContext, settings: Optional[Settings] = None,
                 gateways: Optional[Dict[EntityKind, EntityGateway]] = None,
                 chat_gateway: Optional[ChatGateway] = None):
        settings = settings or Settings()
        retry = RetryPolicy(max_retries=settings.http_retries)
        self.session = session
        self.settings = settings
        self.gateways = gateways or build_gateways(session, retry)

        self.views: Dict[EntityKind, CollectionViewController] = {
            kind: CollectionViewController(self.gateways[kind], page_size=settings.page_size)
            for kind in EntityKind
        }
        self.picker = UserPicker(self.gateways[EntityKind.USERS], page_size=settings.picker_page_size)
        self.counter = AggregateCounter(self.gateways)
        self.resolver = RelationshipResolver(
            self.gateways[EntityKind.TEAMS],
            self.gateways[EntityKind.USERS],
            fetch_limit=settings.relation_fetch_limit,
        )
        self.mutations = MutationCoordinator(self.gateways, self.views, self.counter,
                                             self.resolver, self.picker)
        self.chat = ChatConversation(chat_gateway or ChatGateway(session, retry), api_url=session.base_url)

        self.started = False
        self.active_view: Optional[EntityKind] = None
        self.form_kind: Optional[EntityKind] = None
        self.editing: Any = None
        self.form_error: Optional[str] = None
        self.pending_delete: Optional[DeleteRequest] = None
        self.notice: Optional[str] = None
        self.flash: Optional[str] = None
        self.expanded: Set[Tuple[ParentKind, str]] = set()
        self.options: Dict[EntityKind, list] = {}

    # ---- session ----
    async def start(self) -> None:
        """Runs once per session: the dashboard cards need counts right away."""
        if self.started:
            return
        self.started = True
        await self.counter.refresh()

    def logout(self) -> None:
        self.session.close()
        for view in self.views.values():
            view.reset()
        self.picker.reset()
        self.picker.close()
        self.resolver.clear()
        self.counter.snapshot = None
        self.chat.reset()
        self.started = False
        self.active_view = None
        self.close_form()
        self.pending_delete = None
        self.notice = None
        self.flash = None
        self.expanded.clear()

    # ---- views ----
    async def open_view(self, kind: EntityKind) -> None:
        kind = EntityKind(kind)
        self.active_view = kind
        await self.views[kind].open()

    def close_view(self) -> None:
        self.active_view = None

    async def search(self, kind: EntityKind, term: str) -> None:
        await self.views[EntityKind(kind)].search(term)

    async def paginate(self, kind: EntityKind, page: int) -> None:
        await self.views[EntityKind(kind)].go_to(page)

    # ---- forms ----
    def open_form(self, kind: EntityKind, record: Any = None) -> None:
        self.form_kind = EntityKind(kind)
        self.editing = record
        self.form_error = None
        self.options = {}

    def close_form(self) -> None:
        self.form_kind = None
        self.editing = None
        self.form_error = None
        self.options = {}

    async def load_options(self, kind: EntityKind) -> list:
        """Choices for a form dropdown (teams for users, projects and owners
        for teams, users for tasks); fetched once per opened form."""
        kind = EntityKind(kind)
        if kind not in self.options:
            try:
                page = await self.gateways[kind].list(page=1, limit=self.settings.relation_fetch_limit)
            except GatewayError as e:
                logger.warning(f"loading {kind.value} options failed: {e}")
                return []
            self.options[kind] = list(page.items)
        return self.options[kind]

    def form_defaults(self) -> Dict[str, Any]:
        if self.editing is not None:
            return self.editing.model_dump()
        if self.form_kind is EntityKind.TEAMS:
            # new teams are owned by whoever creates them
            return {"owner_id": self.session.user_id or ""}
        return {}

    async def submit_form(self, payload: Any) -> bool:
        if self.form_kind is None:
            raise RuntimeError("No form is open")
        kind = self.form_kind
        if self.editing is not None:
            result = await self.mutations.update(kind, self.editing.id, payload, previous=self.editing)
        else:
            result = await self.mutations.create(kind, payload)
        if not result.ok:
            self.form_error = result.error
            return False
        self.close_form()
        self.flash = f"{kind.singular.title()} saved."
        return True

    # ---- delete ----
    def request_delete(self, kind: EntityKind, record: Any) -> None:
        self.pending_delete = DeleteRequest(
            kind=EntityKind(kind), record_id=record.id, label=record_label(record), record=record
        )

    def cancel_delete(self) -> None:
        self.pending_delete = None

    async def confirm_delete(self) -> bool:
        if self.pending_delete is None:
            return False
        request = self.pending_delete.confirm()
        self.pending_delete = None
        result = await self.mutations.delete(request)
        if not result.ok:
            self.notice = f"Could not delete {request.kind.singular} '{request.label}': {result.error}"
            return False
        self.expanded = {key for key in self.expanded if key[1] != request.record_id}
        self.flash = f"{request.kind.singular.title()} '{request.label}' deleted."
        return True

    def dismiss_notice(self) -> None:
        self.notice = None

    # ---- assignment ----
    async def open_picker(self, context: AssignmentContext) -> None:
        await self.picker.open_for(context)

    def close_picker(self) -> None:
        self.picker.close()

    async def pick(self, user_id: str) -> bool:
        context = self.picker.context
        if context is None:
            return False
        self.picker.close()
        result = await self.mutations.assign(context, user_id)
        if not result.ok:
            self.notice = f"Assignment failed: {result.error}"
            return False
        self.flash = "Assignment saved."
        return True

    # ---- drill-down ----
    def is_expanded(self, kind: ParentKind, parent_id: str) -> bool:
        return (ParentKind(kind), parent_id) in self.expanded

    async def toggle_row(self, kind: ParentKind, parent_id: str,
                         assignee_id: Optional[str] = None) -> Optional[list]:
        key = (ParentKind(kind), parent_id)
        if key in self.expanded:
            self.expanded.discard(key)
            return None
        self.expanded.add(key)
        return await self.resolver.resolve_children(kind, parent_id, assignee_id=assignee_id)

    async def expanded_children(self, kind: ParentKind, parent_id: str,
                                assignee_id: Optional[str] = None) -> Optional[list]:
        """Children of an expanded row; re-resolves after an eviction."""
        if not self.is_expanded(kind, parent_id):
            return None
        return await self.resolver.resolve_children(kind, parent_id, assignee_id=assignee_id)
