# controllers/resolver.py
"""
On-demand child lookups for the drill-down tables.

    Project row -> its teams -> a team's users
    Task row    -> its assignee

Results are memoised per parent id until the mutation coordinator evicts
them; there is no expiry. Entries hold child records keyed by parent id, the
owning collection controller remains the canonical copy.

Children of a project or team are found by paging through the whole child
collection and filtering on the foreign key (the API has no filtered
endpoint). That lookup lives in one loader per parent kind so it can be
pointed at a server-side filter without touching callers.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from errors import GatewayError, NotFoundError

logger = logging.getLogger(__name__)


class ParentKind(str, Enum):
    PROJECT = "project"
    TEAM = "team"
    TASK = "task"


Key = Tuple[ParentKind, str]


class RelationshipResolver:
    def __init__(self, teams_gateway: Any, users_gateway: Any, fetch_limit: int = 1000):
        self.teams_gateway = teams_gateway
        self.users_gateway = users_gateway
        self.fetch_limit = fetch_limit
        self.errors: Dict[Key, str] = {}
        self._cache: Dict[Key, List[Any]] = {}
        self._inflight: Dict[Key, "asyncio.Future[List[Any]]"] = {}
        self._versions: Dict[Key, int] = {}

    # ---- reads ----
    def is_loaded(self, kind: ParentKind, parent_id: str) -> bool:
        return (ParentKind(kind), parent_id) in self._cache

    def cached(self, kind: ParentKind, parent_id: str) -> Optional[List[Any]]:
        children = self._cache.get((ParentKind(kind), parent_id))
        return None if children is None else list(children)

    def is_resolving(self, kind: ParentKind, parent_id: str) -> bool:
        return (ParentKind(kind), parent_id) in self._inflight

    async def resolve_children(self, kind: ParentKind, parent_id: str,
                               assignee_id: Optional[str] = None) -> List[Any]:
        """Children of ``parent_id``; fetched once, then served from cache.

        For tasks pass the task's ``assignee_id``; the result is a list of
        zero or one user. Failures are logged and give an empty list that is
        not cached, so the next expansion tries again.
        """
        key = (ParentKind(kind), parent_id)
        if key in self._cache:
            return list(self._cache[key])

        version = self._versions.get(key, 0)
        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(self._load(key, assignee_id))
            self._inflight[key] = future
        try:
            children = await future
        except GatewayError as e:
            self.errors[key] = str(e)
            logger.warning(f"resolving {key[0].value} {parent_id} failed: {e}")
            return []
        finally:
            if self._inflight.get(key) is future:
                del self._inflight[key]

        if self._versions.get(key, 0) == version:
            self._cache[key] = children
            self.errors.pop(key, None)
        return list(children)

    # ---- loaders ----
    async def _load(self, key: Key, assignee_id: Optional[str]) -> List[Any]:
        kind, parent_id = key
        if kind is ParentKind.PROJECT:
            teams = await self._fetch_all(self.teams_gateway)
            return [team for team in teams if team.project_id == parent_id]
        if kind is ParentKind.TEAM:
            users = await self._fetch_all(self.users_gateway)
            return [user for user in users if user.team_id == parent_id]
        if kind is ParentKind.TASK:
            if not assignee_id:
                return []
            try:
                return [await self.users_gateway.get_by_id(assignee_id)]
            except NotFoundError:
                logger.info(f"assignee {assignee_id} of task {parent_id} no longer exists")
                return []
        raise ValueError(f"Unknown parent kind: {kind!r}")

    async def _fetch_all(self, gateway: Any) -> List[Any]:
        items: List[Any] = []
        page = 1
        while True:
            result = await gateway.list(page=page, limit=self.fetch_limit)
            items.extend(result.items)
            if not result.items or page >= result.total_pages or len(items) >= result.total:
                return items
            page += 1

    # ---- invalidation ----
    def evict(self, kind: ParentKind, parent_id: Optional[str]) -> bool:
        if not parent_id:
            return False
        key = (ParentKind(kind), parent_id)
        self._versions[key] = self._versions.get(key, 0) + 1
        self._inflight.pop(key, None)
        self.errors.pop(key, None)
        return self._cache.pop(key, None) is not None

    def evict_kind(self, kind: ParentKind) -> int:
        kind = ParentKind(kind)
        keys = {k for k in list(self._cache) + list(self._inflight) if k[0] is kind}
        for key in keys:
            self.evict(*key)
        return len(keys)

    def evict_holding(self, child_id: str) -> int:
        """Evict every entry whose children include the record ``child_id``."""
        keys = [key for key, children in self._cache.items()
                if any(getattr(child, "id", None) == child_id for child in children)]
        for key in keys:
            self.evict(*key)
        return len(keys)

    def clear(self) -> None:
        for key in list(self._cache) + list(self._inflight):
            self._versions[key] = self._versions.get(key, 0) + 1
        self._cache.clear()
        self._inflight.clear()
        self.errors.clear()
