# controllers/collection.py
"""
Paginated, searchable view state for one entity kind.

A controller is created for every collection the dashboard can show. It does
not fetch anything until the view is opened, keeps the last good page when a
request fails, and only lets the most recently issued request write state:
live search fires one request per keystroke and responses can come back in
any order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

from errors import GatewayError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ViewStatus(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class PageWindow:
    current_page: int = 1
    total_pages: int = 1
    total_items: int = 0
    page_size: int = 10
    search: str = ""

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < max(self.total_pages, 1)

    @property
    def first_item(self) -> int:
        if not self.total_items:
            return 0
        return (self.current_page - 1) * self.page_size + 1

    @property
    def last_item(self) -> int:
        return min(self.current_page * self.page_size, self.total_items)


class CollectionViewController(Generic[T]):
    def __init__(self, gateway: Any, page_size: int = 10):
        self.gateway = gateway
        self.kind = getattr(gateway, "kind", None)
        self.status = ViewStatus.UNLOADED
        self.items: List[T] = []
        self.window = PageWindow(page_size=page_size)
        self.error: Optional[str] = None
        self.stale = False
        # last term sent, applied or not; the search box compares against it
        self.requested_search = ""
        self._seq = 0

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.kind} {self.status.value} page={self.window.current_page}>"

    @property
    def loaded(self) -> bool:
        return self.status is ViewStatus.READY and not self.stale

    async def open(self) -> bool:
        """Make the view visible. Fetches only on first open, after a failed
        load, or once a mutation marked the page stale."""
        if self.status is ViewStatus.LOADING or self.loaded:
            return False
        return await self.load(self.window.current_page, self.window.search)

    async def load(self, page: Optional[int] = None, search: Optional[str] = None) -> bool:
        """Fetch ``page`` of the collection filtered by ``search``.

        A new search term without an explicit page starts again at page 1.
        The page is sent as-is; the server's reply is the new window.
        Returns True when this call's response was applied.
        """
        if search is None:
            search = self.window.search
        if page is None:
            page = 1 if search != self.window.search else self.window.current_page

        self._seq += 1
        seq = self._seq
        self.status = ViewStatus.LOADING
        self.requested_search = search
        try:
            result = await self.gateway.list(page=page, limit=self.window.page_size, search=search or None)
        except GatewayError as e:
            if seq != self._seq:
                logger.debug(f"{self.kind}: dropped failure of superseded request #{seq}: {e}")
                return False
            self.status = ViewStatus.ERROR
            self.error = str(e)
            logger.warning(f"{self.kind}: loading page {page} (search={search!r}) failed: {e}")
            return False

        if seq != self._seq:
            logger.debug(f"{self.kind}: dropped stale response #{seq} (latest #{self._seq})")
            return False

        self.items = list(result.items)
        self.window = PageWindow(
            current_page=result.page,
            total_pages=result.total_pages,
            total_items=result.total,
            page_size=result.limit,
            search=search,
        )
        self.status = ViewStatus.READY
        self.error = None
        self.stale = False
        return True

    async def search(self, term: str) -> bool:
        return await self.load(1, term)

    async def go_to(self, page: int) -> bool:
        return await self.load(page, self.window.search)

    async def refresh(self) -> bool:
        """Re-fetch the current page and term. A view that was never opened
        stays unloaded; it will fetch when first shown."""
        if self.status is ViewStatus.UNLOADED:
            return False
        return await self.load(self.window.current_page, self.window.search)

    def invalidate(self) -> None:
        self.stale = True

    def find(self, record_id: str) -> Optional[T]:
        return next((item for item in self.items if getattr(item, "id", None) == record_id), None)

    def reset(self) -> None:
        self._seq += 1  # anything still in flight is now stale
        self.status = ViewStatus.UNLOADED
        self.items = []
        self.window = replace(PageWindow(), page_size=self.window.page_size)
        self.error = None
        self.stale = False
        self.requested_search = ""


class UserPicker(CollectionViewController):
    """Searchable, paginated user list used for every assignment.

    ``context`` is the assignment being made (task or team); the task's
    current assignee is highlighted.
    """

    def __init__(self, gateway: Any, page_size: int = 5):
        super().__init__(gateway, page_size=page_size)
        self.context: Optional[Any] = None

    @property
    def is_open(self) -> bool:
        return self.context is not None

    @property
    def highlighted_id(self) -> Optional[str]:
        return getattr(self.context, "current_user_id", None)

    async def open_for(self, context: Any) -> bool:
        self.context = context
        return await self.load(1, "")

    def close(self) -> None:
        self.context = None
