# models/page.py
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a collection as reported by the server."""

    items: List[T] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 1
