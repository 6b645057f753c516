"""Pagination value objects."""

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageRequest:
    """Requested page window."""

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("Page must be at least 1")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        """Number of records to skip."""
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the total count across all pages."""

    items: List[T]
    total: int
    request: PageRequest = field(default_factory=PageRequest)

    @property
    def page(self) -> int:
        return self.request.page

    @property
    def page_size(self) -> int:
        return self.request.page_size

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    def map(self, func) -> "Page":
        """Return a page with the same window whose items are transformed by func."""
        return Page(items=[func(item) for item in self.items], total=self.total, request=self.request)
