"""Offset pagination that tells "nothing here" apart from "no more pages".

An empty first page means the query has no data at all; an empty later page
means the caller paged past the end. Infinite-scroll clients need both.
"""
import enum
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, TypeVar

from vidtube.utils import parse_int_or_fallback

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

T = TypeVar("T")


class PageStatus(str, enum.Enum):
    ok = "ok"
    empty = "empty"
    exhausted = "exhausted"


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_query(cls, page: Any = None, limit: Any = None) -> "PageRequest":
        return cls(
            page=parse_int_or_fallback(page, DEFAULT_PAGE),
            limit=parse_int_or_fallback(limit, DEFAULT_LIMIT),
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    limit: int
    status: PageStatus

    @property
    def is_empty(self) -> bool:
        return self.status is PageStatus.empty

    @property
    def is_exhausted(self) -> bool:
        return self.status is PageStatus.exhausted


def paginate(request: PageRequest, fetch: Callable[[int, int], List[T]]) -> Page[T]:
    """Run ``fetch(skip, limit)`` and classify the result."""
    items = fetch(request.skip, request.limit)
    if items:
        status = PageStatus.ok
    elif request.page == 1:
        status = PageStatus.empty
    else:
        status = PageStatus.exhausted
    return Page(items=items, page=request.page, limit=request.limit, status=status)
