"""Plain value types passed between the API layer, the registry and the store."""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eventhub.events.models import Event


class SortField(str, Enum):
    DATE = "date"
    TITLE = "title"
    ATTENDEE_COUNT = "attendeeCount"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class EventQuery:
    """Filter, sort and page selection for listing events."""

    category: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    search: str | None = None
    sort_by: SortField = SortField.DATE
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be at least 1")
        if not 1 <= self.limit <= MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        # Accept raw strings from callers that skip the serializer.
        object.__setattr__(self, "sort_by", SortField(self.sort_by))
        object.__setattr__(self, "sort_order", SortOrder(self.sort_order))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def has_date_range_conflict(self) -> bool:
        return (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        )


@dataclass(frozen=True)
class EventPage:
    """One page of events plus the numbers a client needs to page through them."""

    total: int
    page: int
    limit: int
    events: list[Event] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1
