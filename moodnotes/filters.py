from __future__ import annotations

from collections.abc import Callable

from .notes import Sentiment
from .pagination import PageLoad, PaginationController


class SentimentFilterController:
    """Holds the active sentiment filter; selecting one restarts pagination."""

    def __init__(
        self,
        pagination: PaginationController,
        *,
        on_clear: Callable[[], None] | None = None,
    ) -> None:
        self.pagination = pagination
        self.on_clear = on_clear
        self.active: Sentiment | None = None

    async def select(self, sentiment: Sentiment | str | None) -> PageLoad | None:
        parsed = Sentiment.parse_optional(sentiment)
        self.active = parsed
        if self.on_clear is not None:
            self.on_clear()
        return await self.pagination.reset(parsed)

    async def refresh(self) -> PageLoad | None:
        return await self.pagination.reset(self.active)
