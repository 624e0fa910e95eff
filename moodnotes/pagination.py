"""Page-numbered navigation over the remote's forward-only cursor stream.

The remote hands back one continuation token per page and offers no way to
step backwards. ``PaginationController`` turns that into a page index the UI
can show, and guards the cursor against concurrent or superseded fetches.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from .errors import MalformedCursor, RemoteUnavailable
from .notes import Note, Sentiment
from .remote import RemoteSource

logger = logging.getLogger(__name__)

RETREAT_CURSOR_HISTORY = "cursor_history"
RETREAT_RESTART = "restart"


@dataclass(frozen=True)
class PageState:
    cursor: str | None = None
    page_index: int = 1
    has_next_page: bool = False
    estimated_total_pages: int = 1


@dataclass(frozen=True)
class PageLoad:
    """Outcome of one fetch.

    ``items`` is ``None`` when the remote was unavailable; the caller falls
    back to local notes only.
    """

    items: list[Note] | None
    state: PageState
    sentiment: Sentiment | None

    @property
    def remote_ok(self) -> bool:
        return self.items is not None


class PaginationController:
    def __init__(
        self,
        remote: RemoteSource,
        *,
        page_size: int = 10,
        retreat_strategy: str = RETREAT_CURSOR_HISTORY,
    ) -> None:
        if retreat_strategy not in (RETREAT_CURSOR_HISTORY, RETREAT_RESTART):
            raise ValueError(f"unknown retreat strategy: {retreat_strategy}")
        self.remote = remote
        self.page_size = page_size
        self.retreat_strategy = retreat_strategy
        self.sentiment: Sentiment | None = None
        self.state = PageState()
        self.is_loading = False
        self._generation = 0
        # _page_cursors[i] is the cursor that produced page i + 1.
        self._page_cursors: list[str | None] = [None]

    @property
    def can_advance(self) -> bool:
        return self.state.has_next_page and not self.is_loading

    @property
    def can_retreat(self) -> bool:
        return self.state.page_index > 1 and not self.is_loading

    def supersede(self) -> None:
        """Discard whatever fetch is in flight without starting a new one."""

        self._generation += 1
        self.is_loading = False

    async def reset(self, sentiment: Sentiment | None = None) -> PageLoad | None:
        self.supersede()
        self.sentiment = sentiment
        self.state = PageState()
        self._page_cursors = [None]
        return await self._fetch(None, 1)

    async def advance(self) -> PageLoad | None:
        if not self.state.has_next_page:
            logger.debug("advance ignored: no next page")
            return None
        if self.is_loading:
            logger.debug("advance ignored: fetch in flight")
            return None
        return await self._fetch(self.state.cursor, self.state.page_index + 1)

    async def retreat(self) -> PageLoad | None:
        if self.state.page_index <= 1:
            logger.debug("retreat ignored: already on first page")
            return None
        if self.is_loading:
            logger.debug("retreat ignored: fetch in flight")
            return None
        target = self.state.page_index - 1
        if self.retreat_strategy == RETREAT_RESTART:
            # Re-reads page 1 but keeps the decremented page number.
            return await self._fetch(None, target, record_cursor=False)
        return await self._fetch(self._page_cursors[target - 1], target)

    async def _fetch(
        self,
        cursor: str | None,
        page_index: int,
        *,
        record_cursor: bool = True,
    ) -> PageLoad | None:
        generation = self._generation
        sentiment = self.sentiment
        self.is_loading = True
        try:
            result = await self.remote.fetch_page(sentiment, cursor, self.page_size)
        except RemoteUnavailable as exc:
            if generation != self._generation:
                return None
            self.is_loading = False
            if isinstance(exc, MalformedCursor) and cursor is not None:
                logger.warning("remote rejected cursor; restarting from page 1", exc_info=exc)
                return await self.reset(sentiment)
            logger.warning("remote fetch failed; showing local notes only", exc_info=exc)
            return PageLoad(items=None, state=self.state, sentiment=sentiment)

        if generation != self._generation:
            logger.debug("discarding stale page response")
            return None
        self.is_loading = False

        estimated = self.state.estimated_total_pages
        if cursor is None and result.scanned_count:
            estimated = math.ceil(result.scanned_count / self.page_size)
        if record_cursor:
            del self._page_cursors[page_index:]
            if len(self._page_cursors) < page_index:
                self._page_cursors.append(cursor)
        self.state = replace(
            self.state,
            cursor=result.next_cursor,
            page_index=page_index,
            has_next_page=result.next_cursor is not None,
            estimated_total_pages=estimated,
        )
        return PageLoad(items=result.items, state=self.state, sentiment=sentiment)
