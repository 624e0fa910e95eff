from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import MoodNotesConfig
from .filters import SentimentFilterController
from .local_store import LocalFallbackStore
from .notes import Note, Sentiment
from .pagination import PageLoad, PageState, PaginationController
from .reconcile import ReconciliationEngine, WriteOutcome
from .remote import RemoteSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardView:
    notes: list[Note] = field(default_factory=list)
    sentiment: Sentiment | None = None
    state: PageState = field(default_factory=PageState)
    is_loading: bool = False
    remote_ok: bool = True


class NotesBoard:
    """The note list a user browses: filter, pages and note creation."""

    def __init__(
        self,
        remote: RemoteSource,
        local_store: LocalFallbackStore,
        *,
        page_size: int = 10,
        retreat_strategy: str = "cursor_history",
        show_samples: bool = False,
    ) -> None:
        self.pagination = PaginationController(
            remote, page_size=page_size, retreat_strategy=retreat_strategy
        )
        self.reconciler = ReconciliationEngine(remote, local_store, show_samples=show_samples)
        self.filters = SentimentFilterController(self.pagination, on_clear=self._clear)
        self.notes: list[Note] = []
        self.remote_ok = True

    @classmethod
    def from_config(cls, config: MoodNotesConfig) -> NotesBoard:
        local_store = LocalFallbackStore.open(
            config.cache_path, lifecycle=config.local_store_lifecycle
        )
        return cls(
            RemoteSource(config.remote_config()),
            local_store,
            page_size=config.page_size,
            retreat_strategy=config.retreat_strategy,
            show_samples=config.show_samples,
        )

    def _clear(self) -> None:
        self.notes = []

    def _apply(self, load: PageLoad | None) -> list[Note]:
        if load is None:
            return self.notes
        self.remote_ok = load.remote_ok
        self.notes = self.reconciler.reconcile(load.items, load.sentiment)
        return self.notes

    def view(self) -> BoardView:
        return BoardView(
            notes=list(self.notes),
            sentiment=self.filters.active,
            state=self.pagination.state,
            is_loading=self.pagination.is_loading,
            remote_ok=self.remote_ok,
        )

    async def load(self) -> list[Note]:
        return self._apply(await self.filters.refresh())

    async def set_filter(self, sentiment: Sentiment | str | None) -> list[Note]:
        return self._apply(await self.filters.select(sentiment))

    async def next_page(self) -> list[Note]:
        return self._apply(await self.pagination.advance())

    async def prev_page(self) -> list[Note]:
        return self._apply(await self.pagination.retreat())

    async def create_note(self, text: str, sentiment: Sentiment | str) -> WriteOutcome:
        outcome = await self.reconciler.create_note(text, sentiment)
        if outcome.needs_refresh:
            await self.load()
        elif self.pagination.is_loading:
            # the interrupted read is re-issued; the queued note comes back
            # through the local slot unless that write failed
            await self.load()
            if outcome.note not in self.notes:
                self.notes = [outcome.note, *self.notes]
        else:
            self.notes = [outcome.note, *self.notes]
        logger.info(
            "note %s created (%s)", outcome.note.id, "remote" if outcome.remote else "local"
        )
        return outcome
