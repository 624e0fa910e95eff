from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import RemoteUnavailable
from .local_store import LocalFallbackStore
from .notes import Note, Sentiment, build_local_note, clean_text
from .remote import RemoteSource
from .samples import SAMPLE_NOTES

logger = logging.getLogger(__name__)


def filter_notes(notes: Iterable[Note], sentiment: Sentiment | None) -> list[Note]:
    if sentiment is None:
        return list(notes)
    return [note for note in notes if note.sentiment is sentiment]


def dedupe_notes(notes: Iterable[Note]) -> list[Note]:
    """Keep the first note seen for each id."""

    seen: set[str] = set()
    unique: list[Note] = []
    for note in notes:
        if note.id in seen:
            continue
        seen.add(note.id)
        unique.append(note)
    return unique


def sort_notes(notes: Iterable[Note]) -> list[Note]:
    # Newest first; sorted() is stable so equal timestamps keep merge order.
    return sorted(notes, key=lambda note: note.created_at, reverse=True)


def merge_notes(
    remote_items: Iterable[Note] | None,
    local_items: Iterable[Note],
    sentiment: Sentiment | None,
) -> list[Note]:
    """Combine a remote page with local notes into the display order.

    Remote items are assumed to be filtered already; the filter is applied
    to the local side only. Remote copies win over local ones with the same
    id.
    """

    combined = [*(remote_items or []), *filter_notes(local_items, sentiment)]
    return sort_notes(dedupe_notes(combined))


@dataclass(frozen=True)
class WriteOutcome:
    note: Note
    remote: bool

    @property
    def needs_refresh(self) -> bool:
        return self.remote


class ReconciliationEngine:
    def __init__(
        self,
        remote: RemoteSource,
        local_store: LocalFallbackStore,
        *,
        show_samples: bool = False,
    ) -> None:
        self.remote = remote
        self.local_store = local_store
        self.show_samples = show_samples

    def local_notes(self) -> list[Note]:
        notes = self.local_store.load()
        if self.show_samples:
            notes.extend(SAMPLE_NOTES)
        return notes

    def reconcile(
        self,
        remote_items: Iterable[Note] | None,
        sentiment: Sentiment | None,
    ) -> list[Note]:
        local = self.local_notes()
        merged = merge_notes(remote_items, local, sentiment)
        logger.debug(
            "reconciled %d notes (remote=%s local=%d)",
            len(merged),
            "unavailable" if remote_items is None else "ok",
            len(local),
        )
        return merged

    async def create_note(self, text: str, sentiment: Sentiment | str) -> WriteOutcome:
        cleaned = clean_text(text)
        parsed = Sentiment.parse(sentiment)
        try:
            note = await self.remote.create_note(cleaned, parsed)
        except RemoteUnavailable as exc:
            logger.warning("remote save failed; queueing note locally", exc_info=exc)
        else:
            return WriteOutcome(note=note, remote=True)

        note = build_local_note(cleaned, parsed)
        if not self.local_store.append(note):
            logger.warning("note %s could not be queued locally", note.id)
        return WriteOutcome(note=note, remote=False)
