from __future__ import annotations

import asyncio

from moodnotes.errors import MalformedCursor
from moodnotes.notes import Note, PageResult, Sentiment


def make_note(
    note_id: str,
    date_created: str,
    sentiment: Sentiment = Sentiment.NEUTRAL,
    text: str = "x",
) -> Note:
    return Note(id=note_id, text=text, sentiment=sentiment, date_created=date_created)


class FakeRemote:
    """In-memory stand-in for RemoteSource that scans a list of notes."""

    def __init__(self, notes: list[Note] | None = None) -> None:
        self.notes = list(notes or [])
        self.read_error: Exception | None = None
        self.write_error: Exception | None = None
        self.bad_cursors: set[str] = set()
        self.scanned_count: int | None = None
        self.gate: asyncio.Event | None = None
        self.fetch_calls: list[tuple[Sentiment | None, str | None, int | None]] = []
        self.create_calls: list[tuple[str, Sentiment]] = []

    async def fetch_page(
        self,
        sentiment: Sentiment | None = None,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> PageResult:
        self.fetch_calls.append((sentiment, cursor, page_size))
        if self.gate is not None:
            await self.gate.wait()
        if self.read_error is not None:
            raise self.read_error
        if cursor in self.bad_cursors:
            raise MalformedCursor(f"bad cursor {cursor}")
        size = page_size or 10
        matching = [n for n in self.notes if sentiment is None or n.sentiment is sentiment]
        start = int(cursor[3:]) if cursor else 0
        end = start + size
        return PageResult(
            items=matching[start:end],
            next_cursor=f"tok{end}" if end < len(matching) else None,
            scanned_count=self.scanned_count if self.scanned_count is not None else len(self.notes),
        )

    async def create_note(self, text: str, sentiment: Sentiment | str) -> Note:
        parsed = Sentiment.parse(sentiment)
        self.create_calls.append((text, parsed))
        if self.write_error is not None:
            raise self.write_error
        note = make_note(
            f"SRV{len(self.create_calls):04d}",
            f"2030-01-01T00:00:{len(self.create_calls):02d}Z",
            parsed,
            text,
        )
        self.notes.append(note)
        return note
