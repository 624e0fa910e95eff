from __future__ import annotations

import datetime as dt
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict
from uuid import uuid4


class Sentiment(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    NEUTRAL = "neutral"
    ANGRY = "angry"

    @classmethod
    def parse(cls, value: object) -> Sentiment:
        if isinstance(value, Sentiment):
            return value
        if not isinstance(value, str):
            raise ValueError(f"invalid sentiment: {value!r}")
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"invalid sentiment: {value!r}")

    @classmethod
    def parse_optional(cls, value: object) -> Sentiment | None:
        """Parse a filter value; ``None``, ``""`` and ``"all"`` mean unfiltered."""

        if value is None:
            return None
        if isinstance(value, str) and value.strip().lower() in {"", "all", "none"}:
            return None
        return cls.parse(value)


class NoteRecord(TypedDict):
    id: str
    text: str
    sentiment: str
    dateCreated: str


@dataclass(frozen=True)
class Note:
    id: str
    text: str
    sentiment: Sentiment
    date_created: str

    def to_dict(self) -> NoteRecord:
        return {
            "id": self.id,
            "text": self.text,
            "sentiment": self.sentiment.value,
            "dateCreated": self.date_created,
        }

    @classmethod
    def from_dict(cls, data: object) -> Note:
        if not isinstance(data, dict):
            raise ValueError("note must be an object")
        note_id = str(data.get("id") or "").strip()
        if not note_id:
            raise ValueError("note id missing")
        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"note {note_id}: text missing")
        date_created = str(data.get("dateCreated") or "").strip()
        if not date_created:
            raise ValueError(f"note {note_id}: dateCreated missing")
        return cls(
            id=note_id,
            text=text,
            sentiment=Sentiment.parse(data.get("sentiment")),
            date_created=date_created,
        )

    @property
    def created_at(self) -> dt.datetime:
        return parse_timestamp(self.date_created)


@dataclass
class PageResult:
    items: list[Note] = field(default_factory=list)
    next_cursor: str | None = None
    scanned_count: int | None = None


_EPOCH = dt.datetime.min.replace(tzinfo=dt.UTC)


def parse_timestamp(value: str) -> dt.datetime:
    """Parse an ISO-8601 timestamp; unparseable values sort as oldest."""

    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = dt.datetime.fromisoformat(raw)
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed


def now_iso() -> str:
    return dt.datetime.now(dt.UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_note_id() -> str:
    # Millisecond timestamp prefix keeps client ids sortable by creation time.
    millis = int(time.time() * 1000)
    return f"{millis:012x}{uuid4().hex[:16]}".upper()


def clean_text(text: Any) -> str:
    if not isinstance(text, str):
        raise ValueError("note text must be a string")
    cleaned = text.strip()
    if not cleaned:
        raise ValueError("note text must not be empty")
    return cleaned


def build_local_note(text: str, sentiment: Sentiment | str) -> Note:
    return Note(
        id=new_note_id(),
        text=clean_text(text),
        sentiment=Sentiment.parse(sentiment),
        date_created=now_iso(),
    )
