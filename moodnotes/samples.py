from __future__ import annotations

from .notes import Note, Sentiment

# Demonstration notes. They may be shown alongside real data but are never
# written to the fallback slot.
SAMPLE_NOTES: tuple[Note, ...] = (
    Note(
        id="01KA82YS8XM5ZAXF123",
        text=(
            "Had an amazing day at the beach! The sunset was absolutely beautiful "
            "and I felt so peaceful."
        ),
        sentiment=Sentiment.HAPPY,
        date_created="2024-11-15T18:30:00Z",
    ),
    Note(
        id="01KA82YS8XM5ZAXF456",
        text="Feeling overwhelmed with work deadlines. Everything seems to be happening at once.",
        sentiment=Sentiment.SAD,
        date_created="2024-11-15T14:20:00Z",
    ),
    Note(
        id="01KA82YS8XM5ZAXF789",
        text="Just another day. Nothing special happened, but nothing bad either.",
        sentiment=Sentiment.NEUTRAL,
        date_created="2024-11-15T10:15:00Z",
    ),
    Note(
        id="01KA82YS8XM5ZAXF012",
        text=(
            "Traffic was terrible this morning! Spent 2 hours in what should have "
            "been a 30-minute drive."
        ),
        sentiment=Sentiment.ANGRY,
        date_created="2024-11-15T08:45:00Z",
    ),
)

SAMPLE_NOTE_IDS = frozenset(note.id for note in SAMPLE_NOTES)


def is_sample(note: Note) -> bool:
    return note.id in SAMPLE_NOTE_IDS
