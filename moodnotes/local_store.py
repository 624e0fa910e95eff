from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .errors import LocalStoreUnavailable
from .notes import Note
from .samples import is_sample

logger = logging.getLogger(__name__)

FALLBACK_SLOT = "notes-app-data"


class LocalFallbackStore:
    """Notes queued locally because the remote write failed.

    The whole set lives in one named slot (a JSON array on disk) and is read
    and written wholesale. Failures never propagate: a slot that cannot be
    read is treated as empty and a failed write is reported by returning
    ``False``.
    """

    def __init__(self, cache_dir: Path | str, *, slot: str = FALLBACK_SLOT) -> None:
        self.cache_dir = Path(cache_dir).expanduser()
        self.slot = slot

    @classmethod
    def open(
        cls,
        cache_dir: Path | str,
        *,
        lifecycle: str = "persist",
        slot: str = FALLBACK_SLOT,
    ) -> LocalFallbackStore:
        store = cls(cache_dir, slot=slot)
        if lifecycle == "clear_on_start":
            store.clear()
        elif lifecycle != "persist":
            raise ValueError(f"unknown local store lifecycle: {lifecycle}")
        return store

    @property
    def path(self) -> Path:
        return self.cache_dir / f"{self.slot}.json"

    def read_slot(self) -> list[Note]:
        path = self.path
        try:
            if not path.exists():
                return []
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LocalStoreUnavailable(f"fallback slot unreadable: {exc}") from exc
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise LocalStoreUnavailable("fallback slot is not valid json") from exc
        if not isinstance(data, list):
            raise LocalStoreUnavailable("fallback slot must hold an array")
        notes: list[Note] = []
        for entry in data:
            try:
                notes.append(Note.from_dict(entry))
            except ValueError as exc:
                logger.warning("skipping malformed fallback note", exc_info=exc)
        return notes

    def write_slot(self, notes: Iterable[Note]) -> None:
        records = [note.to_dict() for note in notes if not is_sample(note)]
        path = self.path
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise LocalStoreUnavailable(f"fallback slot unwritable: {exc}") from exc

    def load(self) -> list[Note]:
        try:
            return self.read_slot()
        except LocalStoreUnavailable as exc:
            logger.warning("fallback store read failed; treating as empty", exc_info=exc)
            return []

    def save(self, notes: Iterable[Note]) -> bool:
        try:
            self.write_slot(notes)
        except LocalStoreUnavailable as exc:
            logger.warning("fallback store write failed", exc_info=exc)
            return False
        return True

    def append(self, note: Note) -> bool:
        return self.save([*self.load(), note])

    def clear(self) -> bool:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("fallback store clear failed", exc_info=exc)
            return False
        return True
