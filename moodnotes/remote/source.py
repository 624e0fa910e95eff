from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..config import RemoteConfig
from ..errors import RemoteUnavailable
from ..notes import Note, PageResult, Sentiment, clean_text
from . import http_client, mapping

logger = logging.getLogger(__name__)


class RemoteSource:
    """Async client for the remote note query and mutation operations.

    Holds no state between calls besides its configuration.
    """

    def __init__(self, config: RemoteConfig) -> None:
        self.config = config

    async def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        if not self.config.configured:
            raise RemoteUnavailable("remote endpoint not configured")
        return await asyncio.to_thread(
            http_client.post_graphql,
            self.config.endpoint,
            body,
            api_key=self.config.api_key,
            timeout_s=self.config.timeout_s,
        )

    async def fetch_page(
        self,
        sentiment: Sentiment | None = None,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> PageResult:
        size = page_size or self.config.page_size
        body = mapping.build_get_notes_request(sentiment, cursor, size)
        logger.debug(
            "fetching notes page sentiment=%s cursor=%s limit=%s",
            sentiment.value if sentiment else None,
            "set" if cursor else None,
            size,
        )
        payload = await self._post(body)
        result = mapping.parse_get_notes_response(payload, cursor=cursor)
        logger.debug(
            "fetched %d notes next_cursor=%s scanned=%s",
            len(result.items),
            "set" if result.next_cursor else None,
            result.scanned_count,
        )
        return result

    async def create_note(self, text: str, sentiment: Sentiment | str) -> Note:
        body = mapping.build_create_note_request(clean_text(text), Sentiment.parse(sentiment))
        payload = await self._post(body)
        note = mapping.parse_create_note_response(payload)
        logger.info("note %s saved remotely", note.id)
        return note
