from __future__ import annotations

import asyncio
from typing import Any

import pytest

from moodnotes.config import RemoteConfig
from moodnotes.errors import MalformedCursor, RemoteUnavailable
from moodnotes.notes import Sentiment
from moodnotes.remote import RemoteSource, http_client


def _page_payload(items: list[dict[str, Any]], token: str | None = None) -> dict[str, Any]:
    return {"data": {"getNotes": {"items": items, "nextToken": token, "scannedCount": 12}}}


def test_fetch_page_posts_query_with_configured_defaults(monkeypatch) -> None:
    calls: list[tuple[str, dict[str, Any], dict[str, Any]]] = []

    def fake_post(url, body, **kwargs):
        calls.append((url, body, kwargs))
        return _page_payload(
            [{"id": "A", "text": "t", "sentiment": "SAD", "dateCreated": "2024-11-15T10:00:00Z"}],
            "tok1",
        )

    monkeypatch.setattr(http_client, "post_graphql", fake_post)
    source = RemoteSource(
        RemoteConfig(endpoint="https://api.example.com/graphql", api_key="k", timeout_s=2.0)
    )

    result = asyncio.run(source.fetch_page(Sentiment.SAD))

    url, body, kwargs = calls[0]
    assert url == "https://api.example.com/graphql"
    assert body["variables"] == {"limit": 10, "sentiment": "sad"}
    assert kwargs == {"api_key": "k", "timeout_s": 2.0}
    assert result.items[0].sentiment is Sentiment.SAD
    assert result.next_cursor == "tok1"


def test_fetch_page_without_endpoint_is_unavailable(monkeypatch) -> None:
    def fail(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr(http_client, "post_graphql", fail)
    source = RemoteSource(RemoteConfig())

    with pytest.raises(RemoteUnavailable, match="not configured"):
        asyncio.run(source.fetch_page())


def test_fetch_page_detects_rejected_cursor(monkeypatch) -> None:
    monkeypatch.setattr(
        http_client,
        "post_graphql",
        lambda url, body, **kwargs: {"errors": [{"message": "Invalid pagination token"}]},
    )
    source = RemoteSource(RemoteConfig(endpoint="https://api.example.com/graphql"))

    with pytest.raises(MalformedCursor):
        asyncio.run(source.fetch_page(cursor="old", page_size=5))


def test_create_note_returns_server_record(monkeypatch) -> None:
    bodies: list[dict[str, Any]] = []

    def fake_post(url, body, **kwargs):
        bodies.append(body)
        return {
            "data": {
                "createNote": {
                    "id": "01SERVER",
                    "text": "hi there",
                    "sentiment": "happy",
                    "dateCreated": "2024-11-16T09:00:00Z",
                }
            }
        }

    monkeypatch.setattr(http_client, "post_graphql", fake_post)
    source = RemoteSource(RemoteConfig(endpoint="https://api.example.com/graphql"))

    note = asyncio.run(source.create_note("  hi there ", "HAPPY"))

    assert bodies[0]["variables"] == {"text": "hi there", "sentiment": "happy"}
    assert note.id == "01SERVER"
    assert note.date_created == "2024-11-16T09:00:00Z"


def test_instances_keep_independent_configuration(monkeypatch) -> None:
    urls: list[str] = []

    def fake_post(url, body, **kwargs):
        urls.append(url)
        return _page_payload([])

    monkeypatch.setattr(http_client, "post_graphql", fake_post)
    first = RemoteSource(RemoteConfig(endpoint="https://one.example.com/graphql"))
    second = RemoteSource(RemoteConfig(endpoint="https://two.example.com/graphql"))

    asyncio.run(first.fetch_page())
    asyncio.run(second.fetch_page())

    assert urls == ["https://one.example.com/graphql", "https://two.example.com/graphql"]
