"""Translate between note operations and the GraphQL wire format.

These functions never touch the network. ``build_*`` produce request
bodies, ``parse_*`` turn decoded responses into notes. A response that does
not match the expected shape raises RemoteUnavailable rather than yielding
a partial result.
"""

from __future__ import annotations

from typing import Any

from ..errors import MalformedCursor, RemoteUnavailable
from ..notes import Note, PageResult, Sentiment

GET_NOTES_QUERY = """
query GetNotes($sentiment: Sentiment, $limit: Int, $nextToken: String) {
  getNotes(sentiment: $sentiment, limit: $limit, nextToken: $nextToken) {
    items {
      id
      text
      sentiment
      dateCreated
    }
    nextToken
    scannedCount
  }
}
""".strip()

CREATE_NOTE_MUTATION = """
mutation CreateNote($text: String!, $sentiment: Sentiment!) {
  createNote(text: $text, sentiment: $sentiment) {
    id
    text
    sentiment
    dateCreated
  }
}
""".strip()

# Substrings the remote uses when it refuses a continuation token.
_CURSOR_ERROR_MARKERS = (
    "nexttoken",
    "next token",
    "pagination token",
    "paginationtoken",
    "exclusivestartkey",
)


def build_get_notes_request(
    sentiment: Sentiment | None,
    cursor: str | None,
    page_size: int,
) -> dict[str, Any]:
    variables: dict[str, Any] = {"limit": int(page_size)}
    if sentiment is not None:
        variables["sentiment"] = Sentiment.parse(sentiment).value
    if cursor:
        variables["nextToken"] = cursor
    return {"query": GET_NOTES_QUERY, "variables": variables}


def build_create_note_request(text: str, sentiment: Sentiment) -> dict[str, Any]:
    return {
        "query": CREATE_NOTE_MUTATION,
        "variables": {"text": text, "sentiment": Sentiment.parse(sentiment).value},
    }


def _graphql_messages(errors: list[Any]) -> list[str]:
    messages: list[str] = []
    for error in errors:
        if isinstance(error, dict):
            parts = [
                str(error.get(key) or "").strip() for key in ("errorType", "message")
            ]
            text = ": ".join(part for part in parts if part)
            messages.append(text or "unknown error")
        else:
            messages.append(str(error))
    return messages


def raise_for_graphql_errors(payload: dict[str, Any], *, cursor: str | None = None) -> None:
    errors = payload.get("errors")
    if not errors:
        return
    if not isinstance(errors, list):
        raise RemoteUnavailable("remote returned malformed errors")
    messages = _graphql_messages(errors)
    summary = " | ".join(messages)
    if cursor:
        lowered = summary.lower()
        if any(marker in lowered for marker in _CURSOR_ERROR_MARKERS):
            raise MalformedCursor(f"remote rejected cursor: {summary}")
    raise RemoteUnavailable(f"remote returned errors: {summary}")


def _operation_data(payload: dict[str, Any], field_name: str) -> Any:
    data = payload.get("data")
    if not isinstance(data, dict):
        raise RemoteUnavailable("remote response missing data")
    if field_name not in data or data[field_name] is None:
        raise RemoteUnavailable(f"remote response missing {field_name}")
    return data[field_name]


def parse_note(item: Any) -> Note:
    try:
        return Note.from_dict(item)
    except ValueError as exc:
        raise RemoteUnavailable(f"remote returned malformed note: {exc}") from exc


def parse_get_notes_response(
    payload: dict[str, Any], *, cursor: str | None = None
) -> PageResult:
    raise_for_graphql_errors(payload, cursor=cursor)
    result = _operation_data(payload, "getNotes")
    if not isinstance(result, dict):
        raise RemoteUnavailable("remote getNotes is not an object")
    raw_items = result.get("items") or []
    if not isinstance(raw_items, list):
        raise RemoteUnavailable("remote getNotes.items is not a list")
    items = [parse_note(item) for item in raw_items]

    next_token = result.get("nextToken")
    if next_token is not None and not isinstance(next_token, str):
        raise RemoteUnavailable("remote getNotes.nextToken is not a string")

    scanned = result.get("scannedCount")
    if scanned is not None and (isinstance(scanned, bool) or not isinstance(scanned, int)):
        raise RemoteUnavailable("remote getNotes.scannedCount is not an integer")

    return PageResult(
        items=items,
        next_cursor=next_token or None,
        scanned_count=scanned or None,
    )


def parse_create_note_response(payload: dict[str, Any]) -> Note:
    raise_for_graphql_errors(payload)
    return parse_note(_operation_data(payload, "createNote"))
