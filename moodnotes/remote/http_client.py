from __future__ import annotations

import json
from http.client import HTTPConnection, HTTPException, HTTPSConnection
from typing import Any
from urllib.parse import urlparse

from ..errors import RemoteUnavailable


def normalize_endpoint(address: str) -> str:
    trimmed = address.strip()
    if not trimmed:
        return ""
    parsed = urlparse(trimmed)
    if parsed.scheme:
        return trimmed
    return f"https://{trimmed}"


def _connect(endpoint: str, timeout_s: float) -> tuple[HTTPConnection, str]:
    parsed = urlparse(endpoint)
    if not parsed.hostname:
        raise RemoteUnavailable(f"remote endpoint has no host: {endpoint}")
    if parsed.scheme == "https":
        conn: HTTPConnection = HTTPSConnection(
            parsed.hostname, parsed.port or 443, timeout=timeout_s
        )
    else:
        conn = HTTPConnection(parsed.hostname, parsed.port or 80, timeout=timeout_s)
    path = parsed.path or "/"
    if parsed.query:
        path = f"{path}?{parsed.query}"
    return conn, path


def _decode(raw: bytes) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        snippet = raw[:240].decode("utf-8", errors="replace").strip()
        return {"message": f"non-JSON response: {snippet}" if snippet else "non-JSON response"}


def _error_detail(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        payload = errors[0]
    for key in ("message", "errorType", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def post_graphql(
    url: str,
    body: dict[str, Any],
    *,
    api_key: str = "",
    timeout_s: float = 5.0,
) -> dict[str, Any]:
    """POST one GraphQL operation and return the decoded response object.

    Every failure, including transport errors, surfaces as RemoteUnavailable.
    GraphQL-level ``errors`` on a 200 response are left in the payload for
    the caller.
    """

    endpoint = normalize_endpoint(url)
    if not endpoint:
        raise RemoteUnavailable("remote endpoint not configured")
    conn, path = _connect(endpoint, timeout_s)
    encoded = json.dumps(body, ensure_ascii=False).encode("utf-8")
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Content-Length": str(len(encoded)),
    }
    if api_key:
        headers["x-api-key"] = api_key
    try:
        conn.request("POST", path, body=encoded, headers=headers)
        resp = conn.getresponse()
        status = int(resp.status)
        payload = _decode(resp.read())
    except (OSError, HTTPException) as exc:
        detail = str(exc).strip() or exc.__class__.__name__
        raise RemoteUnavailable(f"remote request failed: {detail}") from exc
    finally:
        conn.close()
    if status != 200 or not isinstance(payload, dict):
        detail = _error_detail(payload)
        if detail is None and payload is not None and not isinstance(payload, dict):
            detail = f"unexpected {type(payload).__name__} response"
        suffix = f" ({status}: {detail})" if detail else f" ({status})"
        raise RemoteUnavailable(f"remote request failed{suffix}")
    return payload
