from __future__ import annotations


class MoodNotesError(Exception):
    """Base class for note sync failures."""


class RemoteUnavailable(MoodNotesError):
    """The remote query/mutation endpoint could not serve the request.

    Raised for transport errors, auth rejections, non-200 responses and
    payloads that do not match the expected shape.
    """


class MalformedCursor(RemoteUnavailable):
    """The remote rejected a stale or incompatible continuation token."""


class LocalStoreUnavailable(MoodNotesError):
    """The local fallback slot could not be read or written."""
