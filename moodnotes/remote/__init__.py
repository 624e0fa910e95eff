from __future__ import annotations

from .source import RemoteSource

__all__ = ["RemoteSource"]
