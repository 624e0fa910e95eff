from __future__ import annotations

from pathlib import Path

import pytest
from fakes import FakeRemote

from moodnotes.config import CONFIG_ENV_OVERRIDES
from moodnotes.local_store import LocalFallbackStore


@pytest.fixture(autouse=True)
def _isolate_moodnotes_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for env_var in CONFIG_ENV_OVERRIDES.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setenv("MOODNOTES_CONFIG", str(tmp_path / "config.json"))


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def store(tmp_path: Path) -> LocalFallbackStore:
    return LocalFallbackStore(tmp_path / "cache")
