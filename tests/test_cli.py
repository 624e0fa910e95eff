from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from moodnotes import __version__, cli_app
from moodnotes.cli_app import app
from moodnotes.errors import RemoteUnavailable
from moodnotes.local_store import LocalFallbackStore
from moodnotes.remote import http_client

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_app, "_configure_logging", lambda verbose: None)


def _offline_env(tmp_path: Path, **extra: str) -> dict[str, str]:
    env = {"MOODNOTES_CACHE_DIR": str(tmp_path / "cache")}
    env.update(extra)
    return env


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_list_offline_shows_sample_notes(tmp_path: Path) -> None:
    env = _offline_env(tmp_path, MOODNOTES_SHOW_SAMPLES="1")

    result = runner.invoke(app, ["list"], env=env)

    assert result.exit_code == 0
    assert "4 total notes" in result.stdout
    assert "Remote unavailable" in result.stdout
    assert "Page 1" in result.stdout


def test_list_filters_by_sentiment(tmp_path: Path) -> None:
    env = _offline_env(tmp_path, MOODNOTES_SHOW_SAMPLES="1")

    result = runner.invoke(app, ["list", "--sentiment", "ANGRY"], env=env)

    assert result.exit_code == 0
    assert "1 angry notes" in result.stdout
    assert "Traffic was terrible" in result.stdout


def test_list_rejects_unknown_sentiment(tmp_path: Path) -> None:
    result = runner.invoke(app, ["list", "--sentiment", "bogus"], env=_offline_env(tmp_path))
    assert result.exit_code == 2
    assert "invalid sentiment" in result.stdout


def test_add_offline_queues_note_locally(tmp_path: Path) -> None:
    env = _offline_env(tmp_path)

    result = runner.invoke(app, ["add", "walked the dog", "--sentiment", "happy"], env=env)

    assert result.exit_code == 0
    assert "queued locally" in result.stdout
    notes = LocalFallbackStore(tmp_path / "cache").load()
    assert [note.text for note in notes] == ["walked the dog"]

    shown = runner.invoke(app, ["fallback", "show"], env=env)
    assert shown.exit_code == 0
    assert "1 locally queued notes" in shown.stdout
    assert "walked the dog" in shown.stdout

    cleared = runner.invoke(app, ["fallback", "clear", "--yes"], env=env)
    assert cleared.exit_code == 0
    assert LocalFallbackStore(tmp_path / "cache").load() == []


def test_add_rejects_blank_text(tmp_path: Path) -> None:
    result = runner.invoke(app, ["add", "   "], env=_offline_env(tmp_path))
    assert result.exit_code == 2
    assert "must not be empty" in result.stdout


def test_add_saves_remotely_when_endpoint_answers(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    created = {
        "id": "01REMOTE",
        "text": "hello remote",
        "sentiment": "happy",
        "dateCreated": "2024-11-16T09:00:00Z",
    }
    queries: list[str] = []

    def fake_post(url: str, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        queries.append(body["query"].split("(")[0].split()[1])
        if body["query"].startswith("mutation"):
            return {"data": {"createNote": created}}
        return {"data": {"getNotes": {"items": [created], "nextToken": None}}}

    monkeypatch.setattr(http_client, "post_graphql", fake_post)
    env = _offline_env(tmp_path, MOODNOTES_REMOTE_ENDPOINT="https://api.example.com/graphql")

    result = runner.invoke(app, ["add", "hello remote", "--sentiment", "happy"], env=env)

    assert result.exit_code == 0
    assert "01REMOTE saved remotely" in result.stdout
    assert queries == ["CreateNote", "GetNotes"]
    assert LocalFallbackStore(tmp_path / "cache").load() == []


def test_browse_pages_and_filters(tmp_path: Path) -> None:
    env = _offline_env(tmp_path, MOODNOTES_SHOW_SAMPLES="1")

    result = runner.invoke(app, ["browse"], input="n\np\nf sad\nf furious\nq\n", env=env)

    assert result.exit_code == 0
    assert "No next page" in result.stdout
    assert "Already on the first page" in result.stdout
    assert "1 sad notes" in result.stdout
    assert "invalid sentiment" in result.stdout


def test_list_stops_paging_when_remote_drops_mid_walk(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    first_page = {
        "id": "01FIRST",
        "text": "first page note",
        "sentiment": "neutral",
        "dateCreated": "2024-11-16T09:00:00Z",
    }
    calls: list[dict[str, Any]] = []

    def flaky_post(url: str, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        calls.append(body["variables"])
        if len(calls) == 1:
            return {"data": {"getNotes": {"items": [first_page], "nextToken": "tok1"}}}
        raise RemoteUnavailable("remote request failed: timed out")

    monkeypatch.setattr(http_client, "post_graphql", flaky_post)
    env = _offline_env(tmp_path, MOODNOTES_REMOTE_ENDPOINT="https://api.example.com/graphql")

    result = runner.invoke(app, ["list", "--page", "3"], env=env)

    assert result.exit_code == 0
    assert len(calls) == 2
    assert "Only 1 page(s) available" in result.stdout
    assert "Remote unavailable" in result.stdout
