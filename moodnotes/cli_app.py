from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich import print
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .board import BoardView, NotesBoard
from .config import MoodNotesConfig, load_config
from .local_store import LocalFallbackStore
from .notes import Note, Sentiment

app = typer.Typer(help="moodnotes: short notes tagged with how you feel")
fallback_app = typer.Typer(help="Inspect notes queued locally after failed saves")
app.add_typer(fallback_app, name="fallback")

SENTIMENT_STYLES = {
    Sentiment.HAPPY: "green",
    Sentiment.SAD: "blue",
    Sentiment.ANGRY: "red",
    Sentiment.NEUTRAL: "white",
}

_state: dict[str, Path | None] = {"config_path": None}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.callback()
def main(
    config: Path | None = typer.Option(None, "--config", help="Path to config JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    _configure_logging(verbose)
    _state["config_path"] = config


def _config() -> MoodNotesConfig:
    return load_config(_state["config_path"])


def _parse_filter(value: str | None) -> Sentiment | None:
    try:
        return Sentiment.parse_optional(value)
    except ValueError as exc:
        print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from exc


def _format_note(note: Note) -> str:
    style = SENTIMENT_STYLES[note.sentiment]
    return (
        f"[{style}]{note.sentiment.value:<8}[/{style}] "
        f"[dim]{note.date_created}[/dim]  {escape(note.text)}"
    )


def _print_view(view: BoardView) -> None:
    label = f"{view.sentiment.value} notes" if view.sentiment else "total notes"
    print(f"[bold]{len(view.notes)} {label}[/bold]")
    if not view.remote_ok:
        print("[yellow]Remote unavailable; showing local notes only[/yellow]")
    if not view.notes:
        print("No notes found")
    for note in view.notes:
        print(_format_note(note))
    footer = f"Page {view.state.page_index}"
    if view.state.estimated_total_pages > 1:
        footer += f" of {view.state.estimated_total_pages}"
    if view.state.has_next_page:
        footer += " (more)"
    print(f"[dim]{footer}[/dim]")


@app.command("list")
def list_notes(
    sentiment: str | None = typer.Option(None, help="Only show notes with this sentiment"),
    page: int = typer.Option(1, min=1, help="Page number to show"),
) -> None:
    """Show one page of notes."""

    parsed = _parse_filter(sentiment)
    board = NotesBoard.from_config(_config())

    async def _run() -> BoardView:
        await board.set_filter(parsed)
        while board.pagination.state.page_index < page and board.pagination.can_advance:
            before = board.pagination.state.page_index
            await board.next_page()
            # a failed advance leaves the page unchanged
            if not board.remote_ok or board.pagination.state.page_index == before:
                break
        return board.view()

    view = asyncio.run(_run())
    if view.state.page_index < page:
        print(f"[yellow]Only {view.state.page_index} page(s) available[/yellow]")
    _print_view(view)


@app.command("add")
def add_note(
    text: str = typer.Argument(..., help="Note text"),
    sentiment: str = typer.Option(Sentiment.NEUTRAL.value, help="How you feel"),
) -> None:
    """Create a note, queueing it locally if the remote save fails."""

    parsed = _parse_filter(sentiment)
    if parsed is None:
        print("[red]a sentiment is required[/red]")
        raise typer.Exit(code=2)
    board = NotesBoard.from_config(_config())
    try:
        outcome = asyncio.run(board.create_note(text, parsed))
    except ValueError as exc:
        print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from exc
    where = "saved remotely" if outcome.remote else "queued locally"
    print(f"Note {outcome.note.id} {where}")


@app.command("browse")
def browse(
    sentiment: str | None = typer.Option(None, help="Initial sentiment filter"),
) -> None:
    """Page through notes interactively."""

    parsed = _parse_filter(sentiment)
    board = NotesBoard.from_config(_config())

    async def _session() -> None:
        await board.set_filter(parsed)
        _print_view(board.view())
        while True:
            command = typer.prompt("[n]ext [p]rev [f <sentiment|all>] [a]dd [q]uit", default="q")
            action, _, arg = command.strip().partition(" ")
            action = action.lower()
            if action == "q":
                return
            if action == "n":
                if not board.pagination.can_advance:
                    print("No next page")
                    continue
                await board.next_page()
            elif action == "p":
                if not board.pagination.can_retreat:
                    print("Already on the first page")
                    continue
                await board.prev_page()
            elif action == "f":
                try:
                    await board.set_filter(arg or None)
                except ValueError as exc:
                    print(f"[red]{escape(str(exc))}[/red]")
                    continue
            elif action == "a":
                text = typer.prompt("Note")
                mood = typer.prompt("Sentiment", default=Sentiment.NEUTRAL.value)
                try:
                    outcome = await board.create_note(text, mood)
                except ValueError as exc:
                    print(f"[red]{escape(str(exc))}[/red]")
                    continue
                where = "saved remotely" if outcome.remote else "queued locally"
                print(f"Note {outcome.note.id} {where}")
            else:
                print(f"Unknown command: {escape(action)}")
                continue
            _print_view(board.view())

    asyncio.run(_session())


def _fallback_store() -> LocalFallbackStore:
    return LocalFallbackStore(_config().cache_path)


@fallback_app.command("show")
def fallback_show() -> None:
    """List notes waiting in the local fallback slot."""

    store = _fallback_store()
    notes = store.load()
    if not notes:
        print("No locally queued notes")
        return
    print(f"[bold]{len(notes)} locally queued notes[/bold] ({store.path})")
    for note in notes:
        print(_format_note(note))


@fallback_app.command("clear")
def fallback_clear(
    yes: bool = typer.Option(False, "--yes", help="Skip confirmation"),
) -> None:
    """Delete every locally queued note."""

    store = _fallback_store()
    if not yes and not typer.confirm(f"Delete all notes in {store.path}?"):
        raise typer.Exit(code=1)
    if not store.clear():
        print("[red]Could not clear the fallback store[/red]")
        raise typer.Exit(code=1)
    print("Fallback store cleared")


@app.command()
def version() -> None:
    """Print the moodnotes version."""

    print(__version__)
