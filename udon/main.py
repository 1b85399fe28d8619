"""Command line entry point: ``udon`` opens the TUI, ``udon ls`` prints notes."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from udon.core.errors import UdonError
from udon.logging_setup import SESSION_ID, install_global_exception_hooks, log, setup_logging
from udon.services.session import search_notes
from udon.settings import resolve_notes_dir
from udon.vault.store import NoteStore

app = typer.Typer(
    name="udon",
    help="udon - plain-text notes in your terminal",
    no_args_is_help=False,
)

console = Console()

NotesDirOption = typer.Option(
    None,
    "--notes-dir",
    help="Directory holding the notes (default: $UDON_NOTES_DIR or ~/Documents/udon)",
)
LogFileOption = typer.Option(
    None,
    "--log-file",
    help="Write the debug log here instead of ~/.udon/logs/udon.log",
)
VerboseOption = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Also print info-level log messages to stderr",
)


def open_store(notes_dir: Optional[Path]) -> NoteStore:
    try:
        return NoteStore(resolve_notes_dir(notes_dir))
    except UdonError as exc:
        log.error("Failed to initialize store: %s", exc)
        console.print(f"[red]failed to initialize store:[/red] {exc}")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    notes_dir: Optional[Path] = NotesDirOption,
    log_file: Optional[Path] = LogFileOption,
    verbose: bool = VerboseOption,
) -> None:
    """Browse, preview and edit notes."""
    setup_logging(
        log_path=log_file,
        console_level=logging.INFO if verbose else logging.WARNING,
    )
    install_global_exception_hooks()
    ctx.obj = notes_dir

    if ctx.invoked_subcommand is not None:
        return

    # imported here so `udon ls` works without a terminal
    from udon.ui.app import run_app
    from udon.ui.state import NotesState

    store = open_store(notes_dir)
    log.info("udon started, SID=%s notes_dir=%s", SESSION_ID, store.notes_dir)
    run_app(NotesState(store))


@app.command("ls")
def list_notes(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Only show notes whose title or content contains this"),
) -> None:
    """List notes, most recently modified first."""
    store = open_store(ctx.obj)
    try:
        notes = search_notes(store, query) if query else store.list_all()
    except UdonError as exc:
        console.print(f"[red]error:[/red] {exc}")
        raise typer.Exit(code=1)

    if not notes:
        console.print("[dim]No notes found.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Title", style="green")
    table.add_column("Modified")
    for note in notes:
        table.add_row(note.title, note.mod_time.strftime("%Y-%m-%d %H:%M"))
    console.print(table)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
