"""
View state for the terminal UI.

NotesState is the whole list -> editor -> preview machine plus the
prompt / yes-no overlays. It holds no widgets, so the key bindings in
``udon.ui.app`` are plain dispatch onto these methods. Store errors are
caught here and shown in ``status``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from udon.core.errors import UdonError
from udon.core.models import Note
from udon.infrastructure.filesystem import write_recovery_copy
from udon.services.session import (
    CloseStatus,
    DeleteStatus,
    SaveStatus,
    UpdateStatus,
    confirm_close,
    confirm_delete,
    confirm_save,
    confirm_update,
    load_to_memory,
    search_notes,
)
from udon.settings import RECOVERY_DIR
from udon.vault.store import NoteStore

log = logging.getLogger(__name__)


class Mode(Enum):
    LIST = auto()
    EDITOR = auto()
    PREVIEW = auto()


class PromptKind(Enum):
    NEW_NOTE = auto()
    RENAME = auto()
    SEARCH = auto()


class ConfirmKind(Enum):
    SAVE = auto()
    UPDATE = auto()
    RENAME = auto()
    DELETE = auto()
    CLOSE = auto()


@dataclass
class Prompt:
    kind: PromptKind
    label: str
    text: str = ""
    target: str | None = None


@dataclass
class Confirmation:
    kind: ConfirmKind
    question: str
    title: str
    new_title: str | None = None
    quit_after: bool = False


SAVE_MESSAGES = {
    SaveStatus.SAVED: "Saved {title!r}",
    SaveStatus.NOTE_EXISTS: "A note titled {title!r} already exists",
    SaveStatus.NOT_SAVED: "Not saved",
}
CLOSE_MESSAGES = {
    CloseStatus.SAVED: "Saved {title!r}",
    CloseStatus.UNSAVED: "Discarded changes to {title!r}",
}
UPDATE_MESSAGES = {
    UpdateStatus.UPDATED: "Updated {title!r}",
    UpdateStatus.DUPLICATE: "A note titled {title!r} already exists",
    UpdateStatus.NOT_UPDATED: "Not updated",
}
DELETE_MESSAGES = {
    DeleteStatus.DELETED: "Deleted {title!r}",
    DeleteStatus.NOT_DELETED: "Not deleted",
}


class NotesState:
    def __init__(self, store: NoteStore, *, recovery_dir: Path = RECOVERY_DIR):
        self.store = store
        self.recovery_dir = recovery_dir

        self.mode = Mode.LIST
        self.notes: list[Note] = []
        self.index = 0
        self.query = ""

        self.current: Note | None = None
        self.is_new = False
        self.buffer = ""

        self.prompt: Prompt | None = None
        self.confirmation: Confirmation | None = None
        self.status = ""
        self.should_exit = False

        self.refresh()

    # ───────────────────────── derived ─────────────────────────

    @property
    def selected(self) -> Note | None:
        if not self.notes:
            return None
        return self.notes[self.index]

    @property
    def dirty(self) -> bool:
        if self.current is None:
            return False
        if self.is_new:
            return True
        return self.buffer.rstrip() != self.current.content.rstrip()

    @property
    def title_line(self) -> str:
        if self.current is None:
            return "udon"
        if self.mode is Mode.EDITOR:
            marker = " *" if self.dirty else ""
            return f"{self.current.title}{marker} - Editing"
        return f"{self.current.title} - Preview"

    # ───────────────────────── list ─────────────────────────

    def refresh(self) -> None:
        try:
            if self.query:
                self.notes = search_notes(self.store, self.query)
            else:
                self.notes = self.store.list_all()
        except UdonError as exc:
            log.warning("Refreshing note list failed: %s", exc)
            self.status = f"Error: {exc}"
            return
        self.index = max(0, min(self.index, len(self.notes) - 1))

    def move(self, delta: int) -> None:
        if not self.notes:
            return
        self.index = max(0, min(self.index + delta, len(self.notes) - 1))

    def select_title(self, title: str) -> None:
        for i, note in enumerate(self.notes):
            if note.title == title:
                self.index = i
                return

    # ───────────────────────── mode transitions ─────────────────────────

    def open_selected(self) -> None:
        if self._load_selected():
            self.mode = Mode.EDITOR

    def preview_selected(self) -> None:
        if self._load_selected():
            self.mode = Mode.PREVIEW

    def edit(self) -> None:
        if self.mode is Mode.PREVIEW and self.current is not None:
            self.buffer = self.current.content
            self.mode = Mode.EDITOR

    def set_buffer(self, text: str) -> None:
        self.buffer = text

    def back(self) -> None:
        if self.mode is Mode.EDITOR and self.dirty:
            self.confirmation = Confirmation(
                kind=ConfirmKind.CLOSE,
                question=f"Save changes to {self.current.title!r} before closing?",
                title=self.current.title,
            )
            return
        self._to_list()

    def request_quit(self) -> None:
        if self.mode is Mode.EDITOR and self.dirty:
            self.confirmation = Confirmation(
                kind=ConfirmKind.CLOSE,
                question=f"Save changes to {self.current.title!r} before quitting?",
                title=self.current.title,
                quit_after=True,
            )
            return
        self.should_exit = True

    # ───────────────────────── prompts ─────────────────────────

    def begin_new(self) -> None:
        self.prompt = Prompt(kind=PromptKind.NEW_NOTE, label="New note title: ")

    def begin_rename(self) -> None:
        target = self._target_title()
        if target is None:
            self.status = "No note selected"
            return
        self.prompt = Prompt(kind=PromptKind.RENAME, label="Rename to: ", text=target, target=target)

    def begin_search(self) -> None:
        self.prompt = Prompt(kind=PromptKind.SEARCH, label="Search: ", text=self.query)

    def cancel_prompt(self) -> None:
        self.prompt = None
        self.status = "Cancelled"

    def submit_prompt(self, text: str) -> None:
        prompt, self.prompt = self.prompt, None
        if prompt is None:
            return

        if prompt.kind is PromptKind.SEARCH:
            self.query = text.strip()
            self.index = 0
            self.refresh()
            self.status = f"{len(self.notes)} match(es) for {self.query!r}" if self.query else "Search cleared"
            return

        title = text.strip()
        if not title:
            self.status = "Title cannot be empty"
            return

        if prompt.kind is PromptKind.NEW_NOTE:
            self.current = Note(title=title, content="")
            self.is_new = True
            self.buffer = ""
            self.mode = Mode.EDITOR
            self.status = f"New note {title!r}"
            return

        # rename
        if self.is_new and self.current is not None and self.current.title == prompt.target:
            self.current.title = title
            self.status = f"Renamed unsaved note to {title!r}"
            return
        if title == prompt.target:
            self.status = "Title unchanged"
            return
        self.confirmation = Confirmation(
            kind=ConfirmKind.RENAME,
            question=f"Rename {prompt.target!r} to {title!r}?",
            title=prompt.target,
            new_title=title,
        )

    # ───────────────────────── confirmations ─────────────────────────

    def request_save(self) -> None:
        if self.mode is not Mode.EDITOR or self.current is None:
            return
        title = self.current.title
        if self.is_new:
            self.confirmation = Confirmation(
                kind=ConfirmKind.SAVE, question=f"Save new note {title!r}?", title=title
            )
        elif self.dirty:
            self.confirmation = Confirmation(
                kind=ConfirmKind.UPDATE, question=f"Save changes to {title!r}?", title=title
            )
        else:
            self.status = "No changes to save"

    def request_delete(self) -> None:
        target = self._target_title()
        if target is None:
            self.status = "No note selected"
            return
        if self.is_new and self.current is not None and self.current.title == target:
            self.status = "Note is not saved yet"
            return
        self.confirmation = Confirmation(
            kind=ConfirmKind.DELETE, question=f"Delete {target!r}?", title=target
        )

    def answer(self, confirm: bool) -> None:
        pending, self.confirmation = self.confirmation, None
        if pending is None:
            return

        try:
            if pending.kind is ConfirmKind.SAVE:
                self._answer_save(pending, confirm)
            elif pending.kind is ConfirmKind.UPDATE:
                self._answer_update(pending, confirm)
            elif pending.kind is ConfirmKind.RENAME:
                self._answer_rename(pending, confirm)
            elif pending.kind is ConfirmKind.DELETE:
                self._answer_delete(pending, confirm)
            elif pending.kind is ConfirmKind.CLOSE:
                self._answer_close(pending, confirm)
        except UdonError as exc:
            log.warning("%s of %r failed: %s", pending.kind.name.lower(), pending.title, exc)
            self.status = f"Error: {exc}"
            if confirm and pending.kind in (ConfirmKind.SAVE, ConfirmKind.UPDATE, ConfirmKind.CLOSE):
                self._write_recovery()

        self.refresh()
        focus = self.current.title if self.current is not None else pending.new_title
        if focus:
            self.select_title(focus)

    # ───────────────────────── internal ─────────────────────────

    def _answer_save(self, pending: Confirmation, confirm: bool) -> None:
        status = confirm_save(self.store, Note(title=pending.title, content=self.buffer), confirm)
        self.status = SAVE_MESSAGES[status].format(title=pending.title)
        if status is SaveStatus.SAVED:
            self._mark_saved()

    def _answer_update(self, pending: Confirmation, confirm: bool) -> None:
        status = confirm_update(self.store, pending.title, None, self.buffer, confirm)
        self.status = UPDATE_MESSAGES[status].format(title=pending.title)
        if status is UpdateStatus.UPDATED:
            self._mark_saved()

    def _answer_rename(self, pending: Confirmation, confirm: bool) -> None:
        status = confirm_update(self.store, pending.title, pending.new_title, None, confirm)
        if status is UpdateStatus.UPDATED:
            self.status = f"Renamed {pending.title!r} to {pending.new_title!r}"
            if self.current is not None and self.current.title == pending.title:
                self.current.title = pending.new_title
            return
        self.status = UPDATE_MESSAGES[status].format(title=pending.new_title)

    def _answer_delete(self, pending: Confirmation, confirm: bool) -> None:
        status = confirm_delete(self.store, pending.title, confirm)
        self.status = DELETE_MESSAGES[status].format(title=pending.title)
        if status is DeleteStatus.DELETED and self.current is not None and self.current.title == pending.title:
            self._to_list()

    def _answer_close(self, pending: Confirmation, confirm: bool) -> None:
        note = Note(title=pending.title, content=self.buffer)
        if self.is_new:
            # an unsaved note still goes through the duplicate check
            status = confirm_save(self.store, note, confirm)
            if status is SaveStatus.NOTE_EXISTS:
                self.status = SAVE_MESSAGES[status].format(title=pending.title)
                return
            self.status = (
                CLOSE_MESSAGES[CloseStatus.SAVED] if status is SaveStatus.SAVED
                else CLOSE_MESSAGES[CloseStatus.UNSAVED]
            ).format(title=pending.title)
        else:
            status = confirm_close(self.store, note, confirm)
            self.status = CLOSE_MESSAGES[status].format(title=pending.title)

        self._to_list()
        if pending.quit_after:
            self.should_exit = True

    def _mark_saved(self) -> None:
        self.current.content = self.buffer.rstrip()
        self.is_new = False

    def _load_selected(self) -> bool:
        note = self.selected
        if note is None:
            self.status = "No note selected"
            return False
        try:
            loaded = load_to_memory(self.store, note.title)
        except UdonError as exc:
            self.status = f"Error loading note: {exc}"
            return False
        self.current = loaded
        self.is_new = False
        self.buffer = loaded.content
        self.status = ""
        return True

    def _target_title(self) -> str | None:
        if self.mode is not Mode.LIST and self.current is not None:
            return self.current.title
        note = self.selected
        return note.title if note is not None else None

    def _to_list(self) -> None:
        self.mode = Mode.LIST
        self.current = None
        self.is_new = False
        self.buffer = ""

    def _write_recovery(self) -> None:
        if self.current is None:
            return
        try:
            path = write_recovery_copy(self.current.title, self.buffer, recovery_dir=self.recovery_dir)
        except OSError:
            log.exception("Failed to write recovery copy")
            return
        self.status += f" (recovery copy: {path})"
