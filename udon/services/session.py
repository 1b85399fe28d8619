"""
Confirmation-gated, duplicate-aware note operations.

Every function takes the store explicitly and keeps no state of its own.
A ``confirm`` of False never touches the store. Store errors are passed
through unchanged.
"""

from __future__ import annotations

import logging
from enum import Enum

from udon.core.models import Note
from udon.vault.store import NoteStore

log = logging.getLogger(__name__)


class SaveStatus(Enum):
    SAVED = "saved"
    NOTE_EXISTS = "note exists"
    NOT_SAVED = "not saved"


class CloseStatus(Enum):
    SAVED = "saved"
    UNSAVED = "unsaved"


class UpdateStatus(Enum):
    UPDATED = "updated"
    DUPLICATE = "duplicate"
    NOT_UPDATED = "not updated"


class DeleteStatus(Enum):
    DELETED = "deleted"
    NOT_DELETED = "not deleted"


def load_to_memory(store: NoteStore, title: str) -> Note:
    return store.load(title)


def search_notes(store: NoteStore, query: str) -> list[Note]:
    """Notes whose title or content contains ``query``, ignoring case."""
    q = query.casefold()
    return [
        note for note in store.list_all()
        if q in note.title.casefold() or q in note.content.casefold()
    ]


def is_duplicate_title(store: NoteStore, title: str) -> bool:
    # Raw, case-sensitive comparison. Titles that only collide after
    # sanitization are not caught here.
    return any(note.title == title for note in store.list_all())


def confirm_save(store: NoteStore, note: Note, confirm: bool) -> SaveStatus:
    if not confirm:
        return SaveStatus.NOT_SAVED
    if is_duplicate_title(store, note.title):
        log.info("Save refused, note %r already exists", note.title)
        return SaveStatus.NOTE_EXISTS
    store.save(note)
    return SaveStatus.SAVED


def confirm_close(store: NoteStore, note: Note, confirm: bool) -> CloseStatus:
    if not confirm:
        return CloseStatus.UNSAVED
    store.save(note)
    return CloseStatus.SAVED


def confirm_update(
    store: NoteStore,
    old_title: str,
    new_title: str | None,
    new_content: str | None,
    confirm: bool,
) -> UpdateStatus:
    if not confirm:
        return UpdateStatus.NOT_UPDATED

    if new_title is not None and new_title.strip() and new_title != old_title:
        if is_duplicate_title(store, new_title):
            log.info("Rename %r -> %r refused, target exists", old_title, new_title)
            return UpdateStatus.DUPLICATE

    store.update(old_title, new_title, new_content)
    return UpdateStatus.UPDATED


def confirm_delete(store: NoteStore, title: str, confirm: bool) -> DeleteStatus:
    if not confirm:
        return DeleteStatus.NOT_DELETED
    store.delete(title)
    return DeleteStatus.DELETED
