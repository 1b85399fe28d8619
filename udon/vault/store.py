from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from udon.core.errors import (
    DeleteError,
    DirectoryReadError,
    InitializationError,
    NotFoundError,
    ReadError,
    RenameError,
    ValidationError,
    WriteError,
)
from udon.core.filenames import note_filename, title_from_filename
from udon.core.models import Note, SkippedEntry
from udon.infrastructure.filesystem import atomic_write_text

log = logging.getLogger(__name__)


def _local_mtime(st: os.stat_result) -> datetime:
    return datetime.fromtimestamp(st.st_mtime).astimezone()


def _trim_content(content: str) -> str:
    return content.rstrip()


def _read_text(path: Path) -> str:
    # newline="" keeps \r\n and \r exactly as written
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


@dataclass(frozen=True)
class NoteStore:
    """
    One flat directory, one file per note.

    Constructing the store creates the directory, so every instance is
    ready to use. Nothing is cached: each call goes back to the disk.
    """
    notes_dir: Path

    def __post_init__(self) -> None:
        notes_dir = Path(self.notes_dir).expanduser()
        object.__setattr__(self, "notes_dir", notes_dir)
        try:
            notes_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InitializationError(
                f"could not create notes directory {notes_dir}: {exc}"
            ) from exc
        log.debug("Note store ready: %s", notes_dir)

    def note_path(self, title: str) -> Path:
        return self.notes_dir / note_filename(title)

    # ───────────────────────── queries ─────────────────────────

    def list_all(self, *, skipped: list[SkippedEntry] | None = None) -> list[Note]:
        """
        Every note in the directory, most recently modified first.

        Entries that cannot be read are left out; pass ``skipped`` to
        collect them.
        """
        try:
            with os.scandir(self.notes_dir) as it:
                entries = list(it)
        except OSError as exc:
            raise DirectoryReadError(
                "error reading notes directory", path=self.notes_dir, cause=exc
            ) from exc

        notes: list[Note] = []
        for entry in entries:
            title = title_from_filename(entry.name)
            if title is None:
                continue
            try:
                if not entry.is_file():
                    continue
                content = _read_text(Path(entry.path))
                st = entry.stat()
            except (OSError, UnicodeDecodeError) as exc:
                log.warning("Skipping unreadable note file %s: %s", entry.path, exc)
                if skipped is not None:
                    skipped.append(SkippedEntry(path=Path(entry.path), reason=str(exc)))
                continue

            notes.append(Note(title=title, content=content, mod_time=_local_mtime(st)))

        notes.sort(key=lambda n: n.mod_time, reverse=True)
        return notes

    def load(self, title: str) -> Note:
        path = self.note_path(title)
        try:
            content = _read_text(path)
        except FileNotFoundError as exc:
            raise NotFoundError(title) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadError(f"error reading note {title!r}", path=path, cause=exc) from exc

        try:
            st = path.stat()
        except OSError as exc:
            raise ReadError(f"error getting file info for {title!r}", path=path, cause=exc) from exc

        return Note(title=title, content=content, mod_time=_local_mtime(st))

    # ───────────────────────── commands ─────────────────────────

    def save(self, note: Note) -> None:
        """Write ``note`` unconditionally, replacing any file of the same name."""
        if not note.title.strip():
            raise ValidationError("note title cannot be empty")

        path = self.note_path(note.title)
        try:
            atomic_write_text(path, _trim_content(note.content))
        except OSError as exc:
            raise WriteError(f"could not save note {note.title!r}", path=path, cause=exc) from exc
        log.info("Saved note %r -> %s", note.title, path.name)

    def delete(self, title: str) -> None:
        if not title.strip():
            raise ValidationError("note name cannot be empty")

        path = self.note_path(title)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(title) from exc
        except OSError as exc:
            raise DeleteError(f"error deleting note {title!r}", path=path, cause=exc) from exc
        log.info("Deleted note %r", title)

    def update(
        self,
        old_title: str,
        new_title: str | None = None,
        new_content: str | None = None,
    ) -> None:
        """
        Rename and/or rewrite an existing note.

        The rename happens first. If reading or writing the content afterwards
        fails, the rename is reverted before the error is raised. Content that
        already matches the file is not written, so mtime is preserved.
        """
        if not old_title.strip():
            raise ValidationError("old title cannot be empty")
        if new_title is None and new_content is None:
            return

        old_path = self.note_path(old_title)
        path = old_path
        renamed = False

        if new_title is not None and new_title.strip():
            new_path = self.note_path(new_title)
            if new_path != old_path:
                self._rename(old_path, new_path, old_title=old_title, new_title=new_title)
                path = new_path
                renamed = True

        if new_content is None:
            return

        title = new_title if renamed else old_title
        try:
            current = _read_text(path)
        except FileNotFoundError as exc:
            raise NotFoundError(title) from exc
        except (OSError, UnicodeDecodeError) as exc:
            self._revert_rename(path, old_path, renamed)
            raise ReadError(f"error reading {title!r} content", path=path, cause=exc) from exc

        content = _trim_content(new_content)
        if content == current:
            log.debug("Content of %r unchanged; not rewriting", title)
            return

        try:
            atomic_write_text(path, content)
        except OSError as exc:
            self._revert_rename(path, old_path, renamed)
            raise WriteError(f"error writing new content to {title!r}", path=path, cause=exc) from exc
        log.info("Updated content of %r", title)

    # ───────────────────────── internal ─────────────────────────

    def _rename(self, old_path: Path, new_path: Path, *, old_title: str, new_title: str) -> None:
        try:
            old_path.replace(new_path)
        except FileNotFoundError as exc:
            raise NotFoundError(old_title) from exc
        except OSError as exc:
            raise RenameError(
                f"error renaming {old_title!r} to {new_title!r}", path=old_path, cause=exc
            ) from exc
        log.info("Renamed note %r -> %r", old_title, new_title)

    @staticmethod
    def _revert_rename(path: Path, old_path: Path, renamed: bool) -> None:
        if not renamed:
            return
        try:
            path.replace(old_path)
            log.warning("Reverted rename %s -> %s after failed update", path.name, old_path.name)
        except OSError:
            log.exception("Failed to revert rename %s -> %s", path.name, old_path.name)
