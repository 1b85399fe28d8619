import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from udon.core.errors import (
    DeleteError,
    DirectoryReadError,
    InitializationError,
    NotFoundError,
    ReadError,
    ValidationError,
    WriteError,
)
from udon.core.models import Note
from udon.vault.store import NoteStore


@pytest.fixture
def store(tmp_path):
    return NoteStore(tmp_path / "notes")


def set_mtime(store, title, ts):
    os.utime(store.note_path(title), (ts, ts))


# ───────────────────────── init ─────────────────────────

def test_init_creates_directory(tmp_path):
    notes_dir = tmp_path / "a" / "b" / "udon"
    store = NoteStore(notes_dir)
    assert notes_dir.is_dir()
    assert store.notes_dir == notes_dir


def test_init_is_idempotent(tmp_path):
    NoteStore(tmp_path / "notes")
    NoteStore(tmp_path / "notes")


def test_init_fails_when_path_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(InitializationError):
        NoteStore(blocker / "notes")


# ───────────────────────── save / load ─────────────────────────

def test_round_trip_trims_trailing_whitespace(store):
    store.save(Note(title="Groceries", content="- milk\n- eggs   \n"))

    assert store.note_path("Groceries").read_text(encoding="utf-8") == "- milk\n- eggs"
    loaded = store.load("Groceries")
    assert loaded.title == "Groceries"
    assert loaded.content == "- milk\n- eggs"
    assert loaded.mod_time.tzinfo is not None


def test_sanitized_title_on_disk(store):
    store.save(Note(title="a/b", content="body"))

    assert os.listdir(store.notes_dir) == ["a_b.md"]
    loaded = store.load("a/b")
    assert loaded.title == "a/b"
    assert loaded.content == "body"


def test_round_trip_keeps_crlf_and_cr(store):
    store.save(Note(title="Windows", content="a\r\nb\rc\r\n"))

    assert store.note_path("Windows").read_bytes() == b"a\r\nb\rc"
    assert store.load("Windows").content == "a\r\nb\rc"
    assert store.list_all()[0].content == "a\r\nb\rc"


def test_save_long_title(store):
    title = "x" * 240

    store.save(Note(title=title, content="body"))
    store.update(title, None, "changed")

    assert os.listdir(store.notes_dir) == [title + ".md"]
    assert store.load(title).content == "changed"


def test_save_overwrites(store):
    store.save(Note(title="Draft", content="one"))
    store.save(Note(title="Draft", content="two"))
    assert store.load("Draft").content == "two"


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_save_rejects_blank_title(store, title):
    with pytest.raises(ValidationError):
        store.save(Note(title=title, content="x"))
    assert os.listdir(store.notes_dir) == []


def test_save_write_failure(store, monkeypatch):
    def fail(path, text, **kwargs):
        raise PermissionError("read-only")

    monkeypatch.setattr("udon.vault.store.atomic_write_text", fail)

    with pytest.raises(WriteError) as excinfo:
        store.save(Note(title="Draft", content="x"))
    assert excinfo.value.path == store.note_path("Draft")
    assert isinstance(excinfo.value.cause, PermissionError)


def test_load_missing(store):
    with pytest.raises(NotFoundError):
        store.load("nope")


def test_load_other_io_error_is_read_error(store):
    (store.notes_dir / "folder.md").mkdir()
    with pytest.raises(ReadError):
        store.load("folder")


# ───────────────────────── list_all ─────────────────────────

def test_list_empty(store):
    assert store.list_all() == []


def test_list_sorted_by_mtime_descending(store):
    for i, title in enumerate(["first", "second", "third"]):
        store.save(Note(title=title, content=title))
        set_mtime(store, title, 1_700_000_000 + i * 60)

    assert [n.title for n in store.list_all()] == ["third", "second", "first"]


def test_list_only_note_files(store):
    store.save(Note(title="keep", content="k"))
    (store.notes_dir / "other.txt").write_text("ignored", encoding="utf-8")
    (store.notes_dir / "sub.md").mkdir()
    (store.notes_dir / "plain").mkdir()

    notes = store.list_all()
    assert [n.title for n in notes] == ["keep"]
    assert notes[0].content == "k"


def test_list_skips_unreadable_entries(store):
    store.save(Note(title="good", content="fine"))
    (store.notes_dir / "bad.md").write_bytes(b"\xff\xfe\xfa broken")

    skipped = []
    notes = store.list_all(skipped=skipped)

    assert [n.title for n in notes] == ["good"]
    assert [s.path.name for s in skipped] == ["bad.md"]


def test_list_unreadable_directory(store):
    store.notes_dir.rmdir()
    with pytest.raises(DirectoryReadError):
        store.list_all()


# ───────────────────────── delete ─────────────────────────

def test_delete(store):
    store.save(Note(title="gone", content="x"))
    store.delete("gone")
    assert not store.note_path("gone").exists()


def test_delete_missing(store):
    with pytest.raises(NotFoundError):
        store.delete("nope")


def test_delete_blank_title(store):
    with pytest.raises(ValidationError):
        store.delete("  ")


def test_delete_other_failure(store):
    (store.notes_dir / "folder.md").mkdir()
    with pytest.raises(DeleteError):
        store.delete("folder")


# ───────────────────────── update ─────────────────────────

def test_update_blank_old_title(store):
    with pytest.raises(ValidationError):
        store.update(" ", "new", None)


def test_update_noop(store):
    store.save(Note(title="Draft", content="body"))
    set_mtime(store, "Draft", 1_600_000_000)

    store.update("Draft", None, None)

    assert os.listdir(store.notes_dir) == ["Draft.md"]
    assert store.load("Draft").content == "body"
    assert os.stat(store.note_path("Draft")).st_mtime == 1_600_000_000


def test_update_same_content_does_not_rewrite(store):
    store.save(Note(title="Draft", content="body"))
    set_mtime(store, "Draft", 1_600_000_000)

    store.update("Draft", None, "body\n\n")

    assert os.stat(store.note_path("Draft")).st_mtime == 1_600_000_000


def test_update_same_crlf_content_does_not_rewrite(store):
    store.save(Note(title="Draft", content="a\r\nb"))
    set_mtime(store, "Draft", 1_600_000_000)

    store.update("Draft", None, "a\r\nb")

    assert os.stat(store.note_path("Draft")).st_mtime == 1_600_000_000


def test_update_content(store):
    store.save(Note(title="Draft", content="old"))
    store.update("Draft", None, "new  \n")
    assert store.load("Draft").content == "new"


def test_update_rename(store):
    store.save(Note(title="Draft", content="body"))

    store.update("Draft", "Final", None)

    assert os.listdir(store.notes_dir) == ["Final.md"]
    assert store.load("Final").content == "body"


def test_update_rename_and_content(store):
    store.save(Note(title="Draft", content="old"))

    store.update("Draft", "Final", "new")

    assert not store.note_path("Draft").exists()
    assert store.load("Final").content == "new"


def test_update_blank_new_title_keeps_name(store):
    store.save(Note(title="Draft", content="old"))

    store.update("Draft", "   ", "new")

    assert os.listdir(store.notes_dir) == ["Draft.md"]
    assert store.load("Draft").content == "new"


def test_update_title_with_same_filename_skips_rename(store):
    store.save(Note(title="a/b", content="old"))

    store.update("a/b", "a:b", "new")

    assert os.listdir(store.notes_dir) == ["a_b.md"]
    assert store.load("a:b").content == "new"


def test_update_missing_source(store):
    with pytest.raises(NotFoundError):
        store.update("ghost", "Final", None)
    with pytest.raises(NotFoundError):
        store.update("ghost", None, "content")


def test_update_reverts_rename_when_write_fails(store, monkeypatch):
    store.save(Note(title="Draft", content="old"))

    def fail(path, text, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("udon.vault.store.atomic_write_text", fail)

    with pytest.raises(WriteError):
        store.update("Draft", "Final", "new")

    assert os.listdir(store.notes_dir) == ["Draft.md"]
    assert store.note_path("Draft").read_text(encoding="utf-8") == "old"


def test_update_reverts_rename_when_read_fails(store, monkeypatch):
    store.save(Note(title="Draft", content="old"))

    def fail(path):
        raise OSError("I/O error")

    monkeypatch.setattr("udon.vault.store._read_text", fail)

    with pytest.raises(ReadError) as excinfo:
        store.update("Draft", "Final", "new")

    assert excinfo.value.path == store.note_path("Final")
    assert os.listdir(store.notes_dir) == ["Draft.md"]
    assert store.note_path("Draft").read_text(encoding="utf-8") == "old"
