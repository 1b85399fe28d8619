# udon/core/filenames.py

from __future__ import annotations

import re

NOTE_EXTENSION = ".md"

INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*]')


def sanitize_filename(title: str) -> str:
    """
    Replace characters that are not allowed in filenames with "_".

    Deterministic and lossy: "a/b" and "a:b" both map to "a_b".
    No trimming happens here; callers strip the title first.
    """
    if title is None:
        raise ValueError("sanitize_filename(): title is None")
    return INVALID_CHARS_RE.sub("_", str(title))


def note_filename(title: str) -> str:
    """Filename of the note file backing ``title``."""
    return sanitize_filename(title.strip()) + NOTE_EXTENSION


def title_from_filename(filename: str) -> str | None:
    """Inverse of the extension part only; None for non-note files."""
    if not filename.endswith(NOTE_EXTENSION):
        return None
    return filename[: -len(NOTE_EXTENSION)]
