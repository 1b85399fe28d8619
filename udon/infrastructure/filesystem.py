# udon/infrastructure/filesystem.py

from __future__ import annotations

import os
import tempfile
from datetime import datetime
from pathlib import Path

from udon.core.filenames import NOTE_EXTENSION, sanitize_filename
from udon.settings import RECOVERY_DIR

TMP_PREFIX = ".udon-"
TMP_SUFFIX = ".tmp"

# leaves room for ".recovery.<timestamp>.md" within a 255-byte filename
RECOVERY_STEM_MAX_BYTES = 200


# ───────────────────────── public API ─────────────────────────

def atomic_write_text(
    path: Path,
    text: str,
    *,
    encoding: str = "utf-8",
) -> None:
    """
    Atomic-ish file write:
    - write to temp file in same directory
    - fsync
    - replace()

    The temp name has a fixed length independent of ``path.name``, so any
    filename that fits on disk can be written. It ends in ``.tmp``, never
    the note extension, so a leftover temp file never shows up in a listing.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=TMP_PREFIX, suffix=TMP_SUFFIX)
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())

        tmp_path.replace(path)

    finally:
        tmp_path.unlink(missing_ok=True)


def write_recovery_copy(title: str, text: str, *, recovery_dir: Path = RECOVERY_DIR) -> Path:
    """
    Best-effort emergency save when a normal save fails.

    Writes a timestamped copy into ~/.udon/recovery/.
    """
    recovery_dir = Path(recovery_dir)
    recovery_dir.mkdir(parents=True, exist_ok=True)

    stem = sanitize_filename(title.strip()) or "Untitled"
    stem = stem.encode("utf-8")[:RECOVERY_STEM_MAX_BYTES].decode("utf-8", "ignore")
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")

    recovery_path = recovery_dir / f"{stem}.recovery.{ts}{NOTE_EXTENSION}"
    atomic_write_text(recovery_path, text, encoding="utf-8")

    return recovery_path
