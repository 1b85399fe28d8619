from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass
class Note:
    title: str
    content: str
    mod_time: datetime | None = None


@dataclass(frozen=True)
class SkippedEntry:
    """A directory entry that list_all() could not turn into a Note."""
    path: Path
    reason: str
