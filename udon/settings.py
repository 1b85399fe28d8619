from __future__ import annotations

import os
from pathlib import Path

from udon.core.errors import InitializationError

APP_NAME = "udon"
NOTES_DIR_ENV = "UDON_NOTES_DIR"

APP_DIR = Path.home() / f".{APP_NAME}"
LOG_DIR = APP_DIR / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
RECOVERY_DIR = APP_DIR / "recovery"


def default_notes_dir() -> Path:
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise InitializationError(f"could not resolve home directory: {exc}") from exc
    return home / "Documents" / APP_NAME


def resolve_notes_dir(override: str | Path | None = None) -> Path:
    """
    Pick the notes directory:
      1) explicit override (CLI)
      2) $UDON_NOTES_DIR
      3) ~/Documents/udon
    """
    raw = override if override else os.environ.get(NOTES_DIR_ENV, "").strip()
    if raw:
        try:
            return Path(raw).expanduser()
        except RuntimeError as exc:
            raise InitializationError(f"could not expand notes dir {raw!r}: {exc}") from exc
    return default_notes_dir()
