"""Error kinds raised by the note store and passed through by the session layer."""

from __future__ import annotations

from pathlib import Path


class UdonError(Exception):
    """Base error for everything udon raises on purpose."""


class ValidationError(UdonError):
    """Raised when a required field (title) is empty or blank."""


class NotFoundError(UdonError):
    """Raised when the referenced note has no backing file."""

    def __init__(self, title: str):
        super().__init__(f"note {title!r} does not exist")
        self.title = title


class InitializationError(UdonError):
    """Raised when the notes directory cannot be resolved or created."""


class StorageError(UdonError):
    """I/O failure tagged with the path involved and the underlying cause."""

    operation = "access"

    def __init__(self, message: str, *, path: Path, cause: BaseException | None = None):
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(detail)
        self.path = Path(path)
        self.cause = cause


class DirectoryReadError(StorageError):
    operation = "list"


class ReadError(StorageError):
    operation = "read"


class WriteError(StorageError):
    operation = "write"


class DeleteError(StorageError):
    operation = "delete"


class RenameError(StorageError):
    operation = "rename"
