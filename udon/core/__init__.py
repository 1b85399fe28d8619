from .errors import (
    DeleteError,
    DirectoryReadError,
    InitializationError,
    NotFoundError,
    ReadError,
    RenameError,
    StorageError,
    UdonError,
    ValidationError,
    WriteError,
)
from .filenames import note_filename, sanitize_filename, title_from_filename
from .models import Note, SkippedEntry

__all__ = ["UdonError",
           "ValidationError",
           "NotFoundError",
           "InitializationError",
           "StorageError",
           "DirectoryReadError",
           "ReadError",
           "WriteError",
           "DeleteError",
           "RenameError",
           "sanitize_filename",
           "note_filename",
           "title_from_filename",
           "Note",
           "SkippedEntry",
           ]
