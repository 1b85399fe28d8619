from .core.errors import (
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
from .core.filenames import sanitize_filename
from .core.models import Note, SkippedEntry
from .services.session import (
    CloseStatus,
    DeleteStatus,
    SaveStatus,
    UpdateStatus,
    confirm_close,
    confirm_delete,
    confirm_save,
    confirm_update,
    is_duplicate_title,
    load_to_memory,
    search_notes,
)
from .vault.store import NoteStore

__all__ = ['Note',
           'SkippedEntry',
           'NoteStore',
           'sanitize_filename',
           'load_to_memory',
           'search_notes',
           'is_duplicate_title',
           'confirm_save',
           'confirm_close',
           'confirm_update',
           'confirm_delete',
           'SaveStatus',
           'CloseStatus',
           'UpdateStatus',
           'DeleteStatus',
           'UdonError',
           'ValidationError',
           'NotFoundError',
           'InitializationError',
           'StorageError',
           'DirectoryReadError',
           'ReadError',
           'WriteError',
           'DeleteError',
           'RenameError',
           ]
