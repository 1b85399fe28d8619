from .markdown_renderer import MarkdownRenderer
from .session import (
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

__all__ = ["MarkdownRenderer",
           "SaveStatus",
           "CloseStatus",
           "UpdateStatus",
           "DeleteStatus",
           "load_to_memory",
           "search_notes",
           "is_duplicate_title",
           "confirm_save",
           "confirm_close",
           "confirm_update",
           "confirm_delete",
           ]
