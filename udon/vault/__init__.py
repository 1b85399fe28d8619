from .store import NoteStore

__all__ = ["NoteStore"]
