from .state import Confirmation, ConfirmKind, Mode, NotesState, Prompt, PromptKind

__all__ = ["NotesState",
           "Mode",
           "Prompt",
           "PromptKind",
           "Confirmation",
           "ConfirmKind",
           ]
