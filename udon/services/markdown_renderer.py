from __future__ import annotations

import logging
from io import StringIO

from rich.console import Console
from rich.markdown import Markdown

log = logging.getLogger(__name__)


class MarkdownRenderer:
    """Renders note markdown to ANSI text for the preview pane."""

    def __init__(self, *, width: int = 80, code_theme: str = "monokai"):
        self.width = width
        self.code_theme = code_theme

    def render(self, text: str) -> str:
        buf = StringIO()
        console = Console(
            file=buf,
            width=self.width,
            force_terminal=True,
            color_system="truecolor",
        )
        console.print(Markdown(text, code_theme=self.code_theme))
        return buf.getvalue()

    def render_or_raw(self, text: str) -> str:
        """Rendered text, or ``text`` itself when rendering fails."""
        try:
            return self.render(text)
        except Exception:
            log.exception("Markdown render failed; showing raw content")
            return text
