from __future__ import annotations

import logging

from prompt_toolkit import Application
from prompt_toolkit.application import get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout.containers import ConditionalContainer, HSplit, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import TextArea

from udon.services.markdown_renderer import MarkdownRenderer
from udon.ui.state import Mode, NotesState

log = logging.getLogger(__name__)

HELP_TEXT = {
    Mode.LIST: "enter edit · p preview · n new · r rename · d delete · / search · q quit",
    Mode.PREVIEW: "e edit · r rename · d delete · esc back",
    Mode.EDITOR: "ctrl-s save · ctrl-r rename · esc back · ctrl-q quit",
}

# gruvbox
STYLE = Style.from_dict({
    "status": "bg:#d79921 #282828",
    "help": "#928374",
    "list": "#ebdbb2",
    "selected": "bg:#98971a #282828 bold",
    "pane-border": "#98971a",
    "prompt": "bg:#3c3836 #ebdbb2",
    "confirm": "bg:#cc241d #ebdbb2 bold",
})


class NotesApp:
    """Full-screen prompt_toolkit front end over NotesState."""

    def __init__(self, state: NotesState, *, renderer: MarkdownRenderer | None = None):
        self.state = state
        self.renderer = renderer or MarkdownRenderer()
        self._preview_cache: tuple[str, int, str] | None = None

        self.editor = TextArea(multiline=True, scrollbar=True, wrap_lines=True)
        self.editor.buffer.on_text_changed += self._on_editor_changed
        self.prompt_input = TextArea(multiline=False, accept_handler=self._on_prompt_accept, style="class:prompt")

        self.list_control = FormattedTextControl(self._list_text, focusable=True, show_cursor=False)
        self.kb = KeyBindings()
        self._setup_key_bindings()

        self.app = Application(
            layout=self._create_layout(),
            key_bindings=self.kb,
            full_screen=True,
            style=STYLE,
        )

    def run(self) -> None:
        self._sync()
        self.app.run()

    # ───────────────────────── layout ─────────────────────────

    def _create_layout(self) -> Layout:
        in_editor = Condition(lambda: self.state.mode is Mode.EDITOR)
        has_prompt = Condition(lambda: self.state.prompt is not None)
        has_confirmation = Condition(lambda: self.state.confirmation is not None)

        status_bar = Window(FormattedTextControl(self._status_text), height=1, style="class:status")
        list_pane = Window(self.list_control, width=Dimension(weight=1), style="class:list")
        preview_pane = Window(FormattedTextControl(self._preview_text), wrap_lines=True)

        right_pane = HSplit([
            ConditionalContainer(self.editor, filter=in_editor),
            ConditionalContainer(preview_pane, filter=~in_editor),
        ], width=Dimension(weight=3))

        body = VSplit([
            list_pane,
            Window(width=1, char="│", style="class:pane-border"),
            right_pane,
        ])

        prompt_bar = ConditionalContainer(
            VSplit([
                Window(FormattedTextControl(lambda: self.state.prompt.label if self.state.prompt else ""),
                       dont_extend_width=True, style="class:prompt"),
                self.prompt_input,
            ], height=1),
            filter=has_prompt,
        )
        confirm_bar = ConditionalContainer(
            Window(FormattedTextControl(self._confirm_text), height=1, style="class:confirm"),
            filter=has_confirmation,
        )
        help_bar = Window(FormattedTextControl(lambda: HELP_TEXT[self.state.mode]), height=1, style="class:help")

        root = HSplit([status_bar, body, prompt_bar, confirm_bar, help_bar])
        return Layout(root, focused_element=list_pane)

    def _status_text(self) -> str:
        left = self.state.status or "Status"
        return f" {left}  |  {self.state.title_line}"

    def _confirm_text(self) -> str:
        c = self.state.confirmation
        return f" {c.question} [y/n]" if c else ""

    def _list_text(self) -> list[tuple[str, str]]:
        result: list[tuple[str, str]] = []
        for i, note in enumerate(self.state.notes):
            selected = i == self.state.index
            prefix = "➤ " if selected else "  "
            result.append(("class:selected" if selected else "", f"{prefix}{note.title}"))
            result.append(("", "\n"))
        if not self.state.notes:
            result.append(("", "No notes found." if self.state.query else "No notes yet. Press n to create one."))
        return result

    def _preview_text(self):
        state = self.state
        if state.mode is Mode.PREVIEW and state.current is not None:
            content = state.current.content
        elif state.selected is not None:
            content = state.selected.content
        else:
            return "Select a note to preview/edit."

        width = max(20, get_app().output.get_size().columns * 3 // 4 - 2)
        if self._preview_cache is None or self._preview_cache[:2] != (content, width):
            self.renderer.width = width
            self._preview_cache = (content, width, self.renderer.render_or_raw(content))
        return ANSI(self._preview_cache[2])

    # ───────────────────────── sync ─────────────────────────

    def _on_editor_changed(self, buffer) -> None:
        self.state.set_buffer(buffer.text)

    def _on_prompt_accept(self, buffer) -> bool:
        self.state.submit_prompt(buffer.text)
        self._sync()
        return False

    def _sync(self) -> None:
        """Push state into widgets and move focus to where input belongs."""
        if self.editor.text != self.state.buffer:
            self.editor.text = self.state.buffer

        layout = self.app.layout
        if self.state.prompt is not None:
            if not layout.has_focus(self.prompt_input):
                self.prompt_input.text = self.state.prompt.text
                layout.focus(self.prompt_input)
        elif self.state.mode is Mode.EDITOR and self.state.confirmation is None:
            layout.focus(self.editor)
        else:
            layout.focus(self.list_control)

        if self.state.should_exit:
            self.app.exit()

    # ───────────────────────── key bindings ─────────────────────────

    def _setup_key_bindings(self) -> None:
        kb = self.kb
        state = self.state

        idle = Condition(lambda: state.prompt is None and state.confirmation is None)
        list_mode = idle & Condition(lambda: state.mode is Mode.LIST)
        preview_mode = idle & Condition(lambda: state.mode is Mode.PREVIEW)
        editor_mode = idle & Condition(lambda: state.mode is Mode.EDITOR)
        browsing = list_mode | preview_mode
        confirming = Condition(lambda: state.confirmation is not None)
        prompting = Condition(lambda: state.prompt is not None)

        def bind(*keys, filter, eager=False):
            def decorator(action):
                @kb.add(*keys, filter=filter, eager=eager)
                def _(event):
                    action()
                    self._sync()
                return action
            return decorator

        @kb.add("c-c", eager=True)
        @kb.add("c-q", eager=True)
        def _quit(event):
            if state.prompt is not None:
                state.cancel_prompt()
            elif state.confirmation is not None:
                state.answer(False)
            state.request_quit()
            self._sync()

        bind("q", filter=list_mode)(state.request_quit)
        bind("j", filter=list_mode)(lambda: state.move(1))
        bind("down", filter=list_mode)(lambda: state.move(1))
        bind("k", filter=list_mode)(lambda: state.move(-1))
        bind("up", filter=list_mode)(lambda: state.move(-1))
        bind("enter", filter=list_mode)(state.open_selected)
        bind("l", filter=list_mode)(state.open_selected)
        bind("p", filter=list_mode)(state.preview_selected)
        bind("n", filter=browsing)(state.begin_new)
        bind("r", filter=browsing)(state.begin_rename)
        bind("d", filter=browsing)(state.request_delete)
        bind("/", filter=browsing)(state.begin_search)

        bind("e", filter=preview_mode)(state.edit)
        bind("escape", filter=preview_mode)(state.back)
        bind("h", filter=preview_mode)(state.back)

        bind("c-s", filter=editor_mode, eager=True)(state.request_save)
        bind("c-r", filter=editor_mode, eager=True)(state.begin_rename)
        bind("escape", filter=editor_mode, eager=True)(state.back)

        bind("y", filter=confirming)(lambda: state.answer(True))
        bind("n", filter=confirming)(lambda: state.answer(False))
        bind("escape", filter=confirming)(lambda: state.answer(False))

        bind("escape", filter=prompting, eager=True)(state.cancel_prompt)


def run_app(state: NotesState) -> None:
    log.info("Starting TUI with %d note(s)", len(state.notes))
    NotesApp(state).run()
