import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from udon.services.markdown_renderer import MarkdownRenderer


def test_render_produces_ansi():
    out = MarkdownRenderer(width=60).render("# Groceries\n\n- milk\n- eggs")
    assert "Groceries" in out
    assert "milk" in out
    assert "\x1b[" in out


def test_falls_back_to_raw_content(monkeypatch):
    renderer = MarkdownRenderer()

    def broken(text):
        raise ValueError("renderer exploded")

    monkeypatch.setattr(renderer, "render", broken)
    assert renderer.render_or_raw("**raw**") == "**raw**"
