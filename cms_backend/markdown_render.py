from __future__ import annotations

import markdown
from markdown.extensions.fenced_code import FencedCodeExtension
from markdown.extensions.tables import TableExtension


def _extensions() -> list:
    return [FencedCodeExtension(), TableExtension()]


def render_markdown(text: str) -> str:
    """Render markdown text to an HTML fragment.

    A new Markdown instance per call; instances keep state between convert() calls.
    """
    md = markdown.Markdown(extensions=_extensions())
    return md.convert(text or "")
