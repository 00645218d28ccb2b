"""Markdown + LaTeX rendering for exam statements shown to students.

Statements are stored as the organizer typed them. The student view ships an
HTML fragment next to each raw statement; math delimiters (``$...$``) are left
in place for MathJax to typeset in the browser.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

_EMPTY_STATEMENT_HTML = "<p><em>No statement provided.</em></p>"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math statements into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return _EMPTY_STATEMENT_HTML
        return self._markdown.render(sanitized)

    def render_statements(self, statements: list[str]) -> list[str]:
        return [self.render_fragment(statement) for statement in statements]


# MarkdownIt is safe to share for read-only renders across request threads.
renderer = MarkdownMathRenderer()
