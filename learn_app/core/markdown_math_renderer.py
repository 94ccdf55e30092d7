"""Markdown + LaTeX rendering for question prompts and options.

Prompts are converted to HTML on the server and MathJax typesets the
``$...$`` / ``$$...$$`` spans in the browser, so the quiz document can stay
plain Markdown. Raw HTML in quiz content is escaped, never passed through.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

MATHJAX_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a question prompt into block-level HTML."""
        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return "<p><em>No question text.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render an option label without wrapping it in a paragraph."""
        return self._markdown.renderInline((markdown_text or "").strip())

    def render_options(self, options: tuple[str, ...] | list[str]) -> list[str]:
        return [self.render_inline(option) for option in options]


renderer = MarkdownMathRenderer()
# Shared instance; MarkdownIt renders are read-only, so the API threads can reuse it.
