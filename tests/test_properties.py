"""Property-based tests for the page pipeline.

Uses hypothesis to check invariants that hold for every input:

- Rendering is deterministic
- Literal code survives the pipeline unchanged apart from escaping
- HTML specials in code are always escaped
- The front-matter title appears exactly once, in the head
- Markdown rendering never raises
"""

from __future__ import annotations

from html import unescape

from hypothesis import given, settings

from folio import Environment
from folio.markdown import render_markdown
from folio.utils.html import escape_text

from .strategies import arbitrary_prose, literal_block, markdown_source, special_line, title_text

_ENV = Environment()


def _code_page(lines: list[str]) -> str:
    return ":code\n" + "\n".join("  " + line for line in lines) + "\n"


def _extract_code(html: str) -> str:
    start = html.index("<pre><code>") + len("<pre><code>")
    return html[start : html.index("</code></pre>", start)]


class TestPipelineProperties:
    """Whole-page invariants."""

    @given(lines=literal_block)
    @settings(max_examples=200, deadline=None)
    def test_code_roundtrip(self, lines: list[str]) -> None:
        """Literal lines come back unchanged once entities are decoded."""
        html = _ENV.render_string(_code_page(lines))
        assert unescape(_extract_code(html)) == "\n".join(lines)

    @given(line=special_line)
    @settings(max_examples=200, deadline=None)
    def test_code_specials_escaped(self, line: str) -> None:
        """No raw ``<`` or ``>`` reaches the output inside a code sample."""
        code = _extract_code(_ENV.render_string(_code_page([line])))
        assert "<" not in code
        assert ">" not in code
        assert code == escape_text(line)

    @given(title=title_text)
    @settings(max_examples=200, deadline=None)
    def test_title_propagation(self, title: str) -> None:
        """The title fills exactly one head slot."""
        html = _ENV.render_string(f"---\ntitle: {title}\n---\np body\n")
        head, _, _ = html.partition("</head>")
        assert html.count(f"<title>{escape_text(title)}</title>") == 1
        assert f"<title>{escape_text(title)}</title>" in head

    @given(lines=literal_block)
    @settings(max_examples=100, deadline=None)
    def test_render_is_deterministic(self, lines: list[str]) -> None:
        source = "---\ntitle: Same\n---\n" + _code_page(lines)
        assert _ENV.render_string(source) == _ENV.render_string(source)


class TestMarkdownProperties:
    """The Markdown renderer is total and pure."""

    @given(text=markdown_source)
    @settings(max_examples=500, deadline=None)
    def test_markdown_never_raises(self, text: str) -> None:
        assert isinstance(render_markdown(text), str)

    @given(text=arbitrary_prose)
    @settings(max_examples=300, deadline=None)
    def test_markdown_deterministic(self, text: str) -> None:
        assert render_markdown(text) == render_markdown(text)
