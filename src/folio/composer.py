"""Template composer: page tree in, HTML document out.

Walks the block tree in document order and appends HTML fragments to a
single buffer (``buf.append`` + ``"".join(buf)``):

- ``Element``    → ``<tag id class attrs>`` children ``</tag>``
- ``Text``       → escaped text
- ``Prose``      → Markdown fragment from the sub-renderer
- ``CodeSample`` → escaped payload in ``<pre><code>``, plus a source link

The body is then placed into the layout, which substitutes the page title
into the head slot. No I/O happens here.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from folio.layout import Layout
from folio.markdown import MarkdownRenderer
from folio.nodes import Block, CodeSample, Element, Page, Prose, Text
from folio.utils.html import VOID_ELEMENTS, escape_attr, escape_text, render_attributes

DEFAULT_SOURCE_LABEL = "View source"


class Composer:
    """Compose parsed pages into HTML documents.

    Holds only immutable collaborators, so one Composer can serve many
    threads.

    Example:
            >>> composer = Composer()
            >>> html = composer.compose(page)
            >>> "<title>Composing Applications with Diesel</title>" in html
            True

    Attributes:
        layout: Document skeleton receiving title and body.
        markdown: Renderer used for ``Prose`` blocks.
        source_label: Link text for a code sample's source anchor.
    """

    __slots__ = ("_dispatch", "layout", "markdown", "source_label")

    def __init__(
        self,
        layout: Layout | None = None,
        markdown: MarkdownRenderer | None = None,
        source_label: str = DEFAULT_SOURCE_LABEL,
    ):
        self.layout = layout or Layout()
        self.markdown = markdown or MarkdownRenderer()
        self.source_label = source_label
        self._dispatch: dict[str, Callable[[Block, Callable[[str], None]], None]] = {
            "Element": self._compose_element,
            "Text": self._compose_text,
            "Prose": self._compose_prose,
            "CodeSample": self._compose_code_sample,
        }

    def compose(self, page: Page) -> str:
        """Render ``page`` to a complete HTML document."""
        return self.layout.fill(
            title=page.title,
            content=self.render_body(page.body),
            metadata=page.meta,
        )

    def render_body(self, blocks: Sequence[Block]) -> str:
        """Render a sequence of blocks to an HTML fragment."""
        buf: list[str] = []
        self._compose_sequence(blocks, buf.append)
        return "".join(buf)

    def _compose_sequence(self, blocks: Sequence[Block], _append: Callable[[str], None]) -> None:
        previous: Block | None = None
        for block in blocks:
            if previous is not None and _needs_break(previous, block):
                _append("\n")
            self._dispatch[type(block).__name__](block, _append)
            previous = block

    def _compose_element(self, node: Element, _append: Callable[[str], None]) -> None:
        attributes: list[tuple[str, str | None]] = []
        if node.id is not None:
            attributes.append(("id", node.id))
        if node.classes:
            attributes.append(("class", " ".join(node.classes)))
        attributes.extend(node.attributes)

        _append(f"<{node.tag}{render_attributes(attributes)}>")
        if node.tag in VOID_ELEMENTS:
            return
        self._compose_sequence(node.children, _append)
        _append(f"</{node.tag}>")

    def _compose_text(self, node: Text, _append: Callable[[str], None]) -> None:
        _append(escape_text(node.value))

    def _compose_prose(self, node: Prose, _append: Callable[[str], None]) -> None:
        _append(self.markdown.render(node.source))

    def _compose_code_sample(self, node: CodeSample, _append: Callable[[str], None]) -> None:
        code_class = f' class="language-{escape_attr(node.language)}"' if node.language else ""
        _append('<div class="code-sample">')
        _append(f"<pre><code{code_class}>{escape_text(node.code)}</code></pre>")
        if node.source:
            _append(
                f'<a class="code-sample-source" href="{escape_attr(node.source)}">'
                f"{escape_text(self.source_label)}</a>"
            )
        _append("</div>")


def _needs_break(previous: Block, current: Block) -> bool:
    """Newline between siblings: adjacent text lines, or around block fragments."""
    if isinstance(previous, Text) and isinstance(current, Text):
        return True
    return isinstance(previous, (Prose, CodeSample)) or isinstance(current, (Prose, CodeSample))
