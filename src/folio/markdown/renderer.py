"""Markdown block renderer.

Turns the blocks produced by ``folio.markdown.blocks`` into an HTML
fragment. Output is deterministic: blocks are joined with newlines and no
state survives between ``render()`` calls.
"""

from __future__ import annotations

import re
from html import unescape

from folio.markdown.blocks import (
    CodeBlock,
    Heading,
    HtmlBlock,
    LinkReference,
    ListBlock,
    MarkdownBlock,
    Paragraph,
    Quote,
    Rule,
    Table,
    parse_blocks,
)
from folio.markdown.inline import InlineRenderer
from folio.utils.html import escape_attr, escape_text, strip_tags

_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_SLUG_SPACE_RE = re.compile(r"[\s_-]+")


def slugify(text: str) -> str:
    """Make an anchor id from heading text.

    Example:
        >>> slugify("Composing <em>Applications</em> &amp; Diesel!")
        'composing-applications-diesel'
    """
    plain = unescape(strip_tags(text)).lower()
    plain = _SLUG_STRIP_RE.sub("", plain)
    return _SLUG_SPACE_RE.sub("-", plain).strip("-")


class MarkdownRenderer:
    """Render Markdown prose to an HTML fragment.

    Pure and thread-safe: each ``render()`` call builds its own inline
    renderer and heading-id registry.

    Args:
        heading_ids: Give headings an ``id`` slug for in-page anchors.

    Example:
            >>> MarkdownRenderer().render("We'll look at **patterns**.")
            "<p>We'll look at <strong>patterns</strong>.</p>"
    """

    __slots__ = ("heading_ids",)

    def __init__(self, heading_ids: bool = True):
        self.heading_ids = heading_ids

    def render(self, text: str) -> str:
        blocks, references = parse_blocks(text)
        return _RenderPass(self, references).blocks(blocks)


class _RenderPass:
    """State for one ``MarkdownRenderer.render()`` call."""

    __slots__ = ("_inline", "_options", "_used_ids")

    def __init__(self, options: MarkdownRenderer, references: dict[str, LinkReference]):
        self._options = options
        self._inline = InlineRenderer(references)
        self._used_ids: dict[str, int] = {}

    def blocks(self, blocks: list[MarkdownBlock], *, tight: bool = False) -> str:
        return "\n".join(self.block(block, tight=tight) for block in blocks)

    def block(self, block: MarkdownBlock, *, tight: bool = False) -> str:
        if isinstance(block, Paragraph):
            inner = escape_text(block.text) if block.literal else self._inline.render(block.text)
            return inner if tight else f"<p>{inner}</p>"
        if isinstance(block, Heading):
            return self._heading(block)
        if isinstance(block, CodeBlock):
            return self._code(block)
        if isinstance(block, Quote):
            body = self.blocks(block.children)
            return f"<blockquote>\n{body}\n</blockquote>" if body else "<blockquote></blockquote>"
        if isinstance(block, ListBlock):
            return self._list(block)
        if isinstance(block, Rule):
            return "<hr />"
        if isinstance(block, Table):
            return self._table(block)
        if isinstance(block, HtmlBlock):
            return block.html
        raise TypeError(f"Unknown Markdown block {type(block).__name__}")

    def _heading(self, block: Heading) -> str:
        inner = self._inline.render(block.text)
        tag = f"h{block.level}"
        if not self._options.heading_ids:
            return f"<{tag}>{inner}</{tag}>"
        slug = slugify(inner) or "section"
        count = self._used_ids.get(slug, 0)
        self._used_ids[slug] = count + 1
        if count:
            slug = f"{slug}-{count}"
        return f'<{tag} id="{escape_attr(slug)}">{inner}</{tag}>'

    def _code(self, block: CodeBlock) -> str:
        code = escape_text(block.code)
        if code:
            code += "\n"
        if block.language:
            return f'<pre><code class="language-{escape_attr(block.language)}">{code}</code></pre>'
        return f"<pre><code>{code}</code></pre>"

    def _list(self, block: ListBlock) -> str:
        if block.ordered:
            opening = "<ol>" if block.start == 1 else f'<ol start="{block.start}">'
            closing = "</ol>"
        else:
            opening, closing = "<ul>", "</ul>"

        lines = [opening]
        tight = not block.loose
        for item in block.items:
            if not item.children:
                lines.append("<li></li>")
                continue
            body = self.blocks(item.children, tight=tight)
            first = item.children[0]
            last = item.children[-1]
            prefix = "" if tight and isinstance(first, Paragraph) else "\n"
            suffix = "" if tight and isinstance(last, Paragraph) else "\n"
            lines.append(f"<li>{prefix}{body}{suffix}</li>")
        lines.append(closing)
        return "\n".join(lines)

    def _table(self, block: Table) -> str:
        def cell(tag: str, content: str, align: str | None) -> str:
            style = f' style="text-align: {align}"' if align else ""
            return f"<{tag}{style}>{self._inline.render(content)}</{tag}>"

        lines = ["<table>", "<thead>", "<tr>"]
        lines.extend(cell("th", text, align) for text, align in zip(block.headers, block.aligns))
        lines.extend(["</tr>", "</thead>"])
        if block.rows:
            lines.append("<tbody>")
            for row in block.rows:
                lines.append("<tr>")
                lines.extend(cell("td", text, align) for text, align in zip(row, block.aligns))
                lines.append("</tr>")
            lines.append("</tbody>")
        lines.append("</table>")
        return "\n".join(lines)


def render_markdown(text: str, *, heading_ids: bool = True) -> str:
    """Render Markdown ``text`` to an HTML fragment.

    Never raises on malformed input; unclosed constructs come out literally.
    """
    return MarkdownRenderer(heading_ids=heading_ids).render(text)
