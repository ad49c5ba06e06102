"""Markdown sub-renderer for ``:markdown`` prose blocks.

Pipeline:
    prose text → blocks.parse_blocks() → renderer.MarkdownRenderer → HTML fragment

Inline constructs are rendered by ``inline.InlineRenderer``. The whole
pipeline is a pure function of its input and never raises on malformed
Markdown.

Example:
    >>> from folio.markdown import render_markdown
    >>> render_markdown("We'll look at **patterns**.")
    "<p>We'll look at <strong>patterns</strong>.</p>"
"""

from folio.markdown.blocks import LinkReference, parse_blocks
from folio.markdown.inline import InlineRenderer, render_inline
from folio.markdown.renderer import MarkdownRenderer, render_markdown, slugify

__all__ = [
    "InlineRenderer",
    "LinkReference",
    "MarkdownRenderer",
    "parse_blocks",
    "render_inline",
    "render_markdown",
    "slugify",
]
