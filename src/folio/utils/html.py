"""HTML escaping and tag helpers.

Escaping is a single pass via ``str.translate()``. Text content only needs
``&``, ``<`` and ``>`` replaced; attribute values also escape both quote
characters.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_TEXT_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
    }
)

_ATTR_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
    }
)

# Elements that never have content or a closing tag
VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

_TAG_RE = re.compile(r"<[^>]*>")


def escape_text(value: str) -> str:
    """Escape ``value`` for use as element content.

    Example:
        >>> escape_text("a < b && c")
        'a &lt; b &amp;&amp; c'
    """
    return value.translate(_TEXT_ESCAPE_TABLE)


def escape_attr(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted attribute."""
    return value.translate(_ATTR_ESCAPE_TABLE)


def strip_tags(html: str) -> str:
    """Drop anything that looks like a tag, keeping the text between."""
    return _TAG_RE.sub("", html)


def render_attributes(attributes: Iterable[tuple[str, str | None]]) -> str:
    """Render ``(name, value)`` pairs as an attribute string.

    A ``None`` value renders a boolean attribute. The result has a leading
    space when non-empty so it can follow the tag name directly.

    Example:
        >>> render_attributes([("href", "/a?b=1&c=2"), ("hidden", None)])
        ' href="/a?b=1&amp;c=2" hidden'
    """
    parts: list[str] = []
    for name, value in attributes:
        if value is None:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape_attr(value)}"')
    return "".join(parts)
