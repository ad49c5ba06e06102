"""Page layouts: the HTML skeleton a composed body is placed into.

A layout is plain HTML with ``{{ name }}`` slots:

- ``{{ title }}``   exactly once, inside ``<head>`` when the layout has one
- ``{{ content }}`` exactly once; receives the rendered body unescaped
- ``{{ key }}``     any front-matter key; escaped, empty when missing

Slots are located once when the Layout is built; ``fill()`` joins the
precomputed pieces, so a Layout can be shared by concurrent renders.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

from folio.environment.exceptions import LayoutError
from folio.utils.html import escape_attr, escape_text

SLOT_RE = re.compile(r"\{\{\s*([A-Za-z_][\w.-]*)\s*\}\}")
HEAD_OPEN_RE = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)

TITLE_SLOT = "title"
CONTENT_SLOT = "content"

DEFAULT_LAYOUT = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{ title }}</title>
</head>
<body>
{{ content }}
</body>
</html>
"""


class Layout:
    """A validated layout skeleton.

    Example:
            >>> layout = Layout("<head><title>{{ title }}</title></head>{{ content }}")
            >>> layout.fill(title="A & B", content="<p>hi</p>")
            '<head><title>A &amp; B</title></head><p>hi</p>\\n'

    Raises:
        LayoutError: If the title or content slot is missing or repeated, or
            the title slot sits outside the document head.
    """

    __slots__ = ("_pieces", "name", "source")

    def __init__(self, source: str = DEFAULT_LAYOUT, name: str = "<layout>"):
        self.source = source
        self.name = name
        self._pieces = self._split(source)
        self._validate()

    @classmethod
    def from_path(cls, path: str | Path, encoding: str = "utf-8") -> Layout:
        path = Path(path)
        try:
            source = path.read_text(encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise LayoutError(f"Cannot read layout {path}: {exc}") from exc
        return cls(source, name=str(path))

    @staticmethod
    def _split(source: str) -> tuple[tuple[str, str | None], ...]:
        """Split into ``(literal, slot_name_or_None)`` pieces."""
        pieces: list[tuple[str, str | None]] = []
        last = 0
        for match in SLOT_RE.finditer(source):
            pieces.append((source[last : match.start()], match.group(1)))
            last = match.end()
        pieces.append((source[last:], None))
        return tuple(pieces)

    @property
    def slots(self) -> tuple[str, ...]:
        return tuple(slot for _, slot in self._pieces if slot is not None)

    def _validate(self) -> None:
        slots = self.slots
        for required in (TITLE_SLOT, CONTENT_SLOT):
            count = slots.count(required)
            if count != 1:
                raise LayoutError(
                    f"Layout {self.name} must contain exactly one "
                    f"{{{{ {required} }}}} slot, found {count}"
                )
        head_open = HEAD_OPEN_RE.search(self.source)
        head_close = HEAD_CLOSE_RE.search(self.source)
        if head_open is None and head_close is None:
            return
        title_at = next(
            match.start()
            for match in SLOT_RE.finditer(self.source)
            if match.group(1) == TITLE_SLOT
        )
        if head_open is not None and title_at < head_open.end():
            raise LayoutError(f"Layout {self.name} places {{{{ {TITLE_SLOT} }}}} before <head>")
        if head_close is not None and title_at > head_close.start():
            raise LayoutError(f"Layout {self.name} places {{{{ {TITLE_SLOT} }}}} after </head>")

    def fill(
        self,
        *,
        title: str,
        content: str,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        """Substitute slots and return the document, ending in one newline."""
        metadata = metadata or {}
        buf: list[str] = []
        _append = buf.append
        for literal, slot in self._pieces:
            _append(literal)
            if slot is None:
                continue
            if slot == CONTENT_SLOT:
                _append(content)
            elif slot == TITLE_SLOT:
                _append(escape_text(title))
            else:
                _append(escape_attr(metadata.get(slot, "")))
        return "".join(buf).rstrip("\n") + "\n"
