"""Front-matter scanning: the first of the two page parsing phases.

A page may open with a block of ``key: value`` lines fenced by ``---``:

    ---
    title: Composing Applications with Diesel
    # comments and blank lines are ignored
    section: guides
    ---
    .guide
      h1 Composing Applications with Diesel

The scanner only splits the source; the body is handed to the lexer with
``body_start`` so that reported line numbers match the original file.
"""

from __future__ import annotations

from dataclasses import dataclass

from folio.environment.exceptions import ErrorCode, ParseError
from folio.utils.text import split_lines

FENCE = "---"
BOM = "\ufeff"


@dataclass(frozen=True, slots=True)
class FrontMatter:
    """Result of splitting a page source.

    Attributes:
        metadata: ``(key, value)`` pairs in source order.
        body: Source text after the closing fence (or the whole source).
        body_start: 1-based line number of the first body line.
    """

    metadata: tuple[tuple[str, str], ...]
    body: str
    body_start: int

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self.metadata:
            if name == key:
                return value
        return default


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def split_front_matter(source: str) -> FrontMatter:
    """Split ``source`` into front-matter pairs and body text.

    A leading byte-order mark is dropped before looking for the fence.

    Raises:
        ParseError: If the fence is never closed, a line has no ``:``,
            a key is empty, or a key repeats.
    """
    source = source.removeprefix(BOM)
    lines = split_lines(source)

    first = 0
    while first < len(lines) and not lines[first].strip():
        first += 1
    if first >= len(lines) or lines[first].strip() != FENCE:
        return FrontMatter(metadata=(), body=source, body_start=1)

    metadata: list[tuple[str, str]] = []
    seen: set[str] = set()
    index = first + 1
    while index < len(lines):
        raw = lines[index]
        stripped = raw.strip()
        lineno = index + 1
        if stripped == FENCE:
            body = "\n".join(lines[index + 1 :])
            return FrontMatter(metadata=tuple(metadata), body=body, body_start=index + 2)
        if not stripped or stripped.startswith("#"):
            index += 1
            continue
        if ":" not in stripped:
            raise ParseError(
                f"Front-matter line is not 'key: value': {stripped!r}",
                lineno,
                len(raw) - len(raw.lstrip()),
                code=ErrorCode.INVALID_FRONT_MATTER,
            )
        key, value = stripped.split(":", 1)
        key = key.strip()
        if not key:
            raise ParseError(
                "Front-matter key is empty",
                lineno,
                len(raw) - len(raw.lstrip()),
                code=ErrorCode.INVALID_FRONT_MATTER,
            )
        if key in seen:
            raise ParseError(
                f"Duplicate front-matter key {key!r}",
                lineno,
                len(raw) - len(raw.lstrip()),
                code=ErrorCode.INVALID_FRONT_MATTER,
            )
        seen.add(key)
        metadata.append((key, _unquote(value.strip())))
        index += 1

    raise ParseError(
        "Front-matter is not closed with '---'",
        first + 1,
        0,
        code=ErrorCode.UNCLOSED_FRONT_MATTER,
        suggestion="Add a '---' line after the last front-matter key",
    )
