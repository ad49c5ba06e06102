"""Line lexer for the indented page body.

Splits a body into ``Line`` tokens, measuring indentation and classifying
each line by its first character:

- ``//``  comment (dropped along with its nested lines)
- ``|``   piped text
- ``:``   filter (``:markdown``, ``:code``)
- blank
- anything else is an element line

Lexing never fails; indentation rules are enforced by the parser, which
knows whether a line is structural or part of a literal body.
"""

from __future__ import annotations

from folio._types import Line, LineType
from folio.utils.text import split_lines

# Only spaces and tabs count as blank; other whitespace is line content
_BLANKS = " \t"


def _classify(text: str) -> LineType:
    if not text:
        return LineType.BLANK
    if text.startswith("//"):
        return LineType.COMMENT
    if text == "|" or text.startswith(("| ", "|\t")):
        return LineType.TEXT
    if text.startswith(":") and len(text) > 1 and text[1].isalpha():
        return LineType.FILTER
    return LineType.ELEMENT


def tokenize(body: str, start_line: int = 1) -> list[Line]:
    """Tokenize ``body`` into lines.

    Args:
        body: Page body (front-matter already removed).
        start_line: Line number of the first body line in the original file.

    Example:
        >>> [line.type.name for line in tokenize("h1 Title\\n\\n:markdown\\n  *hi*")]
        ['ELEMENT', 'BLANK', 'FILTER', 'ELEMENT']
    """
    lines: list[Line] = []
    for offset, raw in enumerate(split_lines(body)):
        content = raw.lstrip(" ")
        indent = len(raw) - len(content)
        text = content.strip(_BLANKS)
        tabbed = content[:1] == "\t" and bool(text)
        lines.append(
            Line(
                type=_classify(text),
                lineno=start_line + offset,
                indent=indent,
                text=text,
                raw=raw,
                tabbed=tabbed,
            )
        )
    return lines
