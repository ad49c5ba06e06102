"""Element and filter head parsing.

An element head is everything on a line up to its inline text:

    a#home.nav-link.active(href="/" data-x='1', hidden) Home
    ^tag ^id ^classes       ^attributes                 ^rest

A filter head is ``:name`` with an optional attribute list:

    :code(lang="rust" source="https://example.com/main.rs")

Heads are scanned left to right with an explicit cursor so errors can
point at the exact column.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from folio.environment.exceptions import ErrorCode, ParseError

_TAG_RE = re.compile(r"[A-Za-z][A-Za-z0-9-]*")
_NAME_RE = re.compile(r"[A-Za-z_-][A-Za-z0-9_-]*")
_ATTR_NAME_RE = re.compile(r"[A-Za-z_:@][-A-Za-z0-9_:.@]*")
_BARE_VALUE_RE = re.compile(r"[^\s,)'\"]+")
_FILTER_RE = re.compile(r"[a-z][a-z0-9_-]*")


@dataclass(frozen=True, slots=True)
class ElementHead:
    """Parsed element head.

    ``rest`` is the remainder of the line after the head (without the
    separating space) and ``rest_col`` its column. ``expansion`` is True when
    the remainder is a nested element introduced by ``: ``.
    """

    tag: str
    id: str | None
    classes: tuple[str, ...]
    attributes: tuple[tuple[str, str | None], ...]
    rest: str
    rest_col: int
    expansion: bool = False


@dataclass(frozen=True, slots=True)
class FilterHead:
    """Parsed ``:name(attrs) inline`` filter head."""

    name: str
    attributes: tuple[tuple[str, str | None], ...]
    rest: str


def _error(message: str, lineno: int, col: int, code: ErrorCode = ErrorCode.MALFORMED_TAG) -> ParseError:
    return ParseError(message, lineno, col, code=code)


def parse_attributes(
    text: str, pos: int, lineno: int, base_col: int
) -> tuple[list[tuple[str, str | None]], int]:
    """Parse ``( … )`` starting at ``text[pos] == "("``.

    Returns the ``(name, value)`` pairs in source order and the index just
    past the closing parenthesis.
    """
    open_col = base_col + pos
    i = pos + 1
    pairs: list[tuple[str, str | None]] = []
    while True:
        while i < len(text) and (text[i].isspace() or text[i] == ","):
            i += 1
        if i >= len(text):
            raise _error(
                "Attribute list is not closed with ')'",
                lineno,
                open_col,
                ErrorCode.UNCLOSED_ATTRIBUTES,
            )
        if text[i] == ")":
            return pairs, i + 1

        match = _ATTR_NAME_RE.match(text, i)
        if not match:
            raise _error(f"Invalid attribute name starting at {text[i]!r}", lineno, base_col + i)
        name = match.group()
        i = match.end()

        if i < len(text) and text[i] == "=":
            i += 1
            if i < len(text) and text[i] in "\"'":
                quote = text[i]
                close = text.find(quote, i + 1)
                if close == -1:
                    raise _error(
                        f"Unterminated {quote} in value of attribute {name!r}",
                        lineno,
                        base_col + i,
                        ErrorCode.UNTERMINATED_STRING,
                    )
                pairs.append((name, text[i + 1 : close]))
                i = close + 1
            else:
                value = _BARE_VALUE_RE.match(text, i)
                if not value:
                    raise _error(f"Missing value for attribute {name!r}", lineno, base_col + i)
                pairs.append((name, value.group()))
                i = value.end()
        else:
            pairs.append((name, None))


def parse_element_head(text: str, lineno: int, base_col: int) -> ElementHead:
    """Parse an element head from ``text`` (a line with indentation removed).

    Raises:
        ParseError: On a malformed tag, class or id, a bad attribute list,
            or a duplicate id.
    """
    i = 0
    match = _TAG_RE.match(text)
    if match:
        tag = match.group()
        i = match.end()
    elif text[:1] in (".", "#"):
        tag = "div"
    else:
        raise _error(
            f"Expected a tag name, '.' or '#', found {text[:1]!r}",
            lineno,
            base_col,
        )

    element_id: str | None = None
    classes: list[str] = []
    while i < len(text) and text[i] in ".#":
        marker = text[i]
        name = _NAME_RE.match(text, i + 1)
        if not name:
            kind = "class" if marker == "." else "id"
            raise _error(f"Empty or invalid {kind} name after {marker!r}", lineno, base_col + i)
        if marker == ".":
            classes.append(name.group())
        else:
            if element_id is not None:
                raise _error(
                    f"Element already has id {element_id!r}",
                    lineno,
                    base_col + i,
                    ErrorCode.DUPLICATE_ID,
                )
            element_id = name.group()
        i = name.end()

    attributes: list[tuple[str, str | None]] = []
    if i < len(text) and text[i] == "(":
        attr_col = base_col + i
        pairs, i = parse_attributes(text, i, lineno, base_col)
        for name, value in pairs:
            if name == "id":
                if element_id is not None:
                    raise _error(
                        f"Element already has id {element_id!r}",
                        lineno,
                        attr_col,
                        ErrorCode.DUPLICATE_ID,
                    )
                element_id = value or ""
            elif name == "class":
                classes.extend((value or "").split())
            else:
                attributes.append((name, value))

    rest = ""
    rest_col = base_col + i
    expansion = False
    if i < len(text):
        if text[i] == " ":
            rest = text[i + 1 :]
            rest_col = base_col + i + 1
        elif text[i] == ":" and (i + 1 == len(text) or text[i + 1] == " "):
            rest = text[i + 1 :].lstrip(" ")
            rest_col = base_col + len(text) - len(rest)
            expansion = True
            if not rest:
                raise _error("Expected an element after ':'", lineno, base_col + i)
        else:
            raise _error(
                f"Unexpected {text[i]!r} in tag {text[:i]!r}",
                lineno,
                base_col + i,
                ErrorCode.MALFORMED_TAG,
            )

    return ElementHead(
        tag=tag,
        id=element_id,
        classes=tuple(classes),
        attributes=tuple(attributes),
        rest=rest,
        rest_col=rest_col,
        expansion=expansion,
    )


def parse_filter_head(text: str, lineno: int, base_col: int) -> FilterHead:
    """Parse a ``:name(attrs) inline`` filter line."""
    match = _FILTER_RE.match(text, 1)
    if not match:
        raise _error(f"Invalid filter name in {text!r}", lineno, base_col + 1, ErrorCode.UNKNOWN_FILTER)
    name = match.group()
    i = match.end()

    attributes: list[tuple[str, str | None]] = []
    if i < len(text) and text[i] == "(":
        attributes, i = parse_attributes(text, i, lineno, base_col)

    rest = ""
    if i < len(text):
        if text[i] != " ":
            raise _error(
                f"Unexpected {text[i]!r} after filter ':{name}'",
                lineno,
                base_col + i,
            )
        rest = text[i + 1 :]

    return FilterHead(name=name, attributes=tuple(attributes), rest=rest)
