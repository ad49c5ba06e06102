"""Indentation parser: lines in, block tree out.

The parser walks ``Line`` tokens with a single cursor. A line is a child of
the nearest preceding structural line with a smaller indent; every sibling
group must share one indent. Filter bodies (``:markdown``, ``:code``) are
captured verbatim and dedented, so their contents never reach the
structural rules. Elements nest at most ``MAX_DEPTH`` levels deep.

Grammar (one construct per line):

    // comment                 dropped, with its nested lines
    | text                     Text
    :markdown [inline]         Prose, indented body
    :code(lang= source=)       CodeSample, indented body
    tag#id.cls(attrs) text     Element, indented children
    tag: tag2 text             Element wrapping Element (block expansion)

"""

from __future__ import annotations

from difflib import get_close_matches

from folio._types import Line, LineType
from folio.environment.exceptions import ErrorCode, ParseError
from folio.nodes import Block, CodeSample, Element, Prose, Text
from folio.parser.tags import parse_element_head, parse_filter_head
from folio.utils.html import VOID_ELEMENTS

FILTERS = ("markdown", "code")
MAX_DEPTH = 100
_CODE_ATTRIBUTES = {"lang": "language", "language": "language", "source": "source"}


class Parser:
    """Build a block tree from body lines.

    Example:
            >>> from folio.lexer import tokenize
            >>> Parser(tokenize("ul\\n  li: a(href='/') Home")).parse()
            (Element(lineno=1, col_offset=0, tag='ul', ...),)

    Raises:
        ParseError: On tab indentation, inconsistent or unexpected
            indentation, malformed tags, and unknown filters.
    """

    __slots__ = ("_depth", "_lines", "_pos")

    def __init__(self, lines: list[Line]):
        self._lines = lines
        self._pos = 0
        self._depth = 0

    def parse(self) -> tuple[Block, ...]:
        return self._parse_children(-1)

    # -- cursor -----------------------------------------------------------

    def _peek(self) -> Line | None:
        """Return the next non-blank line without consuming it."""
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            if line.type is not LineType.BLANK:
                return line
            self._pos += 1
        return None

    def _advance(self) -> Line:
        line = self._lines[self._pos]
        self._pos += 1
        return line

    # -- structure --------------------------------------------------------

    def _parse_children(self, parent_indent: int) -> tuple[Block, ...]:
        children: list[Block] = []
        child_indent: int | None = None
        while (line := self._peek()) is not None:
            if line.indent <= parent_indent:
                break
            if line.tabbed:
                raise ParseError(
                    "Tab character used for indentation",
                    line.lineno,
                    line.indent,
                    code=ErrorCode.TAB_INDENT,
                    suggestion="Indent structural lines with spaces only",
                )
            if child_indent is None:
                child_indent = line.indent
            elif line.indent > child_indent:
                raise ParseError(
                    "Unexpected indentation: the line above cannot contain nested content",
                    line.lineno,
                    line.indent,
                    code=ErrorCode.UNEXPECTED_INDENT,
                )
            elif line.indent < child_indent:
                raise ParseError(
                    f"Inconsistent indentation: dedent to {line.indent} spaces matches no open block",
                    line.lineno,
                    line.indent,
                    code=ErrorCode.INCONSISTENT_INDENT,
                    suggestion=f"Indent this line by {child_indent} spaces to continue the block",
                )
            node = self._parse_line()
            if node is not None:
                children.append(node)
        return tuple(children)

    def _parse_line(self) -> Block | None:
        line = self._advance()
        if line.type is LineType.COMMENT:
            self._skip_nested(line.indent)
            return None
        if line.type is LineType.TEXT:
            return Text(lineno=line.lineno, col_offset=line.indent, value=line.text[2:])
        if line.type is LineType.FILTER:
            return self._parse_filter(line)
        return self._parse_element(line.text, line.lineno, line.indent, line.indent)

    def _skip_nested(self, owner_indent: int) -> None:
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            if line.type is not LineType.BLANK and line.indent <= owner_indent:
                return
            self._pos += 1

    def _parse_element(self, text: str, lineno: int, col: int, indent: int) -> Element:
        if self._depth >= MAX_DEPTH:
            raise ParseError(
                f"Elements nested more than {MAX_DEPTH} levels deep",
                lineno,
                col,
                code=ErrorCode.NESTING_TOO_DEEP,
            )
        self._depth += 1
        try:
            return self._build_element(text, lineno, col, indent)
        finally:
            self._depth -= 1

    def _build_element(self, text: str, lineno: int, col: int, indent: int) -> Element:
        head = parse_element_head(text, lineno, col)
        children: list[Block] = []

        if head.expansion:
            if head.rest[:1] in (":", "|") or head.rest.startswith("//"):
                raise ParseError(
                    "Block expansion must be followed by an element",
                    lineno,
                    head.rest_col,
                    code=ErrorCode.MALFORMED_TAG,
                )
            children.append(self._parse_element(head.rest, lineno, head.rest_col, indent))
        else:
            if head.rest:
                children.append(Text(lineno=lineno, col_offset=head.rest_col, value=head.rest))
            nested_line = self._peek()
            if head.tag in VOID_ELEMENTS and (
                head.rest or (nested_line is not None and nested_line.indent > indent)
            ):
                where = nested_line if not head.rest and nested_line is not None else None
                raise ParseError(
                    f"Void element <{head.tag}> cannot have content",
                    where.lineno if where else lineno,
                    where.indent if where else head.rest_col,
                    code=ErrorCode.UNEXPECTED_INDENT,
                )
            children.extend(self._parse_children(indent))

        return Element(
            lineno=lineno,
            col_offset=col,
            tag=head.tag,
            id=head.id,
            classes=head.classes,
            attributes=head.attributes,
            children=tuple(children),
        )

    # -- filters ----------------------------------------------------------

    def _parse_filter(self, line: Line) -> Prose | CodeSample:
        head = parse_filter_head(line.text, line.lineno, line.indent)
        if head.name not in FILTERS:
            matches = get_close_matches(head.name, FILTERS, n=1, cutoff=0.6)
            raise ParseError(
                f"Unknown filter ':{head.name}'",
                line.lineno,
                line.indent,
                code=ErrorCode.UNKNOWN_FILTER,
                suggestion=(
                    f"Did you mean ':{matches[0]}'?"
                    if matches
                    else f"Available filters: {', '.join(':' + f for f in FILTERS)}"
                ),
            )

        body = self._literal_body(line.indent)
        if head.rest:
            body = f"{head.rest}\n{body}" if body else head.rest

        if head.name == "markdown":
            if head.attributes:
                raise ParseError(
                    "':markdown' takes no attributes",
                    line.lineno,
                    line.indent,
                    code=ErrorCode.UNKNOWN_FILTER,
                )
            return Prose(lineno=line.lineno, col_offset=line.indent, source=body)

        options: dict[str, str] = {}
        for name, value in head.attributes:
            field = _CODE_ATTRIBUTES.get(name)
            if field is None:
                raise ParseError(
                    f"Unknown ':code' attribute {name!r}",
                    line.lineno,
                    line.indent,
                    code=ErrorCode.UNKNOWN_FILTER,
                    suggestion="':code' accepts 'lang' and 'source'",
                )
            if not value:
                raise ParseError(
                    f"':code' attribute {name!r} needs a value",
                    line.lineno,
                    line.indent,
                    code=ErrorCode.MALFORMED_TAG,
                )
            options[field] = value
        return CodeSample(
            lineno=line.lineno,
            col_offset=line.indent,
            code=body,
            language=options.get("language"),
            source=options.get("source"),
        )

    def _literal_body(self, owner_indent: int) -> str:
        """Consume lines nested under a filter and return them dedented.

        Blank lines inside the body are kept; trailing blank lines are left
        for the structural parser.
        """
        start = self._pos
        end = start
        index = start
        while index < len(self._lines):
            line = self._lines[index]
            if line.type is LineType.BLANK:
                index += 1
                continue
            if line.indent <= owner_indent:
                break
            index += 1
            end = index
        self._pos = end

        body_lines = self._lines[start:end]
        indents = [line.indent for line in body_lines if line.type is not LineType.BLANK]
        if not indents:
            return ""
        dedent = min(indents)
        return "\n".join(
            "" if line.type is LineType.BLANK else line.raw[dedent:] for line in body_lines
        )
