"""Block-level Markdown scanner.

Splits prose into headings, paragraphs, code blocks, block quotes, lists,
thematic breaks, pipe tables and raw HTML. Inline content is left as text
for ``folio.markdown.inline``.

The scanner never raises: unterminated fences run to the end of the prose,
and anything unrecognised becomes a paragraph. Quotes and lists nested
deeper than ``MAX_NESTING`` are kept as literal paragraph text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from folio.utils.text import split_lines

MAX_NESTING = 32

ATX_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
SETEXT_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
FENCE_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})[ \t]*([^`\s]*)[^`]*$")
THEMATIC_BREAK_RE = re.compile(r"^ {0,3}(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$")
QUOTE_RE = re.compile(r"^ {0,3}> ?")
LIST_ITEM_RE = re.compile(r"^( {0,3})([-*+]|(\d{1,9})[.)])(?:([ \t]+)(.*))?$")
HTML_BLOCK_RE = re.compile(r"^ {0,3}<(?:/?([A-Za-z][A-Za-z0-9-]*)(?:[\s/>]|$)|!--)")
TABLE_DIVIDER_RE = re.compile(r"^\s*\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)*\|?\s*$")
HTML_BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "details", "dialog", "div", "dl",
        "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4",
        "h5", "h6", "header", "hr", "iframe", "main", "nav", "ol", "p", "pre",
        "script", "section", "style", "summary", "table", "ul", "video",
    }
)
LINK_DEF_RE = re.compile(
    r"""^ {0,3}\[(?P<label>[^\]]+)\]:[ \t]*<?(?P<url>[^\s>]+)>?"""
    r"""(?:[ \t]+(?:"(?P<t1>[^"]*)"|'(?P<t2>[^']*)'|\((?P<t3>[^)]*)\)))?[ \t]*$"""
)


@dataclass
class Heading:
    level: int
    text: str


@dataclass
class Paragraph:
    text: str
    # rendered escaped, without inline markup
    literal: bool = False


@dataclass
class CodeBlock:
    code: str
    language: str = ""


@dataclass
class Quote:
    children: list[MarkdownBlock] = field(default_factory=list)


@dataclass
class ListItem:
    children: list[MarkdownBlock] = field(default_factory=list)


@dataclass
class ListBlock:
    ordered: bool
    start: int = 1
    items: list[ListItem] = field(default_factory=list)
    loose: bool = False


@dataclass
class Rule:
    pass


@dataclass
class Table:
    headers: list[str]
    aligns: list[str | None]
    rows: list[list[str]] = field(default_factory=list)


@dataclass
class HtmlBlock:
    html: str


MarkdownBlock = Heading | Paragraph | CodeBlock | Quote | ListBlock | Rule | Table | HtmlBlock


@dataclass(frozen=True, slots=True)
class LinkReference:
    url: str
    title: str | None = None


def normalize_label(label: str) -> str:
    """Case-fold a link label and collapse inner whitespace."""
    return " ".join(label.split()).lower()


def _indent_width(line: str) -> int:
    width = 0
    for char in line:
        if char == " ":
            width += 1
        elif char == "\t":
            width += 4 - width % 4
        else:
            break
    return width


def _strip_indent(line: str, amount: int) -> str:
    """Remove up to ``amount`` columns of leading whitespace."""
    width = 0
    index = 0
    while index < len(line) and width < amount:
        if line[index] == " ":
            width += 1
        elif line[index] == "\t":
            width += 4 - width % 4
        else:
            break
        index += 1
    return line[index:]


def extract_link_references(lines: list[str]) -> tuple[list[str], dict[str, LinkReference]]:
    """Pull ``[label]: url "title"`` definitions out of ``lines``.

    Definitions inside fenced code are left alone. The first definition of a
    label wins.
    """
    kept: list[str] = []
    references: dict[str, LinkReference] = {}
    fence: str | None = None
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence is None and fence_match:
            fence = fence_match.group(2)[0] * len(fence_match.group(2))
        elif fence is not None and line.strip().startswith(fence[:3]) and set(line.strip()) == {fence[0]}:
            fence = None
        elif fence is None:
            match = LINK_DEF_RE.match(line)
            if match:
                key = normalize_label(match.group("label"))
                title = match.group("t1") or match.group("t2") or match.group("t3")
                references.setdefault(key, LinkReference(url=match.group("url"), title=title))
                continue
        kept.append(line)
    return kept, references


def _is_html_block(line: str) -> bool:
    match = HTML_BLOCK_RE.match(line)
    if not match:
        return False
    return match.group(1) is None or match.group(1).lower() in HTML_BLOCK_TAGS


def _is_table_start(lines: list[str], index: int) -> bool:
    if index + 1 >= len(lines):
        return False
    header, divider = lines[index], lines[index + 1]
    if "|" not in header or "-" not in divider or not TABLE_DIVIDER_RE.match(divider):
        return False
    return len(split_table_row(header)) == len(split_table_row(divider))


def split_table_row(line: str) -> list[str]:
    """Split a pipe-table row into stripped cells, honouring ``\\|`` escapes."""
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    cells: list[str] = []
    current: list[str] = []
    index = 0
    while index < len(stripped):
        char = stripped[index]
        if char == "\\" and index + 1 < len(stripped) and stripped[index + 1] == "|":
            current.append("|")
            index += 2
            continue
        if char == "|":
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        index += 1
    cells.append("".join(current).strip())
    return cells


def _column_align(cell: str) -> str | None:
    cell = cell.strip()
    left = cell.startswith(":")
    right = cell.endswith(":")
    if left and right:
        return "center"
    if right:
        return "right"
    if left:
        return "left"
    return None


class BlockParser:
    """Scan lines of Markdown into a list of blocks.

    Nested containers (block quotes, list items) are parsed by a fresh
    BlockParser over their dedented lines, one level deeper. At
    ``MAX_NESTING`` the remaining lines become one literal paragraph.
    """

    def __init__(self, lines: list[str], depth: int = 0):
        self._lines = lines
        self._pos = 0
        self._depth = depth

    def parse(self) -> list[MarkdownBlock]:
        if self._depth >= MAX_NESTING:
            text = "\n".join(line.strip() for line in self._lines if line.strip())
            return [Paragraph(text=text, literal=True)] if text else []
        blocks: list[MarkdownBlock] = []
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            if not line.strip():
                self._pos += 1
                continue
            blocks.append(self._parse_block(line))
        return blocks

    def _starts_block(self, index: int) -> bool:
        """True if the line at ``index`` interrupts a paragraph."""
        line = self._lines[index]
        if not line.strip():
            return True
        if ATX_HEADING_RE.match(line) or FENCE_RE.match(line) or QUOTE_RE.match(line):
            return True
        if THEMATIC_BREAK_RE.match(line) or _is_html_block(line):
            return True
        item = LIST_ITEM_RE.match(line)
        if item and item.group(5):
            return True
        return _is_table_start(self._lines, index)

    def _parse_block(self, line: str) -> MarkdownBlock:
        if _indent_width(line) >= 4:
            return self._parse_indented_code()

        heading = ATX_HEADING_RE.match(line)
        if heading:
            self._pos += 1
            return Heading(level=len(heading.group(1)), text=(heading.group(2) or "").strip())

        fence = FENCE_RE.match(line)
        if fence:
            return self._parse_fence(fence)

        if THEMATIC_BREAK_RE.match(line):
            self._pos += 1
            return Rule()

        if QUOTE_RE.match(line):
            return self._parse_quote()

        if LIST_ITEM_RE.match(line):
            return self._parse_list()

        if _is_html_block(line):
            return self._parse_html()

        if _is_table_start(self._lines, self._pos):
            return self._parse_table()

        return self._parse_paragraph()

    def _parse_indented_code(self) -> CodeBlock:
        collected: list[str] = []
        end = 0
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            if line.strip() and _indent_width(line) < 4:
                break
            collected.append(_strip_indent(line, 4))
            self._pos += 1
            if line.strip():
                end = len(collected)
        # trailing blank lines belong to the surrounding document
        self._pos -= len(collected) - end
        return CodeBlock(code="\n".join(collected[:end]))

    def _parse_fence(self, match: re.Match[str]) -> CodeBlock:
        indent = len(match.group(1))
        marker = match.group(2)
        language = match.group(3)
        self._pos += 1
        collected: list[str] = []
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            self._pos += 1
            stripped = line.strip()
            if (
                _indent_width(line) < 4
                and stripped.startswith(marker[0] * len(marker))
                and set(stripped) == {marker[0]}
            ):
                break
            collected.append(_strip_indent(line, indent))
        return CodeBlock(code="\n".join(collected), language=language)

    def _parse_quote(self) -> Quote:
        inner: list[str] = []
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            match = QUOTE_RE.match(line)
            if match:
                inner.append(line[match.end() :])
            elif line.strip() and inner and inner[-1].strip() and not self._starts_block(self._pos):
                # lazy continuation of a quoted paragraph
                inner.append(line)
            else:
                break
            self._pos += 1
        return Quote(children=BlockParser(inner, self._depth + 1).parse())

    def _parse_list(self) -> ListBlock:
        first = LIST_ITEM_RE.match(self._lines[self._pos])
        assert first is not None
        ordered = first.group(3) is not None
        delimiter = first.group(2)[-1]
        marker_indent = len(first.group(1))
        block = ListBlock(ordered=ordered, start=int(first.group(3)) if ordered else 1)

        saw_blank_between = False
        while self._pos < len(self._lines):
            match = LIST_ITEM_RE.match(self._lines[self._pos])
            if not match or len(match.group(1)) != marker_indent:
                break
            if (match.group(3) is not None) != ordered or match.group(2)[-1] != delimiter:
                break
            if saw_blank_between:
                block.loose = True

            spacing = match.group(4) or " "
            if len(spacing) > 4:
                spacing = " "
            content_indent = marker_indent + len(match.group(2)) + len(spacing)
            item_lines = [match.group(5) or ""]
            self._pos += 1

            trailing_blank = False
            while self._pos < len(self._lines):
                line = self._lines[self._pos]
                if not line.strip():
                    item_lines.append("")
                    trailing_blank = True
                    self._pos += 1
                    continue
                if _indent_width(line) >= content_indent:
                    if trailing_blank and any(part.strip() for part in item_lines):
                        block.loose = block.loose or self._blank_splits_item(item_lines)
                    item_lines.append(_strip_indent(line, content_indent))
                    trailing_blank = False
                    self._pos += 1
                    continue
                if (
                    not trailing_blank
                    and item_lines[-1].strip()
                    and not self._starts_block(self._pos)
                ):
                    item_lines.append(line.strip())
                    self._pos += 1
                    continue
                break

            saw_blank_between = trailing_blank
            while item_lines and not item_lines[-1].strip():
                item_lines.pop()
            children = BlockParser(item_lines, self._depth + 1).parse()
            block.items.append(ListItem(children=children))

        # blank lines after the last item are not part of the list
        while self._pos > 0 and not self._lines[self._pos - 1].strip():
            self._pos -= 1
        return block

    @staticmethod
    def _blank_splits_item(item_lines: list[str]) -> bool:
        """A blank line between two top-level chunks of an item makes the list loose."""
        last = next((line for line in reversed(item_lines) if line.strip()), "")
        return not LIST_ITEM_RE.match(last)

    def _parse_html(self) -> HtmlBlock:
        collected: list[str] = []
        while self._pos < len(self._lines) and self._lines[self._pos].strip():
            collected.append(self._lines[self._pos])
            self._pos += 1
        return HtmlBlock(html="\n".join(collected))

    def _parse_table(self) -> Table:
        headers = split_table_row(self._lines[self._pos])
        aligns = [_column_align(cell) for cell in split_table_row(self._lines[self._pos + 1])]
        aligns = (aligns + [None] * len(headers))[: len(headers)]
        self._pos += 2
        table = Table(headers=headers, aligns=aligns)
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            if not line.strip() or "|" not in line:
                break
            cells = split_table_row(line)
            cells = (cells + [""] * len(headers))[: len(headers)]
            table.rows.append(cells)
            self._pos += 1
        return table

    def _parse_paragraph(self) -> MarkdownBlock:
        collected = [self._lines[self._pos].lstrip()]
        self._pos += 1
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            setext = SETEXT_RE.match(line)
            if setext and line.strip():
                self._pos += 1
                level = 1 if setext.group(1)[0] == "=" else 2
                return Heading(level=level, text="\n".join(collected).strip())
            if self._starts_block(self._pos):
                break
            collected.append(line.lstrip())
            self._pos += 1
        text = "\n".join(collected).rstrip()
        return Paragraph(text=text)


def parse_blocks(text: str) -> tuple[list[MarkdownBlock], dict[str, LinkReference]]:
    """Parse Markdown ``text`` into blocks and the link references it defines."""
    lines = split_lines(text)
    lines, references = extract_link_references(lines)
    return BlockParser(lines).parse(), references
