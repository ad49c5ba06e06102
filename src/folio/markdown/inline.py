"""Inline Markdown rendering.

Handles code spans, backslash escapes, strong/emphasis (``*`` and ``_``),
strikethrough, inline and reference links, images, autolinks, inline HTML,
entities and hard line breaks. Text between constructs is HTML-escaped.

The scanner is a single left-to-right pass with a ``flush`` of the pending
plain-text segment before each construct. Anything that does not close is
emitted literally.
"""

from __future__ import annotations

import re
import string
from html import unescape

from folio.markdown.blocks import LinkReference, normalize_label
from folio.utils.html import escape_attr, escape_text, strip_tags

# Emphasis and link labels nested deeper than this are left as plain text
MAX_INLINE_NESTING = 32

_SPECIAL = frozenset("\\`*_~[!<&\n")
_PUNCTUATION = frozenset(string.punctuation)

_ENTITY_RE = re.compile(r"&(?:#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")
_AUTOLINK_RE = re.compile(r"<([A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*)>")
_EMAIL_RE = re.compile(r"<([A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-.]*[A-Za-z0-9])?)>")
_INLINE_HTML_RE = re.compile(
    r"<(?:[A-Za-z][A-Za-z0-9-]*(?:\s+[A-Za-z_:][-A-Za-z0-9_:.]*"
    r"(?:\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s\"'=<>`]+))?)*\s*/?"
    r"|/[A-Za-z][A-Za-z0-9-]*\s*"
    r"|!--(?:.|\n)*?--)>"
)


def _find_closing_bracket(text: str, start: int) -> int:
    """Index of the ``]`` matching the ``[`` at ``start``, or -1."""
    depth = 0
    index = start
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == "`":
            run = _run_length(text, index, "`")
            close = _find_backtick_run(text, index + run, run)
            index = close + run if close != -1 else index + run
            continue
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return -1


def _run_length(text: str, index: int, char: str) -> int:
    end = index
    while end < len(text) and text[end] == char:
        end += 1
    return end - index


def _find_backtick_run(text: str, start: int, length: int) -> int:
    index = start
    while index < len(text):
        if text[index] == "`":
            run = _run_length(text, index, "`")
            if run == length:
                return index
            index += run
        else:
            index += 1
    return -1


def _parse_destination(text: str, start: int) -> tuple[str, str | None, int] | None:
    """Parse ``(url "title")`` beginning at ``text[start] == "("``.

    Returns ``(url, title, end)`` with ``end`` just past ``)``, or None.
    """
    index = start + 1
    while index < len(text) and text[index] in " \t\n":
        index += 1

    if index < len(text) and text[index] == "<":
        close = text.find(">", index + 1)
        if close == -1:
            return None
        url = text[index + 1 : close]
        index = close + 1
    else:
        depth = 0
        begin = index
        while index < len(text):
            char = text[index]
            if char == "\\" and index + 1 < len(text):
                index += 2
                continue
            if char in " \t\n":
                break
            if char == "(":
                depth += 1
            elif char == ")":
                if depth == 0:
                    break
                depth -= 1
            index += 1
        url = text[begin:index]

    while index < len(text) and text[index] in " \t\n":
        index += 1

    title: str | None = None
    if index < len(text) and text[index] in "\"'(":
        closer = ")" if text[index] == "(" else text[index]
        close = text.find(closer, index + 1)
        if close == -1:
            return None
        title = text[index + 1 : close]
        index = close + 1
        while index < len(text) and text[index] in " \t\n":
            index += 1

    if index >= len(text) or text[index] != ")":
        return None
    return _unescape(url), title, index + 1


def _unescape(value: str) -> str:
    return re.sub(r"\\([!-/:-@\[-`{-~])", r"\1", value)


class InlineRenderer:
    """Render inline Markdown to HTML.

    Args:
        references: Link reference definitions keyed by normalised label.
    """

    __slots__ = ("_references",)

    def __init__(self, references: dict[str, LinkReference] | None = None):
        self._references = references or {}

    def render(self, text: str, *, allow_links: bool = True, depth: int = 0) -> str:
        if not text:
            return ""
        if depth > MAX_INLINE_NESTING:
            return escape_text(text)
        result: list[str] = []
        start = 0
        i = 0

        def flush(end: int) -> None:
            if start < end:
                result.append(escape_text(text[start:end]))

        while i < len(text):
            char = text[i]
            if char not in _SPECIAL:
                i += 1
                continue

            if char == "\\":
                nxt = text[i + 1] if i + 1 < len(text) else ""
                if nxt in _PUNCTUATION and nxt:
                    flush(i)
                    result.append(escape_text(nxt))
                    i += 2
                    start = i
                    continue
                if nxt == "\n":
                    flush(i)
                    result.append("<br />\n")
                    i += 2
                    start = i
                    continue
                i += 1
                continue

            if char == "\n":
                segment_end = i
                while segment_end > start and text[segment_end - 1] == " ":
                    segment_end -= 1
                flush(segment_end)
                result.append("<br />\n" if i - segment_end >= 2 else "\n")
                i += 1
                start = i
                continue

            if char == "`":
                run = _run_length(text, i, "`")
                close = _find_backtick_run(text, i + run, run)
                if close == -1:
                    i += run
                    continue
                flush(i)
                code = text[i + run : close].replace("\n", " ")
                if len(code) > 2 and code[0] == " " and code[-1] == " " and code.strip():
                    code = code[1:-1]
                result.append(f"<code>{escape_text(code)}</code>")
                i = close + run
                start = i
                continue

            if char == "!" and i + 1 < len(text) and text[i + 1] == "[":
                rendered = self._try_link(text, i + 1, image=True, depth=depth)
                if rendered is not None:
                    html, end = rendered
                    flush(i)
                    result.append(html)
                    i = start = end
                    continue
                i += 1
                continue

            if char == "[" and allow_links:
                rendered = self._try_link(text, i, image=False, depth=depth)
                if rendered is not None:
                    html, end = rendered
                    flush(i)
                    result.append(html)
                    i = start = end
                    continue
                i += 1
                continue

            if char == "<":
                html = self._try_angle(text, i, allow_links)
                if html is not None:
                    markup, end = html
                    flush(i)
                    result.append(markup)
                    i = start = end
                    continue
                i += 1
                continue

            if char == "&":
                entity = _ENTITY_RE.match(text, i)
                flush(i)
                if entity:
                    result.append(entity.group())
                    i = entity.end()
                else:
                    result.append("&amp;")
                    i += 1
                start = i
                continue

            if char in "*_~":
                rendered = self._try_delimited(text, i, allow_links, depth)
                if rendered is not None:
                    html, end = rendered
                    flush(i)
                    result.append(html)
                    i = start = end
                    continue
                i += _run_length(text, i, char)
                continue

            i += 1

        flush(len(text))
        return "".join(result)

    # -- emphasis ---------------------------------------------------------

    def _try_delimited(
        self, text: str, i: int, allow_links: bool, depth: int
    ) -> tuple[str, int] | None:
        char = text[i]
        run = _run_length(text, i, char)
        if char == "~":
            if run != 2:
                return None
        elif run > 3:
            return None

        after = i + run
        if after >= len(text) or text[after].isspace():
            return None
        if char == "_" and i > 0 and text[i - 1].isalnum():
            return None

        close = self._find_closing_run(text, after, char, run)
        if close == -1:
            return None
        inner = self.render(text[after:close], allow_links=allow_links, depth=depth + 1)
        end = close + run
        if char == "~":
            return f"<del>{inner}</del>", end
        if run == 3:
            return f"<em><strong>{inner}</strong></em>", end
        if run == 2:
            return f"<strong>{inner}</strong>", end
        return f"<em>{inner}</em>", end

    @staticmethod
    def _find_closing_run(text: str, start: int, char: str, length: int) -> int:
        index = start
        while index < len(text):
            current = text[index]
            if current == "\\":
                index += 2
                continue
            if current == "`":
                run = _run_length(text, index, "`")
                close = _find_backtick_run(text, index + run, run)
                index = close + run if close != -1 else index + run
                continue
            if current == char:
                run = _run_length(text, index, char)
                after = index + run
                closes = (
                    run == length
                    and index > start
                    and not text[index - 1].isspace()
                    and not (char == "_" and after < len(text) and text[after].isalnum())
                )
                if closes:
                    return index
                index += run
                continue
            index += 1
        return -1

    # -- links ------------------------------------------------------------

    def _try_link(
        self, text: str, i: int, *, image: bool, depth: int = 0
    ) -> tuple[str, int] | None:
        close = _find_closing_bracket(text, i)
        if close == -1:
            return None
        label = text[i + 1 : close]

        url: str | None = None
        title: str | None = None
        end = close + 1

        if end < len(text) and text[end] == "(":
            parsed = _parse_destination(text, end)
            if parsed is not None:
                url, title, end = parsed

        if url is None:
            ref_key = label
            if end + 1 < len(text) and text[end] == "[":
                ref_close = text.find("]", end + 1)
                if ref_close != -1:
                    explicit = text[end + 1 : ref_close]
                    ref_key = explicit if explicit.strip() else label
                    reference = self._references.get(normalize_label(ref_key))
                    if reference is None:
                        return None
                    url, title, end = reference.url, reference.title, ref_close + 1
            if url is None:
                reference = self._references.get(normalize_label(ref_key))
                if reference is None:
                    return None
                url, title = reference.url, reference.title

        title_attr = f' title="{escape_attr(title)}"' if title else ""
        if image:
            alt = unescape(strip_tags(self.render(label, allow_links=False, depth=depth + 1)))
            return f'<img src="{escape_attr(url)}" alt="{escape_attr(alt)}"{title_attr} />', end
        inner = self.render(label, allow_links=False, depth=depth + 1)
        return f'<a href="{escape_attr(url)}"{title_attr}>{inner}</a>', end

    def _try_angle(self, text: str, i: int, allow_links: bool) -> tuple[str, int] | None:
        if allow_links:
            autolink = _AUTOLINK_RE.match(text, i)
            if autolink:
                url = autolink.group(1)
                return f'<a href="{escape_attr(url)}">{escape_text(url)}</a>', autolink.end()
            email = _EMAIL_RE.match(text, i)
            if email:
                address = email.group(1)
                return (
                    f'<a href="mailto:{escape_attr(address)}">{escape_text(address)}</a>',
                    email.end(),
                )
        html = _INLINE_HTML_RE.match(text, i)
        if html:
            return html.group(), html.end()
        return None


def render_inline(text: str, references: dict[str, LinkReference] | None = None) -> str:
    """Render a single run of inline Markdown."""
    return InlineRenderer(references).render(text)
