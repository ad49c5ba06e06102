"""Exceptions raised while building folio pages.

Exception Hierarchy:
FolioError (base)
├── PageNotFoundError        # Loader cannot find a page
├── ParseError               # Malformed front-matter or body structure
├── LayoutError              # Layout skeleton is missing or repeats a slot
└── PageIOError              # Reading or writing a page failed
    ├── SourceReadError      # Source file could not be read
    └── EmitError            # Output file could not be written
        └── OutputCollisionError  # Two pages map to one output file

A failing page aborts only its own build. Nothing is retried; the author
fixes the source and rebuilds.

Example:
    ```
    F-PAR-002: Inconsistent indentation: dedent to 3 spaces matches no open block
      --> guides/getting-started.folio:14:4
         |
      13 |     p Hello
    > 14 |    p World
         |    ^
         |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from folio.environment import terminal
from folio.utils.text import split_lines

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Stable, searchable identifiers for build errors.

    Format: F-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), LAY (layout), IO (input/output), SRC (source lookup)
    """

    # Parser errors (F-PAR-xxx)
    TAB_INDENT = "F-PAR-001"
    INCONSISTENT_INDENT = "F-PAR-002"
    UNEXPECTED_INDENT = "F-PAR-003"
    MALFORMED_TAG = "F-PAR-004"
    UNCLOSED_ATTRIBUTES = "F-PAR-005"
    UNTERMINATED_STRING = "F-PAR-006"
    DUPLICATE_ID = "F-PAR-007"
    UNKNOWN_FILTER = "F-PAR-008"
    INVALID_FRONT_MATTER = "F-PAR-009"
    UNCLOSED_FRONT_MATTER = "F-PAR-010"
    NESTING_TOO_DEEP = "F-PAR-011"

    # Layout errors (F-LAY-xxx)
    LAYOUT_SLOT = "F-LAY-001"

    # I/O errors (F-IO-xxx)
    SOURCE_READ = "F-IO-001"
    EMIT_FAILED = "F-IO-002"
    OUTPUT_COLLISION = "F-IO-003"

    # Source lookup (F-SRC-xxx)
    PAGE_NOT_FOUND = "F-SRC-001"

    @property
    def category(self) -> str:
        """Error category (``parser``, ``layout``, ``io`` or ``source``)."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "LAY": "layout",
            "IO": "io",
            "SRC": "source",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Lines of page source surrounding an error.

    Attributes:
        lines: ``(line_number, line_content)`` pairs around the error.
        error_line: 1-based line number of the error.
        column: Optional 0-based column for the caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Render the snippet with line numbers and a caret under the error."""
        parts: list[str] = [terminal.gutter()]
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
            if is_error and self.column is not None:
                caret = " " * self.column + "^"
                parts.append(f"{terminal.gutter()} {terminal.paint('error', caret)}")
        parts.append(terminal.gutter())
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 1,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet for ``error_line`` of ``source``.

    Args:
        source: Full page source text.
        error_line: 1-based line number of the error.
        context_lines: Lines to show before and after the error line.
        column: Optional column offset for the caret pointer.
    """
    all_lines = split_lines(source.removeprefix("\ufeff"))
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FolioError(Exception):
    """Base class for every error folio raises on purpose.

    Catch this to report a failed page without crashing a whole build:

        >>> try:
        ...     env.get_page("guides/intro.folio")
        ... except FolioError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: Optional ErrorCode identifying the failure.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short terminal diagnostic."""
        header = str(self)
        if self.code and self.code.value not in header:
            return terminal.format_error_header(self.code.value, header)
        return header


class PageNotFoundError(FolioError):
    """No configured loader has a page with the requested name."""

    code: ErrorCode | None = ErrorCode.PAGE_NOT_FOUND


class ParseError(FolioError):
    """Malformed page structure.

    Raised while scanning front-matter or parsing the indented body. Carries
    the page location and, when the source is known, a snippet of the
    offending line with a caret under ``col_offset``.
    """

    def __init__(
        self,
        message: str,
        lineno: int,
        col_offset: int = 0,
        *,
        code: ErrorCode = ErrorCode.MALFORMED_TAG,
        filename: str | None = None,
        source: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.code = code
        self.filename = filename
        self.source = source
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        return f"{self.filename or '<page>'}:{self.lineno}:{self.col_offset + 1}"

    @property
    def snippet(self) -> SourceSnippet | None:
        if not self.source:
            return None
        if not 0 < self.lineno <= len(split_lines(self.source)):
            return None
        return build_source_snippet(self.source, self.lineno, column=self.col_offset)

    def with_context(self, *, filename: str | None, source: str) -> ParseError:
        """Return a copy of this error that knows its file and source text."""
        return ParseError(
            self.message,
            self.lineno,
            self.col_offset,
            code=self.code,
            filename=filename,
            source=source,
            suggestion=self.suggestion,
        )

    def _format_message(self) -> str:
        return f"Parse Error: {self.message}\n  --> {self.location}"

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value, self.message),
            f"  --> {terminal.paint('location', self.location)}",
        ]
        snippet = self.snippet
        if snippet is not None:
            parts.append(snippet.format())
        if self.suggestion:
            parts.append(f"  {terminal.paint('hint', 'Hint:')} {self.suggestion}")
        return "\n".join(parts)


class LayoutError(FolioError):
    """The layout skeleton does not have exactly one title and content slot."""

    code: ErrorCode | None = ErrorCode.LAYOUT_SLOT


class PageIOError(FolioError):
    """Reading a page source or writing its output failed.

    Attributes:
        path: The file that could not be read or written.
    """

    def __init__(self, message: str, path: str):
        self.message = message
        self.path = path
        super().__init__(f"{message}: {path}")


class SourceReadError(PageIOError):
    """A page source exists but could not be read or decoded."""

    code: ErrorCode | None = ErrorCode.SOURCE_READ


class EmitError(PageIOError):
    """Rendered HTML could not be written to the output tree."""

    code: ErrorCode | None = ErrorCode.EMIT_FAILED


class OutputCollisionError(EmitError):
    """Two page sources map to the same output file."""

    code: ErrorCode | None = ErrorCode.OUTPUT_COLLISION
