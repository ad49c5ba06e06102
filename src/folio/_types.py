"""Line token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class LineType(Enum):
    """Classification of one physical body line."""

    BLANK = auto()
    COMMENT = auto()
    TEXT = auto()
    FILTER = auto()
    ELEMENT = auto()


@dataclass(frozen=True, slots=True)
class Line:
    """One physical line of a page body.

    Attributes:
        type: What the line introduces.
        lineno: 1-based line number in the original file.
        indent: Count of leading spaces.
        text: Line content after the indentation, trailing whitespace removed.
        raw: The untouched line, used for literal bodies.
        tabbed: True if a tab follows the leading spaces.
    """

    type: LineType
    lineno: int
    indent: int
    text: str
    raw: str
    tabbed: bool = False

    def __repr__(self) -> str:
        return f"Line({self.type.name}, {self.lineno}, indent={self.indent}, {self.text!r})"
