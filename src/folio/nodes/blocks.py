"""Block nodes that make up a page body."""

from __future__ import annotations

from dataclasses import dataclass

from folio.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Element(Node):
    """Structural markup: ``tag#id.cls(attr="v")`` with nested children.

    ``attributes`` keeps source order; a ``None`` value is a boolean attribute.
    """

    tag: str
    id: str | None = None
    classes: tuple[str, ...] = ()
    attributes: tuple[tuple[str, str | None], ...] = ()
    children: tuple[Block, ...] = ()

    def child_nodes(self) -> tuple[Node, ...]:
        return self.children


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text content, escaped on output."""

    value: str


@dataclass(frozen=True, slots=True)
class Prose(Node):
    """Markdown prose: ``:markdown`` followed by an indented body."""

    source: str


@dataclass(frozen=True, slots=True)
class CodeSample(Node):
    """Literal code: ``:code(lang="rust" source="url")`` with an indented body."""

    code: str
    language: str | None = None
    source: str | None = None


Block = Element | Text | Prose | CodeSample
