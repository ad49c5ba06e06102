"""The page node: one source file, one output document."""

from __future__ import annotations

from dataclasses import dataclass

from folio.nodes.base import Node
from folio.nodes.blocks import Block


@dataclass(frozen=True, slots=True)
class Page(Node):
    """Root of a parsed page.

    Attributes:
        name: Loader name of the page (``guides/intro.folio``).
        filename: Path the source was read from, if file-backed.
        title: Front-matter ``title`` (or the environment default).
        metadata: Every front-matter pair, in source order.
        body: Top-level blocks, in source order.
    """

    name: str | None
    filename: str | None
    title: str
    metadata: tuple[tuple[str, str], ...] = ()
    body: tuple[Block, ...] = ()

    @property
    def meta(self) -> dict[str, str]:
        return dict(self.metadata)

    def child_nodes(self) -> tuple[Node, ...]:
        return self.body
