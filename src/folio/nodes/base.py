"""Base node class for the folio page tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for page tree nodes.

    Every node records the line and column it was parsed from, so a
    diagnostic can point back into the source file. Container nodes hold
    their children in tuples and override ``child_nodes``.
    """

    lineno: int
    col_offset: int

    @property
    def location(self) -> str:
        """``line:column``, both 1-based, as shown in diagnostics."""
        return f"{self.lineno}:{self.col_offset + 1}"

    def child_nodes(self) -> tuple[Node, ...]:
        return ()

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendants in document order.

        Iterative, so arbitrarily deep trees never hit the recursion limit.
        """
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.child_nodes()))
