"""Immutable node tree for parsed pages.

A Page owns a tuple of blocks; an Element owns a tuple of child blocks.
There are no parent pointers, so the tree is strictly a tree.
"""

from folio.nodes.base import Node
from folio.nodes.blocks import Block, CodeSample, Element, Prose, Text
from folio.nodes.page import Page

__all__ = [
    "Block",
    "CodeSample",
    "Element",
    "Node",
    "Page",
    "Prose",
    "Text",
]
