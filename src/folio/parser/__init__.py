"""Page body parser.

Turns lexed body lines into an immutable block tree. Element and filter
heads are parsed in ``folio.parser.tags``; indentation structure in
``folio.parser.core``.
"""

from folio.parser.core import FILTERS, Parser
from folio.parser.tags import ElementHead, FilterHead, parse_element_head, parse_filter_head

__all__ = [
    "FILTERS",
    "ElementHead",
    "FilterHead",
    "Parser",
    "parse_element_head",
    "parse_filter_head",
]
