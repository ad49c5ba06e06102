"""Environment, loaders and errors for folio.

Example:
        >>> from folio.environment import Environment, DictLoader
        >>> env = Environment(loader=DictLoader({"a.folio": "p Hello"}))
        >>> "<p>Hello</p>" in env.render_page("a.folio")
        True
"""

from folio.environment.core import Environment
from folio.environment.exceptions import (
    EmitError,
    ErrorCode,
    FolioError,
    LayoutError,
    OutputCollisionError,
    PageIOError,
    PageNotFoundError,
    ParseError,
    SourceReadError,
    SourceSnippet,
    build_source_snippet,
)
from folio.environment.loaders import ChoiceLoader, DictLoader, FileSystemLoader, Loader

__all__ = [
    "ChoiceLoader",
    "DictLoader",
    "EmitError",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FolioError",
    "LayoutError",
    "Loader",
    "OutputCollisionError",
    "PageIOError",
    "PageNotFoundError",
    "ParseError",
    "SourceReadError",
    "SourceSnippet",
    "build_source_snippet",
]
