"""Folio: static documentation pages from an indented markup dialect.

A page source is front-matter plus an indented body of HTML elements,
literal text, and ``:markdown`` / ``:code`` blocks. Folio parses it into
an immutable tree, renders Markdown prose, places the result into a
layout, and writes a mirrored ``.html`` file.

Quickstart:
    >>> from folio import Environment
    >>> env = Environment()
    >>> html = env.render_string('''---
    ... title: Composing Applications with Diesel
    ... ---
    ... :markdown
    ...   We'll look at **patterns**.
    ... ''')
    >>> "<title>Composing Applications with Diesel</title>" in html
    True
    >>> "<strong>patterns</strong>" in html
    True

Whole sites:
    >>> from folio import BuildConfig, build_site
    >>> report = build_site(BuildConfig(source_dir="content", output_dir="public"))
    >>> report.ok
    True

Architecture:
Page Source → Front-matter → Lexer → Parser → Page tree → Composer → Layout → Emitter

Pipeline stages:
1. **Front-matter**: Splits ``key: value`` metadata from the body
2. **Lexer**: Classifies body lines and measures indentation
3. **Parser**: Builds the immutable block tree from indentation
4. **Composer**: Renders blocks (Markdown via ``folio.markdown``) into a layout
5. **Emitter**: Writes the document atomically beside its mirrored path

Thread-Safety:
Environments, composers, layouts and loaders hold no mutable state, so a
single Environment can render pages from many threads. ``folio.site``
builds pages on a thread pool; one failing page never affects another.

"""

from folio.environment import (
    ChoiceLoader,
    DictLoader,
    EmitError,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FolioError,
    LayoutError,
    OutputCollisionError,
    PageIOError,
    PageNotFoundError,
    ParseError,
    SourceReadError,
)
from folio.composer import Composer
from folio.config import BuildConfig
from folio.emitter import emit, output_path_for
from folio.layout import DEFAULT_LAYOUT, Layout
from folio.markdown import MarkdownRenderer, render_markdown
from folio.nodes import Block, CodeSample, Element, Page, Prose, Text
from folio.site import BuildReport, PageResult, Site, build_site
from folio.utils.workers import get_optimal_workers, is_free_threading_enabled

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_LAYOUT",
    "Block",
    "BuildConfig",
    "BuildReport",
    "ChoiceLoader",
    "CodeSample",
    "Composer",
    "DictLoader",
    "Element",
    "EmitError",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FolioError",
    "Layout",
    "LayoutError",
    "MarkdownRenderer",
    "OutputCollisionError",
    "Page",
    "PageIOError",
    "PageNotFoundError",
    "PageResult",
    "ParseError",
    "Prose",
    "Site",
    "SourceReadError",
    "Text",
    "__version__",
    "build_site",
    "emit",
    "get_optimal_workers",
    "is_free_threading_enabled",
    "output_path_for",
    "render_markdown",
]
