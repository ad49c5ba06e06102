"""Core Environment for folio.

The Environment is the central entry point: it loads page sources, parses
them into Page trees, and composes them into HTML documents.

Thread-Safety:
An Environment holds only immutable collaborators (loader, layout,
composer). Every parse and render uses local state, so one Environment can
serve a whole thread pool.

"""

from __future__ import annotations

import logging

from folio.composer import DEFAULT_SOURCE_LABEL, Composer
from folio.environment.exceptions import ParseError
from folio.environment.loaders import Loader
from folio.frontmatter import split_front_matter
from folio.layout import Layout
from folio.lexer import tokenize
from folio.markdown import MarkdownRenderer
from folio.nodes import Page
from folio.parser import Parser

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration and entry point for folio.

    Example:
            >>> env = Environment(loader=FileSystemLoader("content/"))
            >>> page = env.get_page("guides/diesel.folio")
            >>> html = env.render(page)

            >>> env = Environment()
            >>> env.render_string("---\\ntitle: Hi\\n---\\np Hello")[:15]
            '<!DOCTYPE html>'

    Attributes:
        loader: Page source provider (None for string-only use).
        layout: Document skeleton pages are placed into.
        default_title: Title for pages whose front-matter has none.
        heading_ids: Give Markdown headings anchor ids.
        source_label: Link text under code samples with a ``source``.
    """

    __slots__ = ("_composer", "default_title", "heading_ids", "layout", "loader", "source_label")

    def __init__(
        self,
        loader: Loader | None = None,
        layout: Layout | None = None,
        default_title: str = "",
        heading_ids: bool = True,
        source_label: str = DEFAULT_SOURCE_LABEL,
    ):
        self.loader = loader
        self.layout = layout or Layout()
        self.default_title = default_title
        self.heading_ids = heading_ids
        self.source_label = source_label
        self._composer = Composer(
            layout=self.layout,
            markdown=MarkdownRenderer(heading_ids=heading_ids),
            source_label=source_label,
        )

    @property
    def composer(self) -> Composer:
        return self._composer

    def parse(
        self,
        source: str,
        name: str | None = None,
        filename: str | None = None,
    ) -> Page:
        """Parse page source into a Page.

        Front-matter is split first; the body is then tokenized with its
        original line offset so errors point into the real file.

        Raises:
            ParseError: With ``filename`` and a source snippet attached.
        """
        try:
            front = split_front_matter(source)
            lines = tokenize(front.body, start_line=front.body_start)
            body = Parser(lines).parse()
        except ParseError as e:
            raise e.with_context(filename=filename or name, source=source) from None

        title = front.get("title")
        return Page(
            lineno=1,
            col_offset=0,
            name=name,
            filename=filename,
            title=self.default_title if title is None else title,
            metadata=front.metadata,
            body=body,
        )

    def from_string(self, source: str, name: str | None = None) -> Page:
        """Parse a page from a string (not loaded from the loader)."""
        return self.parse(source, name=name)

    def get_page(self, name: str) -> Page:
        """Load and parse a page by name.

        Raises:
            RuntimeError: If no loader is configured.
            PageNotFoundError: If the loader has no such page.
            SourceReadError: If the page cannot be read.
            ParseError: If the page is malformed.
        """
        if self.loader is None:
            raise RuntimeError("No loader configured")

        source, filename = self.loader.get_source(name)
        page = self.parse(source, name=name, filename=filename)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Parsed %s (%d nodes)", filename or name, sum(1 for _ in page.walk()))
        return page

    def list_pages(self) -> list[str]:
        if self.loader is None:
            return []
        return self.loader.list_pages()

    def render(self, page: Page) -> str:
        """Compose ``page`` into a complete HTML document."""
        return self._composer.compose(page)

    def render_page(self, name: str) -> str:
        """Load, parse and compose the page ``name``."""
        return self.render(self.get_page(name))

    def render_string(self, source: str, name: str | None = None) -> str:
        """Parse and compose page source in one step."""
        return self.render(self.from_string(source, name=name))

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__} "
            f"layout={self.layout.name!r} default_title={self.default_title!r}>"
        )
