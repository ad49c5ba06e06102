"""Site build: discover every page, compose it, and emit it.

Each page is an independent unit of work:

    source → Environment.get_page → Environment.render → emit

Pages run on a ``ThreadPoolExecutor``. A page that fails records its error
in its own ``PageResult``; the other pages still build. Pages that map to the
same output file all fail before anything renders. Results come back in
page-name order whatever order the workers finish in.

Example:
    >>> report = build_site(BuildConfig(source_dir="content", output_dir="public"))
    >>> report.ok
    True
    >>> [r.name for r in report.results]
    ['guides/diesel.folio', 'index.folio']
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from folio.config import BuildConfig
from folio.emitter import emit, output_path_for
from folio.environment import Environment, FileSystemLoader, FolioError, OutputCollisionError
from folio.layout import Layout
from folio.utils.workers import get_optimal_workers

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PageResult:
    """Outcome of building one page.

    Attributes:
        name: Page name relative to the source directory.
        output: Output file path (None if the path could not be computed).
        written: True if the output file changed on disk.
        error: The failure, if the page did not build.
    """

    name: str
    output: Path | None = None
    written: bool = False
    error: FolioError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class BuildReport:
    """All page results of a build, in page-name order."""

    results: tuple[PageResult, ...] = ()
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def failed(self) -> tuple[PageResult, ...]:
        return tuple(result for result in self.results if not result.ok)

    @property
    def written(self) -> tuple[PageResult, ...]:
        return tuple(result for result in self.results if result.written)

    def summary(self) -> str:
        total = len(self.results)
        return (
            f"{total} page{'s' if total != 1 else ''}: "
            f"{len(self.written)} written, "
            f"{total - len(self.failed) - len(self.written)} unchanged, "
            f"{len(self.failed)} failed in {self.elapsed:.2f}s"
        )


class Site:
    """A source tree bound to an output tree.

    Raises:
        LayoutError: If ``config.layout_path`` cannot be read or is invalid.
    """

    __slots__ = ("config", "env")

    def __init__(self, config: BuildConfig):
        self.config = config
        layout = (
            Layout.from_path(config.layout_path, config.encoding)
            if config.layout_path is not None
            else None
        )
        self.env = Environment(
            loader=FileSystemLoader(
                config.source_dir,
                encoding=config.encoding,
                suffix=config.source_suffix,
            ),
            layout=layout,
            default_title=config.default_title,
            heading_ids=config.heading_ids,
            source_label=config.source_label,
        )

    def discover(self) -> list[str]:
        """Return every page name under the source directory, sorted."""
        return self.env.list_pages()

    def build_page(self, name: str) -> PageResult:
        """Build one page, capturing any FolioError in the result."""
        output: Path | None = None
        try:
            output = output_path_for(name, self.config.output_dir, self.config.source_suffix)
            html = self.env.render_page(name)
            written = emit(html, output, self.config.encoding)
        except FolioError as e:
            logger.warning("Failed %s (%s)", name, e.code.value if e.code else type(e).__name__)
            return PageResult(name=name, output=output, error=e)

        logger.debug("%s %s -> %s", "Built" if written else "Unchanged", name, output)
        return PageResult(name=name, output=output, written=written)

    def find_collisions(self, names: list[str]) -> dict[str, PageResult]:
        """Fail every page whose output file another page also maps to.

        Names that cannot be mapped at all are left to ``build_page``.
        """
        claims: dict[Path, list[str]] = {}
        for name in names:
            try:
                path = output_path_for(name, self.config.output_dir, self.config.source_suffix)
            except FolioError:
                continue
            claims.setdefault(path, []).append(name)

        failed: dict[str, PageResult] = {}
        for path, owners in claims.items():
            if len(owners) < 2:
                continue
            for owner in owners:
                others = ", ".join(other for other in owners if other != owner)
                error = OutputCollisionError(
                    f"Output file is also written by {others}", str(path)
                )
                logger.warning("Failed %s (%s)", owner, error.code.value)
                failed[owner] = PageResult(name=owner, output=path, error=error)
        return failed

    def build(self) -> BuildReport:
        """Build every discovered page."""
        start = time.perf_counter()
        names = self.discover()
        collisions = self.find_collisions(names)
        workers = get_optimal_workers(len(names), self.config.max_workers)
        logger.info(
            "Building %d page(s) from %s with %d worker(s)",
            len(names),
            self.config.source_dir,
            workers,
        )

        def run(name: str) -> PageResult:
            return collisions.get(name) or self.build_page(name)

        if workers == 1:
            results = [run(name) for name in names]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # map() yields in submission order
                results = list(executor.map(run, names))

        report = BuildReport(results=tuple(results), elapsed=time.perf_counter() - start)
        if report.ok:
            logger.info(report.summary())
        else:
            logger.error(report.summary())
        return report


def build_site(config: BuildConfig) -> BuildReport:
    """Build the site described by ``config``."""
    return Site(config).build()
