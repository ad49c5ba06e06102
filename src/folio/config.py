"""Build configuration.

``BuildConfig`` is immutable, so one instance can be shared by every worker
of a build without copying.

Example:
    >>> config = BuildConfig(source_dir="content", output_dir="public")
    >>> config.source_dir
    PosixPath('content')
    >>> config.source_suffix
    '.folio'
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from folio.composer import DEFAULT_SOURCE_LABEL
from folio.environment.loaders import DEFAULT_SUFFIX


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Settings for one site build.

    Attributes:
        source_dir: Root of the page sources.
        output_dir: Root of the generated HTML tree.
        source_suffix: Suffix identifying page sources.
        layout_path: Optional layout file; the built-in skeleton otherwise.
        max_workers: Upper bound on parallel page builds (None: automatic).
        encoding: Encoding for reading sources and writing output.
        default_title: Title for pages without a ``title`` key.
        heading_ids: Give Markdown headings anchor ids.
        source_label: Link text under code samples with a ``source``.

    Raises:
        ValueError: On an empty suffix or a worker bound below 1.
    """

    source_dir: Path
    output_dir: Path
    source_suffix: str = DEFAULT_SUFFIX
    layout_path: Path | None = None
    max_workers: int | None = None
    encoding: str = "utf-8"
    default_title: str = ""
    heading_ids: bool = True
    source_label: str = DEFAULT_SOURCE_LABEL

    def __post_init__(self) -> None:
        # Frozen: normalise str paths through object.__setattr__
        object.__setattr__(self, "source_dir", Path(self.source_dir))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        if self.layout_path is not None:
            object.__setattr__(self, "layout_path", Path(self.layout_path))

        if not self.source_suffix:
            raise ValueError("source_suffix must not be empty")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
