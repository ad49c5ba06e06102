"""Static emitter: write composed HTML beside its mirrored source path.

Output paths mirror the source tree with the page suffix swapped for
``.html``:

    guides/getting-started.folio       → <out>/guides/getting-started.html
    guides/getting-started.html.folio  → <out>/guides/getting-started.html

Writes go to a uniquely named temporary sibling that is then renamed over
the target, so a reader never sees a half-written page. A target that
already holds the same bytes is left untouched. Failures are reported once
as ``EmitError``; nothing is retried.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path, PurePosixPath

from folio.environment.exceptions import EmitError

logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"


def output_path_for(name: str, output_dir: str | Path, source_suffix: str = ".folio") -> Path:
    """Return where the page ``name`` is written under ``output_dir``.

    Raises:
        EmitError: If ``name`` would resolve outside ``output_dir``.
    """
    relative = PurePosixPath(name.replace("\\", "/"))
    if relative.is_absolute() or ".." in relative.parts or not relative.parts:
        raise EmitError("Page name escapes the output directory", name)

    filename = relative.name
    if source_suffix and filename.endswith(source_suffix) and filename != source_suffix:
        filename = filename[: -len(source_suffix)]
    if not filename.endswith(HTML_SUFFIX):
        filename += HTML_SUFFIX

    return Path(output_dir).joinpath(*relative.parts[:-1], filename)


def emit(html: str, path: str | Path, encoding: str = "utf-8") -> bool:
    """Write ``html`` to ``path``.

    Returns:
        True if the file was written, False if it already held these bytes.

    Raises:
        EmitError: If the directory or file cannot be written.
    """
    path = Path(path)
    data = html.encode(encoding)
    try:
        if path.is_file() and path.read_bytes() == data:
            logger.debug("Unchanged %s", path)
            return False

        path.parent.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        )
        tmp = Path(handle.name)
        try:
            with handle:
                handle.write(data)
            os.replace(tmp, path)
        finally:
            tmp.unlink(missing_ok=True)
    except OSError as exc:
        raise EmitError(f"Cannot write page ({exc.strerror or exc})", str(path)) from exc

    logger.debug("Wrote %s (%d bytes)", path, len(data))
    return True
