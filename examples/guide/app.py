"""Guide -- build a small documentation site from disk.

Pages live under ``content/``; the layout adds the site name to every
title. Output goes to ``$FOLIO_EXAMPLE_OUTPUT`` when set, otherwise to a
fresh temporary directory.

Run:
    python app.py
"""

import os
import tempfile
from pathlib import Path

from folio import BuildConfig, build_site

here = Path(__file__).parent
output_dir = Path(
    os.environ.get("FOLIO_EXAMPLE_OUTPUT") or tempfile.mkdtemp(prefix="folio-guide-")
)

config = BuildConfig(
    source_dir=here / "content",
    output_dir=output_dir,
    layout_path=here / "layout.html",
)
report = build_site(config)

pages = {
    result.name: result.output.read_text(encoding="utf-8")
    for result in report.results
    if result.ok
}


def main() -> None:
    print(report.summary())
    for result in report.results:
        print(f"  {result.name} -> {result.output}")


if __name__ == "__main__":
    main()
