"""Command-line entry point: ``folio build SOURCE OUTPUT``.

Exit codes:
    0  every page built
    1  at least one page failed
    2  usage or configuration error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from folio import __version__
from folio.config import BuildConfig
from folio.environment import FolioError, LayoutError, terminal
from folio.environment.loaders import DEFAULT_SUFFIX
from folio.site import Site

logger = logging.getLogger("folio.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("source", type=Path, help="Directory holding the page sources")
    parser.add_argument("output", type=Path, help="Directory where HTML pages are written")
    parser.add_argument(
        "--suffix",
        default=DEFAULT_SUFFIX,
        help=f"Suffix identifying page sources (default: {DEFAULT_SUFFIX})",
    )
    parser.add_argument(
        "--layout",
        type=Path,
        default=None,
        help="HTML layout with {{ title }} and {{ content }} slots",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Maximum number of pages built in parallel",
    )
    parser.add_argument(
        "--default-title",
        default="",
        help="Title for pages whose front-matter has none",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    verbosity.add_argument("--quiet", action="store_true", help="Only log errors")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Build static HTML documentation pages from folio sources.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Build every page under SOURCE")
    _add_build_arguments(build_parser)

    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _run_build(args: argparse.Namespace) -> int:
    if not args.source.is_dir():
        print(f"folio: source directory not found: {args.source}", file=sys.stderr)
        return EXIT_USAGE

    try:
        config = BuildConfig(
            source_dir=args.source,
            output_dir=args.output,
            source_suffix=args.suffix,
            layout_path=args.layout,
            max_workers=args.workers,
            default_title=args.default_title,
        )
        site = Site(config)
    except ValueError as e:
        print(f"folio: {e}", file=sys.stderr)
        return EXIT_USAGE
    except LayoutError as e:
        print(e.format_compact(), file=sys.stderr)
        return EXIT_USAGE

    report = site.build()
    for result in report.failed:
        error: FolioError = result.error  # type: ignore[assignment]
        header = terminal.paint("location", result.name)
        print(f"{header}:\n{error.format_compact()}", file=sys.stderr)

    if not report.results:
        logger.warning("No pages matching *%s under %s", config.source_suffix, config.source_dir)
    return EXIT_OK if report.ok else EXIT_FAILED


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)
    if args.command == "build":
        return _run_build(args)
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
