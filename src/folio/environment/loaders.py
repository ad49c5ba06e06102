"""Page loaders for the folio environment.

Loaders provide page source to the Environment. They implement
`get_source(name)` returning `(source, filename)` and `list_pages()`.

Built-in Loaders:
- `FileSystemLoader`: Load from one or more source directories
- `DictLoader`: Load from an in-memory dictionary (tests, embedded pages)
- `ChoiceLoader`: Try multiple loaders in order (overrides over defaults)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class GitLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            blob = repo.blob_at("HEAD", name)
            if blob is None:
                raise PageNotFoundError(f"Page '{name}' not found")
            return blob.data.decode("utf-8"), f"git:{name}"

        def list_pages(self) -> list[str]:
            return sorted(repo.paths_matching("*.folio"))
    ```

Thread-Safety:
All built-in loaders only read, so concurrent `get_source()` calls are safe.

"""

from __future__ import annotations

from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from folio.environment.exceptions import PageNotFoundError, SourceReadError

DEFAULT_SUFFIX = ".folio"

# How many page names a not-found message lists before truncating
_LISTED_PAGES = 10


def _not_found(name: str, known: list[str], where: str = "") -> PageNotFoundError:
    """Build a not-found error, suggesting the closest known page name."""
    message = f"Page '{name}' not found{where}"
    close = get_close_matches(name, known, n=1, cutoff=0.6)
    if close:
        return PageNotFoundError(f"{message}. Did you mean '{close[0]}'?")
    if known:
        listed = ", ".join(known[:_LISTED_PAGES])
        extra = len(known) - _LISTED_PAGES
        message += f". Available: {listed}" + (f" (+{extra} more)" if extra > 0 else "")
    return PageNotFoundError(message)


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def list_pages(self) -> list[str]: ...


class FileSystemLoader:
    """Load pages from filesystem directories.

    Searches one or more directories for pages by relative name. The first
    matching file wins, so a later directory acts as a fallback.

    Example:
            >>> loader = FileSystemLoader("content/")
            >>> source, filename = loader.get_source("guides/intro.folio")
            >>> filename
            'content/guides/intro.folio'
            >>> loader.list_pages()
            ['guides/intro.folio', 'index.folio']

    Raises:
        PageNotFoundError: If the page is in none of the directories.
        SourceReadError: If the file exists but cannot be read or decoded.

    """

    __slots__ = ("_encoding", "_paths", "_suffix")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
        suffix: str = DEFAULT_SUFFIX,
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding
        self._suffix = suffix

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def get_source(self, name: str) -> tuple[str, str]:
        """Read page source from the first directory that has it."""
        for base in self._paths:
            path = base / name
            if path.is_file():
                try:
                    return path.read_text(self._encoding), str(path)
                except (OSError, UnicodeDecodeError) as exc:
                    raise SourceReadError(f"Cannot read page source ({exc})", str(path)) from exc

        searched = ", ".join(str(p) for p in self._paths)
        raise _not_found(name, self.list_pages(), where=f" in: {searched}")

    def list_pages(self) -> list[str]:
        """List page names (POSIX-style, relative) across all directories."""
        pages: set[str] = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob(f"*{self._suffix}"):
                    if path.is_file():
                        pages.add(path.relative_to(base).as_posix())
        return sorted(pages)


class DictLoader:
    """Load pages from an in-memory dictionary.

    Maps page names to source strings. Useful for tests and generated pages.

    Note:
        Returns `None` as filename; error messages show `<page>` instead.

    Example:
            >>> loader = DictLoader({"intro.folio": "---\\ntitle: Intro\\n---\\nh1 Intro"})
            >>> env = Environment(loader=loader)
            >>> env.get_page("intro.folio").title
            'Intro'

    Raises:
        PageNotFoundError: If the name is not in the mapping.

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        try:
            return self._mapping[name], None
        except KeyError:
            raise _not_found(name, self.list_pages()) from None

    def list_pages(self) -> list[str]:
        return sorted(self._mapping)


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Example:
            >>> loader = ChoiceLoader([
            ...     FileSystemLoader("content/overrides/"),
            ...     FileSystemLoader("content/"),
            ... ])

    Raises:
        PageNotFoundError: If no loader has the page.
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except PageNotFoundError:
                continue
        raise PageNotFoundError(
            f"Page '{name}' not found in any of {len(self._loaders)} loaders"
        )

    def list_pages(self) -> list[str]:
        pages: set[str] = set()
        for loader in self._loaders:
            pages.update(loader.list_pages())
        return sorted(pages)
