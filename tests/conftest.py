"""Pytest configuration and fixtures for folio tests."""

import pytest

from folio import DictLoader, Environment
from folio.environment import terminal


@pytest.fixture(autouse=True)
def no_colors(monkeypatch):
    """Render diagnostics without ANSI codes unless a test opts in."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def env():
    """Create a basic folio Environment."""
    return Environment()


@pytest.fixture
def env_with_loader():
    """Create a folio Environment with a DictLoader and sample pages."""
    loader = DictLoader(
        {
            "index.folio": (
                "---\n"
                "title: Home\n"
                "---\n"
                "h1 Welcome\n"
                "p Start with the guides.\n"
            ),
            "guides/diesel.folio": (
                "---\n"
                "title: Composing Applications with Diesel\n"
                "section: guides\n"
                "---\n"
                ".guide\n"
                "  :markdown\n"
                "    We'll look at **patterns**.\n"
            ),
            "broken.folio": "div\n    p one\n  p two\n",
        }
    )
    return Environment(loader=loader)


@pytest.fixture
def site_tree(tmp_path):
    """Write a small source tree and return ``(source_dir, output_dir)``."""
    source = tmp_path / "content"
    (source / "guides").mkdir(parents=True)
    (source / "index.folio").write_text("---\ntitle: Home\n---\nh1 Welcome\n")
    (source / "guides" / "diesel.folio").write_text(
        "---\n"
        "title: Composing Applications with Diesel\n"
        "---\n"
        ":markdown\n"
        "  We'll look at **patterns**.\n"
        ":code(lang=\"rust\" source=\"https://example.com/main.rs\")\n"
        "  fn main() { if a < b { run(); } }\n"
    )
    (source / "notes.txt").write_text("not a page")
    return source, tmp_path / "public"


def assert_contains(html: str, *expected_parts: str) -> None:
    """Assert rendered HTML contains all expected parts.

    Args:
        html: The rendered output.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in html, (
            f"Rendered output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {html!r}"
        )
