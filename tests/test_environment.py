"""Tests for the Environment facade and page loaders."""

import pytest

from folio import (
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    PageNotFoundError,
    ParseError,
    SourceReadError,
)
from folio.nodes import Element, Prose


class TestParse:
    """Environment.parse and from_string."""

    def test_page_fields(self, env):
        page = env.parse("---\ntitle: Intro\nsection: guides\n---\np Hi", name="intro.folio")
        assert page.name == "intro.folio"
        assert page.filename is None
        assert page.title == "Intro"
        assert page.meta == {"title": "Intro", "section": "guides"}
        assert isinstance(page.body[0], Element)

    def test_default_title(self):
        env = Environment(default_title="Untitled")
        assert env.from_string("p x").title == "Untitled"

    def test_empty_title_is_kept(self):
        env = Environment(default_title="Untitled")
        assert env.from_string("---\ntitle:\n---\n").title == ""

    def test_body_line_numbers_include_front_matter(self, env):
        page = env.from_string("---\ntitle: A\n---\n\np x\n:markdown\n  y")
        assert page.body[0].lineno == 5
        assert isinstance(page.body[1], Prose)
        assert page.body[1].lineno == 6

    def test_parse_error_gets_location_and_snippet(self, env):
        with pytest.raises(ParseError) as exc_info:
            env.parse("---\ntitle: A\n---\ndiv\n\tp", name="a.folio", filename="content/a.folio")
        error = exc_info.value
        assert error.code is ErrorCode.TAB_INDENT
        assert error.lineno == 5
        assert error.filename == "content/a.folio"
        assert error.location == "content/a.folio:5:1"
        assert error.snippet is not None
        assert error.snippet.error_line == 5

    def test_parse_error_falls_back_to_name(self, env):
        with pytest.raises(ParseError) as exc_info:
            env.parse("p(", name="a.folio")
        assert exc_info.value.location.startswith("a.folio:1:")

    def test_front_matter_error_location(self, env):
        with pytest.raises(ParseError) as exc_info:
            env.parse("---\ntitle: A\n", name="a.folio")
        assert exc_info.value.code is ErrorCode.UNCLOSED_FRONT_MATTER
        assert exc_info.value.location == "a.folio:1:1"

    @pytest.mark.parametrize("separator", ["\x0c", "\u2028"])
    def test_code_sample_payload_keeps_line_separators(self, env, separator):
        html = env.render_string(f":code\n  a{separator}b\n")
        assert f'<div class="code-sample"><pre><code>a{separator}b</code></pre></div>' in html

    def test_byte_order_mark_before_front_matter(self, env):
        page = env.from_string("\ufeff---\ntitle: Hi\n---\np x")
        assert page.title == "Hi"
        assert page.body[0].lineno == 4


class TestGetPage:
    """Loading pages by name."""

    def test_get_page(self, env_with_loader):
        page = env_with_loader.get_page("guides/diesel.folio")
        assert page.title == "Composing Applications with Diesel"
        assert page.meta["section"] == "guides"

    def test_render_page(self, env_with_loader):
        html = env_with_loader.render_page("guides/diesel.folio")
        assert '<div class="guide"><p>We\'ll look at <strong>patterns</strong>.</p></div>' in html

    def test_list_pages(self, env_with_loader):
        assert env_with_loader.list_pages() == [
            "broken.folio",
            "guides/diesel.folio",
            "index.folio",
        ]

    def test_broken_page_raises(self, env_with_loader):
        with pytest.raises(ParseError) as exc_info:
            env_with_loader.get_page("broken.folio")
        assert exc_info.value.code is ErrorCode.INCONSISTENT_INDENT
        assert exc_info.value.location == "broken.folio:3:3"

    def test_no_loader(self, env):
        with pytest.raises(RuntimeError, match="No loader"):
            env.get_page("a.folio")
        assert env.list_pages() == []


class TestDictLoader:
    """In-memory loader."""

    def test_suggestion_for_typo(self):
        loader = DictLoader({"index.folio": "p x"})
        with pytest.raises(PageNotFoundError, match="Did you mean 'index.folio'"):
            loader.get_source("indx.folio")

    def test_lists_available_when_no_match(self):
        loader = DictLoader({"a.folio": "", "b.folio": ""})
        with pytest.raises(PageNotFoundError, match="Available: a.folio, b.folio"):
            loader.get_source("zzzzzzzzzz")


class TestFileSystemLoader:
    """Directory loader."""

    def test_get_source_and_list(self, site_tree):
        source, _ = site_tree
        loader = FileSystemLoader(source)
        text, filename = loader.get_source("index.folio")
        assert text.startswith("---")
        assert filename == str(source / "index.folio")
        assert loader.list_pages() == ["guides/diesel.folio", "index.folio"]

    def test_custom_suffix(self, site_tree):
        source, _ = site_tree
        assert FileSystemLoader(source, suffix=".txt").list_pages() == ["notes.txt"]

    def test_missing_page(self, tmp_path):
        with pytest.raises(PageNotFoundError):
            FileSystemLoader(tmp_path).get_source("missing.folio")

    def test_missing_page_suggests_close_name(self, tmp_path):
        (tmp_path / "install.folio").write_text("p x", encoding="utf-8")
        with pytest.raises(PageNotFoundError, match="Did you mean 'install.folio'"):
            FileSystemLoader(tmp_path).get_source("instal.folio")

    def test_missing_directory_lists_nothing(self, tmp_path):
        assert FileSystemLoader(tmp_path / "nope").list_pages() == []

    def test_undecodable_source(self, tmp_path):
        (tmp_path / "bad.folio").write_bytes(b"p \xff\xfe")
        with pytest.raises(SourceReadError) as exc_info:
            FileSystemLoader(tmp_path).get_source("bad.folio")
        assert exc_info.value.path == str(tmp_path / "bad.folio")
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_first_directory_wins(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        first.mkdir()
        second.mkdir()
        (first / "p.folio").write_text("p first")
        (second / "p.folio").write_text("p second")
        (second / "q.folio").write_text("p only second")
        loader = FileSystemLoader([first, second])
        assert loader.get_source("p.folio")[0] == "p first"
        assert loader.list_pages() == ["p.folio", "q.folio"]


class TestChoiceLoader:
    """Fallback across loaders."""

    def test_override_then_fallback(self):
        loader = ChoiceLoader(
            [DictLoader({"a.folio": "p override"}), DictLoader({"a.folio": "p base", "b.folio": ""})]
        )
        assert loader.get_source("a.folio")[0] == "p override"
        assert loader.get_source("b.folio")[0] == ""
        assert loader.list_pages() == ["a.folio", "b.folio"]

    def test_missing_everywhere(self):
        with pytest.raises(PageNotFoundError, match="any of 1 loaders"):
            ChoiceLoader([DictLoader({})]).get_source("x.folio")
