"""Tests for the indentation parser."""

import pytest

from folio.environment.exceptions import ErrorCode, ParseError
from folio.lexer import tokenize
from folio.nodes import CodeSample, Element, Prose, Text
from folio.parser import Parser
from folio.parser.core import MAX_DEPTH


def parse(body: str):
    return Parser(tokenize(body)).parse()


class TestStructure:
    """Nesting by indentation."""

    def test_single_element_with_text(self):
        (node,) = parse("p Hello")
        assert isinstance(node, Element)
        assert node.tag == "p"
        assert node.children == (Text(lineno=1, col_offset=2, value="Hello"),)

    def test_nested_children(self):
        (ul,) = parse("ul\n  li one\n  li two")
        assert [child.tag for child in ul.children] == ["li", "li"]
        assert ul.children[1].children[0].value == "two"

    def test_siblings_at_top_level(self):
        nodes = parse("h1 A\n\np B\n")
        assert [node.tag for node in nodes] == ["h1", "p"]

    def test_dedent_closes_blocks(self):
        (div, footer) = parse("div\n  p\n    span x\nfooter")
        assert div.children[0].children[0].tag == "span"
        assert footer.tag == "footer"

    def test_block_expansion(self):
        (ul,) = parse("ul\n  li: a(href='/') Home")
        (li,) = ul.children
        (anchor,) = li.children
        assert anchor.tag == "a"
        assert anchor.attributes == (("href", "/"),)
        assert anchor.children[0].value == "Home"

    def test_children_under_expansion_attach_to_innermost(self):
        (li,) = parse("li: a(href='/')\n  span Home")
        assert li.children[0].children[0].tag == "span"

    def test_piped_text(self):
        (p,) = parse("p\n  | first line\n  | second <line>")
        assert [child.value for child in p.children] == ["first line", "second <line>"]

    def test_comment_drops_nested_lines(self):
        nodes = parse("// hidden\n  p not rendered\np shown")
        assert len(nodes) == 1
        assert nodes[0].children[0].value == "shown"

    def test_void_element(self):
        (img,) = parse('img(src="a.png" alt="A")')
        assert img.tag == "img"
        assert img.children == ()

    def test_empty_body(self):
        assert parse("") == ()
        assert parse("\n\n") == ()


class TestFilters:
    """``:markdown`` and ``:code`` literal bodies."""

    def test_markdown_body_is_dedented(self):
        (prose,) = parse(":markdown\n  # Title\n\n  Some *text*.\n    indented")
        assert isinstance(prose, Prose)
        assert prose.source == "# Title\n\nSome *text*.\n  indented"

    def test_markdown_inline_rest(self):
        (prose,) = parse(":markdown We'll look at **patterns**.")
        assert prose.source == "We'll look at **patterns**."

    def test_code_sample_attributes(self):
        (sample,) = parse(
            ':code(lang="rust" source="https://example.com/main.rs")\n  fn main() {}\n'
        )
        assert isinstance(sample, CodeSample)
        assert sample.code == "fn main() {}"
        assert sample.language == "rust"
        assert sample.source == "https://example.com/main.rs"

    def test_code_body_keeps_markup_literally(self):
        (sample,) = parse(":code\n  p.not-an-element | <b>\n  // not a comment\n  :markdown")
        assert sample.code == "p.not-an-element | <b>\n// not a comment\n:markdown"

    def test_code_body_may_contain_tabs(self):
        (sample,) = parse(":code\n  if x:\n  \treturn 1")
        assert sample.code == "if x:\n\treturn 1"

    def test_blank_lines_inside_body_kept_trailing_dropped(self):
        nodes = parse(":code\n  a\n\n  b\n\n\np after")
        assert nodes[0].code == "a\n\nb"
        assert nodes[1].tag == "p"

    def test_filter_nested_in_element(self):
        (section,) = parse("section\n  :markdown\n    Hi\n  p after")
        assert isinstance(section.children[0], Prose)
        assert section.children[1].tag == "p"

    @pytest.mark.parametrize("separator", ["\x0c", "\u2028"])
    def test_code_body_keeps_unicode_line_separators(self, separator):
        nodes = parse(f":code\n  a{separator}b('x')\n  c\np after")
        assert nodes[0].code == f"a{separator}b('x')\nc"
        assert nodes[1].tag == "p"


class TestErrors:
    """Structural errors carry codes and locations."""

    def test_tab_indentation(self):
        with pytest.raises(ParseError) as exc_info:
            parse("div\n\tp")
        assert exc_info.value.code is ErrorCode.TAB_INDENT
        assert exc_info.value.lineno == 2

    def test_inconsistent_indentation(self):
        with pytest.raises(ParseError) as exc_info:
            parse("div\n    p one\n  p two")
        assert exc_info.value.code is ErrorCode.INCONSISTENT_INDENT
        assert exc_info.value.lineno == 3
        assert exc_info.value.col_offset == 2
        assert "4 spaces" in exc_info.value.suggestion

    def test_unexpected_indentation_under_text(self):
        with pytest.raises(ParseError) as exc_info:
            parse("p\n  | a\n    | b")
        assert exc_info.value.code is ErrorCode.UNEXPECTED_INDENT
        assert exc_info.value.lineno == 3

    def test_void_element_with_children(self):
        with pytest.raises(ParseError) as exc_info:
            parse("br\n  | text")
        assert exc_info.value.code is ErrorCode.UNEXPECTED_INDENT

    def test_void_element_with_text(self):
        with pytest.raises(ParseError) as exc_info:
            parse("hr rule")
        assert exc_info.value.code is ErrorCode.UNEXPECTED_INDENT

    def test_unknown_filter_suggests_close_match(self):
        with pytest.raises(ParseError) as exc_info:
            parse(":markdwn\n  text")
        assert exc_info.value.code is ErrorCode.UNKNOWN_FILTER
        assert exc_info.value.suggestion == "Did you mean ':markdown'?"

    def test_unknown_code_attribute(self):
        with pytest.raises(ParseError) as exc_info:
            parse(':code(style="x")\n  a')
        assert exc_info.value.code is ErrorCode.UNKNOWN_FILTER

    def test_markdown_rejects_attributes(self):
        with pytest.raises(ParseError):
            parse(':markdown(lang="en")\n  a')

    def test_expansion_into_text_rejected(self):
        with pytest.raises(ParseError) as exc_info:
            parse("li: | text")
        assert exc_info.value.code is ErrorCode.MALFORMED_TAG

    def test_nesting_depth_is_capped(self):
        body = "\n".join("  " * level + "div" for level in range(MAX_DEPTH + 1))
        with pytest.raises(ParseError) as exc_info:
            parse(body)
        assert exc_info.value.code is ErrorCode.NESTING_TOO_DEEP
        assert exc_info.value.lineno == MAX_DEPTH + 1
        assert exc_info.value.col_offset == 2 * MAX_DEPTH

    def test_block_expansion_counts_toward_depth(self):
        with pytest.raises(ParseError) as exc_info:
            parse(": ".join(["span"] * (MAX_DEPTH + 1)))
        assert exc_info.value.code is ErrorCode.NESTING_TOO_DEEP


class TestTree:
    """Walking parsed nodes."""

    def test_deepest_allowed_nesting(self):
        body = "\n".join("  " * level + "div" for level in range(MAX_DEPTH))
        (root,) = parse(body)
        assert sum(1 for _ in root.walk()) == MAX_DEPTH

    def test_walk_in_document_order(self):
        (root,) = parse("section\n  h1 Title\n  ul\n    li one\n  p end")
        tags = [node.tag for node in root.walk() if isinstance(node, Element)]
        assert tags == ["section", "h1", "ul", "li", "p"]

    def test_location_is_one_based(self):
        (root,) = parse("div\n  p a")
        assert root.location == "1:1"
        assert root.children[0].location == "2:3"
