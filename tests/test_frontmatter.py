"""Tests for front-matter scanning."""

import pytest

from folio.environment.exceptions import ErrorCode, ParseError
from folio.frontmatter import split_front_matter


class TestSplit:
    """Splitting metadata from the body."""

    def test_no_front_matter(self):
        front = split_front_matter("p Hello\n")
        assert front.metadata == ()
        assert front.body == "p Hello\n"
        assert front.body_start == 1

    def test_metadata_in_source_order(self):
        front = split_front_matter("---\ntitle: Intro\nsection: guides\n---\np Hi")
        assert front.metadata == (("title", "Intro"), ("section", "guides"))
        assert front.get("title") == "Intro"
        assert front.get("missing", "fallback") == "fallback"

    def test_body_start_counts_fence_lines(self):
        front = split_front_matter("---\ntitle: A\n---\np x\np y")
        assert front.body == "p x\np y"
        assert front.body_start == 4

    def test_leading_blank_lines_before_fence(self):
        front = split_front_matter("\n\n---\ntitle: A\n---\np x")
        assert front.get("title") == "A"
        assert front.body_start == 6

    def test_value_keeps_colons(self):
        front = split_front_matter("---\ntitle: Diesel: a guide\n---\n")
        assert front.get("title") == "Diesel: a guide"

    @pytest.mark.parametrize("raw", ['"A: B"', "'A: B'"])
    def test_quotes_are_stripped(self, raw):
        front = split_front_matter(f"---\ntitle: {raw}\n---\n")
        assert front.get("title") == "A: B"

    def test_comments_and_blank_lines_ignored(self):
        front = split_front_matter("---\n# draft\n\ntitle: A\n---\n")
        assert front.metadata == (("title", "A"),)

    def test_empty_value(self):
        front = split_front_matter("---\ntitle:\n---\n")
        assert front.get("title") == ""

    def test_empty_front_matter(self):
        front = split_front_matter("---\n---\np x")
        assert front.metadata == ()
        assert front.body == "p x"
        assert front.body_start == 3


class TestErrors:
    """Malformed front-matter raises ParseError with a line number."""

    def test_unclosed_fence(self):
        with pytest.raises(ParseError) as exc_info:
            split_front_matter("---\ntitle: A\np Hello\n")
        assert exc_info.value.code is ErrorCode.UNCLOSED_FRONT_MATTER
        assert exc_info.value.lineno == 1
        assert exc_info.value.suggestion

    def test_line_without_colon(self):
        with pytest.raises(ParseError) as exc_info:
            split_front_matter("---\ntitle: A\nnonsense\n---\n")
        assert exc_info.value.code is ErrorCode.INVALID_FRONT_MATTER
        assert exc_info.value.lineno == 3

    def test_empty_key(self):
        with pytest.raises(ParseError) as exc_info:
            split_front_matter("---\n: value\n---\n")
        assert exc_info.value.code is ErrorCode.INVALID_FRONT_MATTER
        assert "empty" in exc_info.value.message

    def test_duplicate_key(self):
        with pytest.raises(ParseError) as exc_info:
            split_front_matter("---\ntitle: A\ntitle: B\n---\n")
        assert exc_info.value.code is ErrorCode.INVALID_FRONT_MATTER
        assert exc_info.value.lineno == 3
        assert "title" in exc_info.value.message


class TestLineHandling:
    """Line splitting and encoding artefacts."""

    def test_byte_order_mark_before_fence(self):
        front = split_front_matter("\ufeff---\ntitle: T\n---\np x")
        assert front.get("title") == "T"
        assert front.body == "p x"
        assert front.body_start == 4

    def test_byte_order_mark_without_front_matter(self):
        front = split_front_matter("\ufeffp x")
        assert front.body == "p x"

    def test_separator_characters_stay_in_value(self):
        front = split_front_matter("---\ntitle: a\u2028b\x0cc\n---\np x")
        assert front.get("title") == "a\u2028b\x0cc"
        assert front.body_start == 4
