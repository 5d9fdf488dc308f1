"""Tests for message rendering and whitespace normalization."""

import pytest

from applog.errors import FormatFailure
from applog.text import beautify, describe_exception, format_entry, render


class TestBeautify:
    def test_trims_outer_whitespace(self):
        assert beautify("  \n hello \n\n") == "hello"

    def test_tabs_become_two_spaces(self):
        assert beautify("a\tb") == "a  b"

    def test_trailing_spaces_removed_per_line(self):
        assert beautify("one   \ntwo \nthree") == "one\ntwo\nthree"

    def test_blank_line_runs_collapse_to_one(self):
        assert beautify("a\n\n\n\nb") == "a\n\nb"

    def test_single_blank_line_kept(self):
        assert beautify("a\n\nb") == "a\n\nb"

    def test_crlf_normalized(self):
        assert beautify("a\r\nb\r\n\r\n\r\n\r\nc") == "a\nb\n\nc"

    def test_indent_every_non_blank_line(self):
        assert beautify("a\n  b\n\nc", indent="    ") == "    a\n      b\n\n    c"

    def test_comments_kept_by_default(self):
        assert beautify("x = 1 // note") == "x = 1 // note"

    def test_strip_line_comments(self):
        text = "-- header\nSELECT 1 -- trailing\nFROM t // cpp\n"
        assert beautify(text, strip_comments=True) == "SELECT 1\nFROM t"

    def test_strip_block_comments(self):
        text = "a\n/* whole\nline */\nb /* inline */ c"
        assert beautify(text, strip_comments=True) == "a\nbc"


class TestRender:
    def test_no_args_leaves_braces_alone(self):
        assert render("{0} {not-a-field}", ()) == "{0} {not-a-field}"

    def test_positional_placeholders(self):
        assert render("{0} of {1}", (3, 10)) == "3 of 10"

    def test_repeated_and_reordered(self):
        assert render("{1}-{0}-{1}", ("a", "b")) == "b-a-b"

    def test_missing_index_raises_format_failure(self):
        with pytest.raises(FormatFailure):
            render("{0} {2}", ("a", "b"))

    def test_malformed_format_raises_format_failure(self):
        with pytest.raises(FormatFailure):
            render("{0", ("a",))

    @pytest.mark.parametrize(
        "fmt, args",
        [
            ("{0.foo}", (3,)),
            ("{0[1]}", (3,)),
            ("{0:%Y}", ("text",)),
        ],
    )
    def test_bad_field_access_raises_format_failure(self, fmt, args):
        with pytest.raises(FormatFailure):
            render(fmt, args)

    def test_redacted_exception_is_message_only(self):
        assert render("failed: {0}", (ValueError("bad input"),), True) == "failed: bad input"

    def test_unredacted_exception_includes_traceback(self):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError as exc:
            text = render("failed: {0}", (exc,), False)
        assert text.startswith("failed: Traceback (most recent call last):")
        assert text.endswith("RuntimeError: kaboom")


class TestDescribeException:
    def test_empty_message_falls_back_to_type_name(self):
        assert describe_exception(KeyboardInterrupt(), redact=True) == "KeyboardInterrupt"

    def test_unraised_exception_without_redaction(self):
        assert describe_exception(ValueError("x"), redact=False) == "ValueError: x"


class TestFormatEntry:
    def test_first_line_flush_left_continuations_indented(self):
        text = "first line  \n\tsecond\t \n\n\n\nthird   "
        assert format_entry(text, ()) == "first line\n      second\n\n    third"

    def test_single_line(self):
        assert format_entry("  plain  ", ()) == "plain"
