"""Tests for the scanning cursor and declaration scanning."""

import re

import pytest

from strict_xml_parser.grammar import Cursor, XMLSyntaxError, find_declaration_end


class TestCursorMatching:
    """Test literal and pattern matching."""

    def test_literal_match_consumes(self):
        """Test a matching literal is returned and consumed."""
        cur = Cursor("abc", "test")

        assert cur.try_literal("ab") == "ab"
        assert cur.offset == 2

    def test_literal_mismatch_keeps_position(self):
        """Test a failed literal match leaves the cursor in place."""
        cur = Cursor("abc", "test")
        cur.try_literal("ab")

        assert cur.try_literal("x") is None
        assert cur.offset == 2

    def test_regex_anchored_at_offset(self):
        """Test patterns only match at the current offset."""
        cur = Cursor("  abc", "test")

        assert cur.try_regex(re.compile("abc")) is None
        assert cur.try_regex(re.compile(" +")) == "  "
        assert cur.try_regex(re.compile("abc")) == "abc"
        assert cur.at_end

    def test_zero_length_match_succeeds(self):
        """Test an empty match is a success, not a failure."""
        cur = Cursor("abc", "test")

        assert cur.try_regex(re.compile("x*")) == ""
        assert cur.offset == 0

    def test_peek_does_not_consume(self):
        cur = Cursor("</a>", "test")

        assert cur.peek("</")
        assert not cur.peek("<a")
        assert cur.offset == 0

    def test_peek_char(self):
        """Test the next character and the end-of-input marker."""
        cur = Cursor("x", "test")

        assert cur.peek_char() == "x"
        cur.try_literal("x")
        assert cur.peek_char() == "end of input"

    def test_skip_to(self):
        cur = Cursor("abc\ndef", "test")

        assert cur.skip_to(5) == "abc\nd"
        assert cur.line == 2

    def test_skip_backwards_rejected(self):
        """Test the cursor never moves backwards."""
        cur = Cursor("abc", "test")
        cur.skip_to(2)

        with pytest.raises(ValueError):
            cur.skip_to(1)


class TestCursorPosition:
    """Test line and column tracking."""

    def test_initial_position(self):
        cur = Cursor("abc", "test")
        assert (cur.line, cur.column) == (1, 1)

    def test_mixed_line_breaks(self):
        """Test CRLF, LF and CR each count as a single line break."""
        cur = Cursor("a\r\nb\nc\rd", "test")
        cur.try_regex(re.compile("[^d]*"))

        assert cur.line == 4
        assert cur.column == 1

    def test_column_after_line_break(self):
        cur = Cursor("ab\ncd", "test")
        cur.try_regex(re.compile("ab\nc"))

        assert cur.line == 2
        assert cur.column == 2

    def test_column_after_carriage_return(self):
        cur = Cursor("ab\rcd", "test")
        cur.try_regex(re.compile("ab\rcd"))

        assert cur.line == 2
        assert cur.column == 3

    def test_fail_reports_position(self):
        """Test failures carry the current line, column and next character."""
        cur = Cursor("<a>\n  ?", "doc.xml")
        cur.try_regex(re.compile("<a>\n  "))

        with pytest.raises(XMLSyntaxError) as excinfo:
            cur.fail("element")

        error = excinfo.value
        assert (error.line, error.column) == (2, 3)
        assert error.actual == "?"
        assert error.source_name == "doc.xml"

    def test_fail_with_explicit_actual(self):
        cur = Cursor("abc", "test")

        with pytest.raises(XMLSyntaxError) as excinfo:
            cur.fail("'x'", "abc")

        assert excinfo.value.actual == "abc"

    def test_repr(self):
        assert repr(Cursor("abc", "test")) == (
            "Cursor(source_name='test', offset=0, line=1, column=1)"
        )


class TestFindDeclarationEnd:
    """Test the quote-aware declaration scan."""

    def test_quoted_terminator_skipped(self):
        text = '<!ENTITY x "a>b">rest'

        end = find_declaration_end(text, 8)

        assert end == 17
        assert text[end:] == "rest"

    def test_single_quotes(self):
        text = "<!ENTITY x 'a>b'>"
        assert find_declaration_end(text, 8) == len(text)

    def test_unterminated_quote(self):
        assert find_declaration_end('<!ENTITY x "a>b', 8) == -1

    def test_missing_terminator(self):
        assert find_declaration_end("<!ELEMENT br EMPTY", 9) == -1

    def test_custom_terminator(self):
        assert find_declaration_end("a ']' b] c", 0, "]") == 8
