"""Tests for the recursive-descent grammar engine."""

from typing import Any, List

import pytest

from strict_xml_parser.dom import DocumentFactory
from strict_xml_parser.grammar import Parser, XMLSyntaxError
from strict_xml_parser.shared import ParserConfig
from strict_xml_parser.tree import TreeBuilderFactory, XMLElement, XMLText


def parse(text: str, **kwargs: Any) -> List[XMLElement]:
    return Parser(text, TreeBuilderFactory(), **kwargs).parse()


def parse_error(text: str, **kwargs: Any) -> XMLSyntaxError:
    with pytest.raises(XMLSyntaxError) as excinfo:
        parse(text, **kwargs)
    return excinfo.value


class RecordingFactory(DocumentFactory):
    """Factory that logs every call and builds plain tuples/lists."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def create_element(self, tag_name: str) -> Any:
        self.calls.append(("create_element", tag_name))
        return {"tag": tag_name, "attributes": [], "children": []}

    def create_text_node(self, data: str) -> Any:
        self.calls.append(("create_text_node", data))
        return data

    def set_attribute(self, element: Any, name: str, value: str) -> None:
        self.calls.append(("set_attribute", element["tag"], name, value))
        element["attributes"].append((name, value))

    def append_child(self, parent: Any, child: Any) -> None:
        self.calls.append(("append_child", parent["tag"]))
        parent["children"].append(child)

    def tag_name(self, element: Any) -> str:
        return element["tag"]


class TestEmptyElements:
    """Test empty-element tags and attributes."""

    def test_self_closing_element(self):
        """Test a single self-closing element."""
        result = parse("<br/>")

        assert len(result) == 1
        assert isinstance(result[0], XMLElement)
        assert result[0].tag == "br"
        assert len(result[0].attributes) == 0

    def test_self_closing_element_with_space(self):
        """Test white space before the empty-element terminator."""
        result = parse("<br />")

        assert result[0].tag == "br"
        assert result[0].children == []

    def test_attributes(self):
        """Test double-quoted attributes keep their values and order."""
        result = parse('<input type="text"  name="foo" />')

        assert result[0].attributes == {"type": "text", "name": "foo"}
        assert list(result[0].attributes) == ["type", "name"]

    def test_single_quoted_attribute(self):
        """Test single-quoted attribute values."""
        result = parse("<div id='abcd' />")
        assert result[0].get_attribute("id") == "abcd"

    def test_space_around_equals(self):
        """Test optional white space around the equals sign."""
        result = parse('<div id = "abcd" />')
        assert result[0].get_attribute("id") == "abcd"

    def test_attribute_entity_reference(self):
        """Test references in attribute values are expanded."""
        result = parse('<div data-title="this &amp; that" />')
        assert result[0].get_attribute("data-title") == "this & that"

    def test_attribute_apos_reference(self):
        """Test the apostrophe entity is expanded in attribute values."""
        result = parse("<a title='it&apos;s &#x41;'/>")
        assert result[0].get_attribute("title") == "it's A"

    def test_attribute_keeps_line_endings(self):
        """Test attribute values are not line-ending normalized."""
        result = parse('<a title="one\r\ntwo\rthree"/>')
        assert result[0].get_attribute("title") == "one\r\ntwo\rthree"

    def test_empty_attribute_value(self):
        """Test an empty quoted value."""
        result = parse('<a title=""/>')
        assert result[0].get_attribute("title") == ""

    def test_duplicate_attribute_last_wins(self):
        """Test a repeated attribute name keeps the last value."""
        result = parse('<a x="1" x="2"/>')
        assert result[0].attributes == {"x": "2"}

    def test_unicode_names(self):
        """Test names outside ASCII."""
        result = parse('<café naïve="oui"/>')

        assert result[0].tag == "café"
        assert result[0].get_attribute("naïve") == "oui"


class TestMalformedTags:
    """Test syntax errors in start tags."""

    def test_missing_element_name(self):
        """Test a tag without a name."""
        error = parse_error("<>")

        assert error.expected == "element name"
        assert error.actual == ">"
        assert error.line == 1
        assert error.column == 2

    def test_invalid_start_tag(self):
        """Test a start tag interrupted by another tag."""
        error = parse_error("<div <p>")

        assert error.expected == "'>'"
        assert error.actual == "<"

    def test_missing_equals(self):
        """Test an attribute without an equals sign."""
        error = parse_error('<div class"shiny">')
        assert error.expected == "'='"
        assert error.actual == '"'

    def test_unquoted_value(self):
        """Test an unquoted attribute value."""
        error = parse_error("<div class=shiny>")

        assert error.expected == "quoted attribute value"
        assert error.actual == "s"
        assert error.column == 12

    def test_less_than_in_value(self):
        """Test a '<' inside a quoted value."""
        error = parse_error('<div class="sh<iny">')
        assert error.expected == "'\"'"
        assert error.actual == "<"

    def test_unterminated_single_quotes(self):
        """Test a single-quoted value that runs into the next tag."""
        error = parse_error("<div class='shiny> <p>")
        assert error.expected == "\"'\""
        assert error.actual == "<"

    def test_end_of_input_in_value(self):
        """Test end of input inside a quoted value."""
        error = parse_error('<div class="')
        assert error.actual == "end of input"

    def test_unterminated_element(self):
        """Test an element that is never closed."""
        error = parse_error("<strong>")

        assert error.expected == "'/>' or </strong>"
        assert error.actual == "end of input"
        assert error.line == 1
        assert error.column == 9


class TestContent:
    """Test element content."""

    def test_empty_content(self):
        """Test a start/end tag pair with nothing between."""
        result = parse("<strong></strong>")

        assert len(result) == 1
        assert result[0].tag == "strong"
        assert result[0].children == []

    def test_end_tag_with_space(self):
        """Test white space before the end tag's closing bracket."""
        result = parse("<a></a >")
        assert result[0].tag == "a"

    def test_text_content(self):
        """Test a single text child."""
        result = parse("<strong>bold!</strong>")
        child = result[0].first_child

        assert len(result[0].children) == 1
        assert isinstance(child, XMLText)
        assert child.data == "bold!"

    def test_entity_references(self):
        """Test predefined entities in text."""
        result = parse("<strong>bold &lt; smart</strong>")
        assert result[0].first_child.data == "bold < smart"

    def test_all_predefined_entities(self):
        """Test all five predefined entities."""
        result = parse("<p>&amp;&lt;&gt;&quot;&apos;</p>")
        assert result[0].text == "&<>\"'"

    def test_hex_character_reference(self):
        """Test hexadecimal character references."""
        result = parse("<div>6 &#xf7; 2 = 3</div>")
        assert result[0].first_child.data == "6 ÷ 2 = 3"

    def test_decimal_character_reference(self):
        """Test decimal character references."""
        result = parse("<div>6 &#247; 2 = 3</div>")
        assert result[0].first_child.data == "6 ÷ 2 = 3"

    def test_unknown_entity_passes_through(self):
        """Test an undefined entity is left as written."""
        result = parse("<p>&nbsp;&unknown;</p>")
        assert result[0].text == "&nbsp;&unknown;"

    def test_expansion_is_single_pass(self):
        """Test expanded text is not expanded again."""
        result = parse("<p>a &amp;lt; b</p>")
        assert result[0].text == "a &lt; b"

    def test_line_endings_normalized(self):
        """Test mixed line endings in text collapse to line feeds."""
        result = parse("<strong>bold\r\nbold\rbold\nbold</strong>")
        assert result[0].first_child.data == "bold\nbold\nbold\nbold"

    def test_nested_element(self):
        """Test an element child."""
        result = parse("<strong><br /></strong>")
        child = result[0].first_child

        assert len(result[0].children) == 1
        assert isinstance(child, XMLElement)
        assert child.tag == "br"

    def test_mixed_content(self):
        """Test text and elements interleaved keep document order."""
        result = parse("<div>Some <strong><em>strong</em></strong> words.</div>")
        div = result[0]

        assert len(result) == 1
        assert div.tag == "div"
        assert len(div.children) == 3
        assert div.children[0].data == "Some "
        assert div.children[1].tag == "strong"
        assert div.children[1].first_child.tag == "em"
        assert div.children[1].first_child.first_child.data == "strong"
        assert div.children[2].data == " words."

    def test_text_around_comment_is_two_nodes(self):
        """Test a comment splits character data into separate text nodes."""
        result = parse("<p>a<!-- c -->b</p>")

        assert [child.data for child in result[0].children] == ["a", "b"]

    def test_mismatched_end_tag(self):
        """Test an end tag naming a different element."""
        error = parse_error("<div>\n  <p>text</span></div>")

        assert error.expected == "'p'"
        assert error.actual == "span"
        assert error.line == 2
        assert error.column == 16


class TestDiscardedContent:
    """Test CDATA sections, processing instructions and comments."""

    @pytest.mark.parametrize("text", [
        "<div><![CDATA[<markup />]]></div>",
        "<div><![CDATA[\n\n<markup />\n\n  ]]></div>",
        "<div><![CDATA[a]b]]c]]]></div>",
        '<div><?custom-target info="foo" ?></div>',
        "<div><?pi\nspanning\rlines?></div>",
        "<div><!-- some comment --></div>",
        "<div><!-- a - b\n - c --></div>",
        "<div><!----></div>",
    ])
    def test_produces_no_nodes(self, text):
        """Test the construct is accepted without creating children."""
        result = parse(text)

        assert len(result) == 1
        assert result[0].children == []

    def test_malformed_cdata(self):
        """Test a CDATA section without its terminator."""
        error = parse_error("<div><![CDATA[<markup />] ]></div>")
        assert error.expected == "]]>"
        assert error.actual == "end of input"

    def test_malformed_pi(self):
        """Test a processing instruction without its terminator."""
        error = parse_error('<div><?custom-target info="foo" ></div>')
        assert error.expected == "?>"

    def test_malformed_comment(self):
        """Test a comment ending in '--->'."""
        error = parse_error("<div><!-- uh oh ---></div>")
        assert error.expected == "-->"
        assert error.actual == "-"

    def test_cdata_lines_are_counted(self):
        """Test line breaks inside a CDATA section advance the line number."""
        error = parse_error("<div><![CDATA[\n\n]]></dvi>")

        assert error.line == 3
        assert error.column == 9


class TestDocumentStructure:
    """Test the document-level production."""

    def test_multiple_roots(self):
        """Test several root elements are returned in order."""
        result = parse('<br id="a" /><br id="b" /><br id="c" />')
        assert [root.get_attribute("id") for root in result] == ["a", "b", "c"]

    def test_multiple_roots_with_space(self):
        """Test white space around root elements."""
        result = parse('  <br id="a" />\n  <br id="b" />\n  <br id="c" />\n')
        assert len(result) == 3

    def test_xml_declaration(self):
        """Test an XML declaration and DOCTYPE in the prolog."""
        result = parse('<?xml version="1.0"?>\n<!DOCTYPE html>\n<html>\n</html>')

        assert len(result) == 1
        assert result[0].tag == "html"

    def test_prolog_comments(self):
        """Test comments before and after the DOCTYPE."""
        result = parse("<!-- a --><!DOCTYPE html><!-- b -->\n<html/>")
        assert result[0].tag == "html"

    def test_trailing_misc(self):
        """Test comments and PIs after the root element."""
        result = parse("<html>\n</html>\n<!-- the end --><?done?>\n")

        assert len(result) == 1
        assert result[0].tag == "html"

    def test_trailing_text(self):
        """Test unparsed text after the root element."""
        error = parse_error("<html>\n</html>\nthe end!")

        assert error.expected == (
            "element, comment, processing instruction, or end of document"
        )
        assert error.actual == "t"
        assert error.line == 3
        assert error.column == 1
        assert str(error) == (
            "XML syntax error at line 3, column 1 of <INPUT>: expecting element, "
            "comment, processing instruction, or end of document, but encountered 't'"
        )

    def test_stray_end_tag(self):
        """Test an end tag with no open element."""
        error = parse_error("<a/></a>")
        assert error.actual == "<"

    def test_empty_document(self):
        """Test a document without any element."""
        error = parse_error("")

        assert error.expected == "element"
        assert error.actual == "end of input"
        assert (error.line, error.column) == (1, 1)

    def test_only_misc(self):
        """Test a document holding only a comment."""
        error = parse_error("<!-- nothing -->\n")

        assert error.expected == "element"
        assert error.line == 2

    def test_doctype_after_root(self):
        """Test a DOCTYPE is not accepted after the document element."""
        error = parse_error("<a/><!DOCTYPE a>")
        assert error.expected == "element name"
        assert error.actual == "!"


class TestParserConfiguration:
    """Test source naming, nesting limits and reuse."""

    def test_default_source_name(self):
        """Test the placeholder source name."""
        error = parse_error("<a>")
        assert error.source_name == "<INPUT>"

    def test_explicit_source_name(self):
        """Test the source name passed to the parser."""
        error = parse_error("<a>", source_name="doc.xml")

        assert error.source_name == "doc.xml"
        assert "of doc.xml:" in str(error)

    def test_configured_source_name(self):
        """Test the source name taken from configuration."""
        error = parse_error("<a>", config=ParserConfig(source_name="configured"))
        assert error.source_name == "configured"

    def test_nesting_within_limit(self):
        """Test nesting exactly at the limit."""
        result = parse("<a><b><c/></b></a>", config=ParserConfig(max_depth=3))
        assert result[0].find("c") is not None

    def test_nesting_beyond_limit(self):
        """Test nesting beyond the limit raises a syntax error."""
        error = parse_error(
            "<a><b><c><d/></c></b></a>", config=ParserConfig(max_depth=3)
        )

        assert error.expected == "at most 3 levels of element nesting"
        assert error.actual == "d"

    def test_default_limit_allows_deep_documents(self):
        """Test the default limit accepts reasonably deep nesting."""
        depth = 150
        text = "<n>" * depth + "</n>" * depth
        result = parse(text)
        assert result[0].find_all("n")[-1].get_depth() == depth - 1

    def test_high_limit_allows_deep_documents(self):
        """Test a raised limit admits nesting beyond the interpreter's recursion limit."""
        depth = 3000
        text = "<n>" * depth + "</n>" * depth

        result = parse(text, config=ParserConfig(max_depth=5000))

        deepest = result[0].find_all("n")[-1]
        assert deepest.get_depth() == depth - 1
        assert deepest.children == []

    def test_high_limit_exceeded(self):
        """Test a raised limit still ends in a syntax error, not a RecursionError."""
        depth = 1001
        text = "<a>" * depth + "</a>" * depth

        error = parse_error(text, config=ParserConfig(max_depth=1000))

        assert error.expected == "at most 1000 levels of element nesting"
        assert error.column == 3003

    def test_deep_mismatch_reported(self):
        """Test end-tag checks at depth report the innermost open element."""
        text = "<a>" * 900 + "<b></c>" + "</a>" * 900

        error = parse_error(text, config=ParserConfig(max_depth=1000))

        assert error.expected == "'b'"
        assert error.actual == "c"

    def test_parse_is_repeatable(self):
        """Test one parser instance can parse more than once."""
        parser = Parser("<a><b/></a>", TreeBuilderFactory())

        first = parser.parse()
        second = parser.parse()

        assert first[0] is not second[0]
        assert first[0].to_dict() == second[0].to_dict()

    def test_rejects_bytes(self):
        """Test the source must already be text."""
        with pytest.raises(TypeError):
            Parser(b"<a/>", TreeBuilderFactory())

    def test_error_class_on_parser(self):
        """Test the error class is reachable from the parser class."""
        assert Parser.XMLSyntaxError is XMLSyntaxError


class TestFactoryProtocol:
    """Test the calls made into the document factory."""

    def test_call_sequence(self):
        """Test attributes are set before content is appended, in order."""
        factory = RecordingFactory()
        roots = Parser('<a x="1" y="2">t<b/></a>', factory).parse()

        assert factory.calls == [
            ("create_element", "a"),
            ("set_attribute", "a", "x", "1"),
            ("set_attribute", "a", "y", "2"),
            ("create_text_node", "t"),
            ("create_element", "b"),
            ("append_child", "a"),
            ("append_child", "a"),
        ]
        assert roots[0]["children"] == ["t", {"tag": "b", "attributes": [], "children": []}]

    def test_doctype_hook_default_is_ignored(self):
        """Test a factory without a DOCTYPE hook still parses a DOCTYPE."""
        factory = RecordingFactory()
        roots = Parser("<!DOCTYPE a><a/>", factory).parse()
        assert roots[0]["tag"] == "a"

    def test_factory_errors_propagate(self):
        """Test exceptions raised by the factory are not wrapped."""
        class FailingFactory(RecordingFactory):
            def create_text_node(self, data: str) -> Any:
                raise RuntimeError("no text allowed")

        with pytest.raises(RuntimeError, match="no text allowed"):
            Parser("<a>text</a>", FailingFactory()).parse()
