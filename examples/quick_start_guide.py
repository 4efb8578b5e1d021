#!/usr/bin/env python3
"""
Quick Start Guide for the Strict XML Parser.

This example walks through parsing a document, handling a syntax error, and
building trees for ElementTree instead of the built-in node model.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from strict_xml_parser import ParserConfig, StrictXMLParser, XMLSyntaxError, parse_string
from strict_xml_parser.api import ElementTreeFactory

BOOK = """<?xml version="1.0"?>
<!DOCTYPE book SYSTEM "book.dtd">
<book id="123" genre="fiction">
  <title>My Book</title>
  <author>John Doe</author>
  <price currency="USD">19.99</price>
  <note>Pages 10 &amp; 11 are &#x2018;missing&#x2019;</note>
</book>
"""

BROKEN = """<book>
  <title>My Book</titel>
</book>
"""


def quick_start_example():
    """Parse a well-formed document and walk the result."""
    print("QUICK START - Strict XML Parser")
    print("=" * 45)

    print("\nStep 1: Parsing a document")
    print("-" * 30)

    fragment = parse_string(BOOK, source_name="book.xml")
    book = fragment.root

    print(f"Document type: {fragment.doctype.name} ({fragment.doctype.system_id})")
    print(f"Root element: <{book.tag}> with attributes {book.attributes}")
    print(f"Total elements: {fragment.total_elements}")
    for child in book.elements:
        print(f"  {child.get_path()}: {child.text!r}")


def error_handling_example():
    """Show the location reported for a malformed document."""
    print("\nStep 2: Syntax errors")
    print("-" * 30)

    try:
        parse_string(BROKEN, source_name="broken.xml")
    except XMLSyntaxError as e:
        print(str(e))
        print(f"  line={e.line} column={e.column} expected={e.expected} actual={e.actual}")


def factory_example():
    """Build ElementTree elements with a reusable configured parser."""
    print("\nStep 3: Other tree libraries")
    print("-" * 30)

    parser = StrictXMLParser(
        ParserConfig(source_name="inline", max_depth=10),
        factory_class=ElementTreeFactory,
    )
    roots = parser.parse_string("<p>Some <b>bold</b> text</p>")

    paragraph = roots[0]
    print(f"ElementTree text={paragraph.text!r} tail={paragraph[0].tail!r}")
    print(f"Parses so far: {parser.parse_count}")


if __name__ == "__main__":
    quick_start_example()
    error_handling_example()
    factory_example()
