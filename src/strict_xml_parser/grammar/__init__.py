"""Grammar engine for strict XML parsing.

This package holds the scan cursor, the reference table and expansion
routines, the syntax error type, and the recursive-descent productions for
documents, elements and document type declarations.
"""

from .cursor import Cursor, find_declaration_end
from .doctype import DocumentTypeDecl
from .errors import END_OF_INPUT, XMLParserError, XMLSyntaxError
from .parser import Parser
from .references import (
    XML_ENTITIES,
    expand_char_references,
    expand_entities,
    expand_references,
    normalize_line_endings,
)

__all__ = [
    "Cursor",
    "find_declaration_end",
    "DocumentTypeDecl",
    "END_OF_INPUT",
    "XMLParserError",
    "XMLSyntaxError",
    "Parser",
    "XML_ENTITIES",
    "expand_char_references",
    "expand_entities",
    "expand_references",
    "normalize_line_endings",
]
