"""Strict XML Parser.

A recursive-descent parser for a practical subset of XML: elements,
attributes, character data, entity and character references, comments,
processing instructions, CDATA sections and a prolog with an optional
DOCTYPE. Well-formedness violations raise :class:`XMLSyntaxError` with the
line and column of the failure; there is no error recovery.

Progressive API Disclosure:
- Level 1: Simple functions - parse_string(), parse_file()
- Level 2: Configured parser - StrictXMLParser class
- Level 3: Grammar engine with a custom node factory - Parser, DocumentFactory
"""

__version__ = "0.1.0"
__author__ = "Strict XML Parser Team"

from .api import StrictXMLParser, parse_file, parse_string
from .dom import DocumentFactory
from .grammar import DocumentTypeDecl, Parser, XMLParserError, XMLSyntaxError
from .shared.config import ConfigError, ConfigValidationError, ParserConfig
from .tree import TreeBuilderFactory, XMLElement, XMLFragment, XMLText

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse_string",
    "parse_file",

    # Level 2: Configured parser
    "StrictXMLParser",

    # Level 3: Grammar engine and node construction
    "Parser",
    "DocumentFactory",
    "DocumentTypeDecl",

    # Errors
    "XMLParserError",
    "XMLSyntaxError",
    "ConfigError",
    "ConfigValidationError",

    # Result objects and configuration
    "TreeBuilderFactory",
    "XMLElement",
    "XMLFragment",
    "XMLText",
    "ParserConfig",
]
