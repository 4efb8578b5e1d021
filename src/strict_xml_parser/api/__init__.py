"""Public parsing API and document factories for external tree libraries."""

from .adapters import (
    ElementTreeFactory,
    LxmlFactory,
    get_factory,
    list_factories,
    register_factory,
)
from .parser import StrictXMLParser, parse_file, parse_string

__all__ = [
    "ElementTreeFactory",
    "LxmlFactory",
    "get_factory",
    "list_factories",
    "register_factory",
    "StrictXMLParser",
    "parse_file",
    "parse_string",
]
