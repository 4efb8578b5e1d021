"""Node construction capability required by the grammar engine.

The parser never builds nodes itself. Everything it produces goes through a
:class:`DocumentFactory`, so callers decide the concrete tree representation:
the built-in :mod:`strict_xml_parser.tree.builder` nodes, ElementTree, lxml,
or anything else that can model elements with attributes and text children.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strict_xml_parser.grammar.doctype import DocumentTypeDecl


class DocumentFactory(ABC):
    """Abstract factory the grammar engine builds its result through.

    Element and text handles are opaque to the parser; it only passes them
    back into the factory.
    """

    @abstractmethod
    def create_element(self, tag_name: str) -> Any:
        """Create an element handle named ``tag_name``."""

    @abstractmethod
    def create_text_node(self, data: str) -> Any:
        """Create a text node handle holding ``data``."""

    @abstractmethod
    def set_attribute(self, element: Any, name: str, value: str) -> None:
        """Assign an attribute; a repeated name overwrites the earlier value."""

    @abstractmethod
    def append_child(self, parent: Any, child: Any) -> None:
        """Append an element or text handle to ``parent``'s children."""

    @abstractmethod
    def tag_name(self, element: Any) -> str:
        """Read back the tag name of an element handle."""

    def start_document(self) -> None:
        """Called once at the start of every parse; the default does nothing.

        Factories that keep per-document state reset it here, so one factory
        can serve several parses.
        """
        return None

    def set_document_type(self, declaration: "DocumentTypeDecl") -> None:
        """Receive the document type declaration, if the document has one.

        The default implementation ignores it.
        """
        return None
