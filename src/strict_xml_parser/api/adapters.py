"""Document factories that build trees for popular XML libraries.

The grammar engine hands text to its factory as separate nodes, while the
ElementTree family stores character data on ``.text`` (before the first
child) and ``.tail`` (after each child). The factories here bridge the two,
so a parse can produce ``xml.etree.ElementTree`` or ``lxml.etree`` elements
directly.
"""

from abc import abstractmethod
from typing import Any, Callable, Dict, List, Type

from strict_xml_parser.dom import DocumentFactory
from strict_xml_parser.tree import TreeBuilderFactory


class PendingText(str):
    """Character data waiting to be placed on an element's text or tail."""


class _EtreeStyleFactory(DocumentFactory):
    """Shared ``.text``/``.tail`` placement for ElementTree-compatible APIs."""

    @abstractmethod
    def _element_class(self) -> Callable[[str], Any]:
        """The element constructor of the target library."""

    def create_element(self, tag_name: str) -> Any:
        return self._element_class()(tag_name)

    def create_text_node(self, data: str) -> PendingText:
        return PendingText(data)

    def set_attribute(self, element: Any, name: str, value: str) -> None:
        element.set(name, value)

    def append_child(self, parent: Any, child: Any) -> None:
        if isinstance(child, PendingText):
            if len(parent):
                last = parent[-1]
                last.tail = (last.tail or "") + child
            else:
                parent.text = (parent.text or "") + child
        else:
            parent.append(child)

    def tag_name(self, element: Any) -> str:
        return element.tag


class ElementTreeFactory(_EtreeStyleFactory):
    """Build :mod:`xml.etree.ElementTree` elements."""

    name = "elementtree"

    def _element_class(self) -> Callable[[str], Any]:
        import xml.etree.ElementTree as ET
        return ET.Element


class LxmlFactory(_EtreeStyleFactory):
    """Build :mod:`lxml.etree` elements.

    lxml validates names on construction, so a name this parser accepts but
    lxml rejects (a colon in an attribute name without a declared namespace,
    for instance) raises lxml's ``ValueError`` out of the parse.
    """

    name = "lxml"

    @staticmethod
    def is_available() -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _element_class(self) -> Callable[[str], Any]:
        import lxml.etree as ET
        return ET.Element


_FACTORIES: Dict[str, Type[DocumentFactory]] = {
    "tree": TreeBuilderFactory,
    ElementTreeFactory.name: ElementTreeFactory,
    LxmlFactory.name: LxmlFactory,
}


def register_factory(name: str, factory_class: Type[DocumentFactory]) -> None:
    """Register a document factory class under ``name``.

    Args:
        name: Lookup name, case-insensitive
        factory_class: A :class:`DocumentFactory` subclass with a no-argument
            constructor
    """
    if not (isinstance(factory_class, type) and issubclass(factory_class, DocumentFactory)):
        raise TypeError("Factory class must be a DocumentFactory subclass")
    _FACTORIES[name.lower()] = factory_class


def get_factory(name: str) -> DocumentFactory:
    """Instantiate the factory registered under ``name``.

    Raises:
        KeyError: If no factory has that name
    """
    try:
        factory_class = _FACTORIES[name.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown document factory {name!r}; available: {', '.join(list_factories())}"
        ) from None
    return factory_class()


def list_factories() -> List[str]:
    """Names of all registered factories."""
    return sorted(_FACTORIES)
