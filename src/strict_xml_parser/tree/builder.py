"""Default document tree built by the grammar engine.

This module implements a small node model (elements, text nodes and a
fragment holding the root elements) together with the factory that lets the
grammar engine construct it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from strict_xml_parser.dom import DocumentFactory
from strict_xml_parser.grammar.doctype import DocumentTypeDecl


@dataclass(eq=False)
class XMLText:
    """A run of character data inside an element."""

    data: str
    parent: Optional["XMLElement"] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.data}


Node = Union["XMLElement", XMLText]


@dataclass(eq=False)
class XMLElement:
    """Represents a single XML element in the document tree.

    Children are kept in document order and may mix elements and text nodes.
    Attributes keep their insertion order.
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)
    parent: Optional["XMLElement"] = None

    def __post_init__(self) -> None:
        """Validate element values and establish parent-child relationships."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")

        for child in self.children:
            child.parent = self

    def __repr__(self) -> str:
        return f"<XMLElement {self.tag!r} attributes={len(self.attributes)} children={len(self.children)}>"

    @property
    def tag_name(self) -> str:
        return self.tag

    @property
    def child_nodes(self) -> List[Node]:
        return self.children

    @property
    def first_child(self) -> Optional[Node]:
        return self.children[0] if self.children else None

    @property
    def elements(self) -> List["XMLElement"]:
        """Direct children that are elements."""
        return [child for child in self.children if isinstance(child, XMLElement)]

    @property
    def text(self) -> str:
        """Concatenated data of the direct text children."""
        return "".join(
            child.data for child in self.children if isinstance(child, XMLText)
        )

    @property
    def full_text(self) -> str:
        """All character data in this element and its descendants, in order."""
        parts = []
        for child in self.children:
            if isinstance(child, XMLText):
                parts.append(child.data)
            else:
                parts.append(child.full_text)
        return "".join(parts)

    def append_child(self, child: Node) -> None:
        """Add a child node and establish parent relationship."""
        if not isinstance(child, (XMLElement, XMLText)):
            raise TypeError("Child must be an XMLElement or XMLText instance")

        child.parent = self
        self.children.append(child)

    def iter(self) -> Iterator["XMLElement"]:
        """Iterate over this element and its descendant elements in document order."""
        pending = [self]
        while pending:
            element = pending.pop()
            yield element
            pending.extend(reversed(element.elements))

    def find(self, tag: str) -> Optional["XMLElement"]:
        """Find first descendant element with matching tag name."""
        return next((elem for elem in self.iter() if elem is not self and elem.tag == tag), None)

    def find_all(self, tag: str) -> List["XMLElement"]:
        """Find all descendant elements with matching tag name."""
        return [elem for elem in self.iter() if elem is not self and elem.tag == tag]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute value."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_path(self) -> str:
        """Get XPath-like path to this element."""
        if self.parent is None:
            return f"/{self.tag}"

        parent_path = self.parent.get_path()
        siblings = [child for child in self.parent.elements if child.tag == self.tag]
        if len(siblings) > 1:
            position = next(i for i, sibling in enumerate(siblings, 1) if sibling is self)
            return f"{parent_path}/{self.tag}[{position}]"

        return f"{parent_path}/{self.tag}"

    def get_depth(self) -> int:
        """Get depth of this element in the tree (root = 0)."""
        depth = 0
        ancestor = self.parent
        while ancestor is not None:
            depth += 1
            ancestor = ancestor.parent
        return depth

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "tag": self.tag,
            "attributes": dict(self.attributes),
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class XMLFragment:
    """Container for the root elements of one parsed document.

    Holds the roots in document order and, when the prolog declared one, the
    document type declaration.
    """

    roots: List[XMLElement] = field(default_factory=list)
    doctype: Optional[DocumentTypeDecl] = None
    source_name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.roots)

    def __iter__(self) -> Iterator[XMLElement]:
        return iter(self.roots)

    def __getitem__(self, index: int) -> XMLElement:
        return self.roots[index]

    @property
    def child_nodes(self) -> List[XMLElement]:
        return self.roots

    @property
    def root(self) -> Optional[XMLElement]:
        """The first root element, the document element of a single-rooted document."""
        return self.roots[0] if self.roots else None

    def iter_elements(self) -> Iterator[XMLElement]:
        """Iterate over all elements in document order."""
        for root in self.roots:
            yield from root.iter()

    def find(self, tag: str) -> Optional[XMLElement]:
        """Find first element with matching tag name."""
        return next((elem for elem in self.iter_elements() if elem.tag == tag), None)

    def find_all(self, tag: str) -> List[XMLElement]:
        """Find all elements with matching tag name."""
        return [elem for elem in self.iter_elements() if elem.tag == tag]

    def get_element_by_id(self, id_value: str) -> Optional[XMLElement]:
        """Find element by ID attribute value."""
        return next(
            (elem for elem in self.iter_elements() if elem.get_attribute("id") == id_value),
            None
        )

    @property
    def total_elements(self) -> int:
        return sum(1 for _ in self.iter_elements())

    @property
    def max_depth(self) -> int:
        return max((elem.get_depth() for elem in self.iter_elements()), default=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert fragment to dictionary representation."""
        result: Dict[str, Any] = {
            "total_elements": self.total_elements,
            "roots": [root.to_dict() for root in self.roots],
        }
        if self.source_name is not None:
            result["source_name"] = self.source_name
        if self.doctype is not None:
            result["doctype"] = {
                "name": self.doctype.name,
                "public_id": self.doctype.public_id,
                "system_id": self.doctype.system_id,
            }
        return result


class TreeBuilderFactory(DocumentFactory):
    """Document factory producing :class:`XMLElement` and :class:`XMLText` nodes.

    The factory remembers the document type declaration of the document being
    parsed so :meth:`build_fragment` can attach it to the result. The record is
    cleared when the next parse starts.
    """

    def __init__(self) -> None:
        self.doctype: Optional[DocumentTypeDecl] = None

    def start_document(self) -> None:
        self.doctype = None

    def create_element(self, tag_name: str) -> XMLElement:
        return XMLElement(tag=tag_name)

    def create_text_node(self, data: str) -> XMLText:
        return XMLText(data=data)

    def set_attribute(self, element: XMLElement, name: str, value: str) -> None:
        element.set_attribute(name, value)

    def append_child(self, parent: XMLElement, child: Node) -> None:
        parent.append_child(child)

    def tag_name(self, element: XMLElement) -> str:
        return element.tag

    def set_document_type(self, declaration: DocumentTypeDecl) -> None:
        self.doctype = declaration

    def build_fragment(
        self, roots: List[XMLElement], source_name: Optional[str] = None
    ) -> XMLFragment:
        """Wrap parsed roots, with the recorded declaration, in a fragment."""
        return XMLFragment(roots=list(roots), doctype=self.doctype, source_name=source_name)
