"""Default document tree for strict XML parsing.

Key Components:
    TreeBuilderFactory: Document factory the grammar engine builds through
    XMLFragment: Ordered root elements of one document plus its DOCTYPE
    XMLElement: Element with ordered attributes and mixed children
    XMLText: Character data node
"""

from .builder import (
    TreeBuilderFactory,
    XMLElement,
    XMLFragment,
    XMLText,
)

__all__ = [
    "TreeBuilderFactory",
    "XMLElement",
    "XMLFragment",
    "XMLText",
]
