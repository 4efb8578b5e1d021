"""Document type declaration sub-grammar.

The declaration is checked for well-formedness only. Markup declarations in
the internal subset are recognized by their keyword and their bodies are
skipped with a quote-aware scan; content models, attribute definitions and
entity values are never interpreted.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .cursor import Cursor, find_declaration_end
from .errors import END_OF_INPUT
from .productions import (
    PE_REFERENCE_RE,
    PUBID_LITERAL_RE,
    SYSTEM_LITERAL_RE,
    parse_comment,
    parse_pi,
    parse_required_name,
    parse_required_space,
    parse_space,
)

MARKUP_DECLARATION_KEYWORDS = (
    "<!NOTATION",
    "<!ENTITY",
    "<!ATTLIST",
    "<!ELEMENT",
)


@dataclass(frozen=True)
class DocumentTypeDecl:
    """What a ``<!DOCTYPE ...>`` declaration said, uninterpreted.

    Attributes:
        name: Declared document element name
        public_id: Public identifier without quotes, if any
        system_id: System identifier without quotes, if any
        internal_subset: Raw text between ``[`` and ``]``, if present
    """

    name: str
    public_id: Optional[str] = None
    system_id: Optional[str] = None
    internal_subset: Optional[str] = None


def _unquote(literal: str) -> str:
    return literal[1:-1]


def parse_external_id(cur: Cursor) -> Optional[Tuple[Optional[str], str]]:
    """[75] ExternalID.

    Returns:
        ``(public_id, system_id)`` or ``None`` if no ``SYSTEM``/``PUBLIC``
        keyword is present.
    """
    if cur.try_literal("SYSTEM") is not None:
        parse_required_space(cur)
        system_literal = cur.try_regex(SYSTEM_LITERAL_RE)
        if system_literal is None:
            cur.fail("quoted system literal")
        return None, _unquote(system_literal)

    if cur.try_literal("PUBLIC") is not None:
        parse_required_space(cur)
        pubid_literal = cur.try_regex(PUBID_LITERAL_RE)
        if pubid_literal is None:
            cur.fail("quoted public identifier")
        parse_required_space(cur)
        system_literal = cur.try_regex(SYSTEM_LITERAL_RE)
        if system_literal is None:
            cur.fail("quoted system literal")
        return _unquote(pubid_literal), _unquote(system_literal)

    return None


def parse_markup_declaration(cur: Cursor) -> bool:
    """[29] markupdecl for element, attribute-list, entity and notation declarations."""
    for keyword in MARKUP_DECLARATION_KEYWORDS:
        if cur.try_literal(keyword) is not None:
            break
    else:
        return False

    end = find_declaration_end(cur.text, cur.offset)
    if end == -1:
        cur.fail("'>'", END_OF_INPUT)
    cur.skip_to(end)
    return True


def parse_internal_subset_item(cur: Cursor) -> bool:
    return (
        cur.try_regex(PE_REFERENCE_RE) is not None
        or parse_space(cur) is not None
        or parse_comment(cur)
        or parse_pi(cur)
        or parse_markup_declaration(cur)
    )


def parse_internal_subset(cur: Cursor) -> Optional[str]:
    """[28b] intSubset in its brackets; returns the text between them."""
    if cur.try_literal("[") is None:
        return None
    start = cur.offset
    while parse_internal_subset_item(cur):
        pass
    subset = cur.text[start:cur.offset]
    if cur.try_literal("]") is None:
        cur.fail("']' or markup declaration")
    return subset


def parse_doctype(cur: Cursor) -> Optional[DocumentTypeDecl]:
    """[28] doctypedecl, optional."""
    if cur.try_literal("<!DOCTYPE") is None:
        return None

    parse_required_space(cur)
    name = parse_required_name(cur, "document type name")

    public_id = system_id = None
    if parse_space(cur) is not None:
        external_id = parse_external_id(cur)
        if external_id is not None:
            public_id, system_id = external_id
            parse_space(cur)

    internal_subset = parse_internal_subset(cur)
    if internal_subset is not None:
        parse_space(cur)

    if cur.try_literal(">") is None:
        cur.fail("'>'")

    return DocumentTypeDecl(
        name=name,
        public_id=public_id,
        system_id=system_id,
        internal_subset=internal_subset,
    )
