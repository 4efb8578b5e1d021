"""Recursive-descent grammar engine.

The engine walks the source once, left to right, recognizing the productions
of a practical XML subset and building nodes through a
:class:`~strict_xml_parser.dom.DocumentFactory`. It performs no error
recovery: the first grammar violation raises :class:`XMLSyntaxError` and no
partial result is returned.
"""

from typing import Any, List, Optional, Tuple

from strict_xml_parser.dom import DocumentFactory
from strict_xml_parser.shared import ParserConfig, get_logger, preview

from .cursor import Cursor
from .doctype import parse_doctype
from .errors import XMLSyntaxError
from .productions import (
    CHAR_DATA_RE,
    DOUBLE_QUOTED_VALUE_RE,
    SINGLE_QUOTED_VALUE_RE,
    parse_cdata_section,
    parse_comment,
    parse_misc,
    parse_name,
    parse_pi,
    parse_required_name,
    parse_space,
)
from .references import expand_references, normalize_line_endings


class Parser:
    """Parse one document held in memory into nodes built by ``factory``.

    The parser keeps no state between calls; each :meth:`parse` creates and
    owns its own cursor, so an instance may be parsed repeatedly.

    Args:
        source: Complete document text
        factory: Node construction capability
        source_name: Name used in diagnostics, defaults to
            ``config.source_name`` (``"<INPUT>"`` unless configured)
        config: Optional parser configuration

    Examples:
        >>> from strict_xml_parser.tree import TreeBuilderFactory
        >>> roots = Parser('<input type="text"/>', TreeBuilderFactory()).parse()
        >>> roots[0].tag, roots[0].get_attribute("type")
        ('input', 'text')
    """

    XMLSyntaxError = XMLSyntaxError

    def __init__(
        self,
        source: str,
        factory: DocumentFactory,
        source_name: Optional[str] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        if not isinstance(source, str):
            raise TypeError(f"source must be str, not {type(source).__name__}")
        self.config = config or ParserConfig()
        self.source = source
        self.factory = factory
        self.source_name = source_name or self.config.source_name
        self._logger = get_logger(__name__, self.config.correlation_id, "grammar")

    def parse(self) -> List[Any]:
        """Parse the whole source.

        Returns:
            Root elements in document order, as factory handles

        Raises:
            XMLSyntaxError: On any grammar violation, including content left
                over after the last root element
        """
        cur = Cursor(self.source, self.source_name)
        self.factory.start_document()
        self._logger.debug(
            "Starting grammar parse",
            extra={
                "source_name": self.source_name,
                "content_length": len(self.source),
                "preview": preview(self.source),
            },
        )

        self._prolog(cur)

        roots = []
        while True:
            element = self._element(cur)
            if element is None:
                break
            roots.append(element)
            while parse_misc(cur):
                pass

        if not roots:
            cur.fail("element")
        if not cur.at_end:
            cur.fail("element, comment, processing instruction, or end of document")

        self._logger.debug(
            "Grammar parse completed",
            extra={
                "source_name": self.source_name,
                "root_count": len(roots),
                "line_count": cur.line,
            },
        )
        return roots

    def _prolog(self, cur: Cursor) -> None:
        """[22] prolog, with any XML declaration handled as a PI."""
        while parse_misc(cur):
            pass
        doctype = parse_doctype(cur)
        if doctype is not None:
            self._logger.debug(
                "Document type declaration recognized",
                extra={
                    "doctype_name": doctype.name,
                    "public_id": doctype.public_id,
                    "system_id": doctype.system_id,
                },
            )
            self.factory.set_document_type(doctype)
            while parse_misc(cur):
                pass

    def _element(self, cur: Cursor) -> Optional[Any]:
        """[39] element, optional.

        Open elements live on an explicit stack together with the children
        collected so far, so nesting depth is bounded by ``max_depth`` alone
        and never by the interpreter's recursion limit. An element's children
        are appended when its content ends, just before its end tag.
        """
        start = self._start_tag(cur, 1)
        if start is None:
            return None
        root, empty = start
        if empty:
            return root

        stack: List[Tuple[Any, List[Any]]] = [(root, [])]
        while stack:
            element, children = stack[-1]

            # [43] content; comments, PIs and CDATA sections yield no nodes
            text = self._char_data(cur)
            if text is not None:
                children.append(text)
                continue
            if parse_cdata_section(cur) or parse_pi(cur) or parse_comment(cur):
                continue
            start = self._start_tag(cur, len(stack) + 1)
            if start is not None:
                child, empty = start
                if empty:
                    children.append(child)
                else:
                    stack.append((child, []))
                continue

            for node in children:
                self.factory.append_child(element, node)
            tag_name = self.factory.tag_name(element)
            if not self._end_tag(cur, tag_name):
                cur.fail(f"'/>' or </{tag_name}>")
            stack.pop()
            if stack:
                stack[-1][1].append(element)

        return root

    def _start_tag(self, cur: Cursor, depth: int) -> Optional[Tuple[Any, bool]]:
        """[40] STag or [44] EmptyElemTag at nesting level ``depth``.

        Returns:
            ``(element, is_empty)``, or ``None`` if no start tag begins here
        """
        if cur.peek("</"):
            return None
        if cur.try_literal("<") is None:
            return None

        name = parse_required_name(cur, "element name")
        if depth > self.config.max_depth:
            cur.fail(
                f"at most {self.config.max_depth} levels of element nesting",
                name,
            )

        element = self.factory.create_element(name)
        for attr_name, attr_value in self._attributes(cur):
            self.factory.set_attribute(element, attr_name, attr_value)

        parse_space(cur)

        if cur.try_literal("/>") is not None:
            return element, True
        if cur.try_literal(">") is None:
            cur.fail("'>'")
        return element, False

    def _attributes(self, cur: Cursor) -> List[Tuple[str, str]]:
        attributes = []
        while True:
            attribute = self._attribute(cur)
            if attribute is None:
                return attributes
            attributes.append(attribute)

    def _attribute(self, cur: Cursor) -> Optional[Tuple[str, str]]:
        """[41] Attribute, preceded by its mandatory white space."""
        if parse_space(cur) is None:
            return None
        name = parse_name(cur)
        if name is None:
            return None
        if not self._eq(cur):
            cur.fail("'='")
        value = self._att_value(cur)
        if value is None:
            cur.fail("quoted attribute value")
        return name, value

    def _eq(self, cur: Cursor) -> bool:
        """[25] Eq."""
        parse_space(cur)
        if cur.try_literal("=") is None:
            return False
        parse_space(cur)
        return True

    def _att_value(self, cur: Cursor) -> Optional[str]:
        """[10] AttValue with references expanded."""
        if cur.try_literal('"') is not None:
            value = cur.try_regex(DOUBLE_QUOTED_VALUE_RE)
            if cur.try_literal('"') is None:
                cur.fail("'\"'")
        elif cur.try_literal("'") is not None:
            value = cur.try_regex(SINGLE_QUOTED_VALUE_RE)
            if cur.try_literal("'") is None:
                cur.fail("\"'\"")
        else:
            return None
        return expand_references(value)

    def _end_tag(self, cur: Cursor, name: str) -> bool:
        """[42] ETag, which must close ``name``."""
        if cur.try_literal("</") is None:
            return False
        closing_name = parse_required_name(cur, "element name")
        if closing_name != name:
            cur.fail(f"'{name}'", closing_name)
        parse_space(cur)
        if cur.try_literal(">") is None:
            cur.fail("'>'")
        return True

    def _char_data(self, cur: Cursor) -> Optional[Any]:
        """[14] CharData as a text node, expanded and line-ending normalized."""
        data = cur.try_regex(CHAR_DATA_RE)
        if data is None:
            return None
        return self.factory.create_text_node(
            normalize_line_endings(expand_references(data))
        )
