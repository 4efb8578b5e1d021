"""Core parser API with progressive disclosure for strict XML parsing.

Level 1 is a pair of module functions, :func:`parse_string` and
:func:`parse_file`. Level 2 is :class:`StrictXMLParser`, which binds a
configuration once and reuses it. Both sit on top of the grammar engine in
:mod:`strict_xml_parser.grammar` and re-raise its syntax errors unchanged
after logging them.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from strict_xml_parser.dom import DocumentFactory
from strict_xml_parser.grammar import Parser, XMLSyntaxError
from strict_xml_parser.shared import ParserConfig, get_logger, preview
from strict_xml_parser.tree import TreeBuilderFactory, XMLFragment

MS_PER_SECOND = 1000

ParseOutput = Union[XMLFragment, List[Any]]

# Byte order marks and the codec they imply; longer marks are checked first
# because the UTF-32-LE mark starts with the UTF-16-LE one
BOM_ENCODINGS: Dict[bytes, str] = {
    b"\xff\xfe\x00\x00": "utf-32-le",
    b"\x00\x00\xfe\xff": "utf-32-be",
    b"\xef\xbb\xbf": "utf-8",
    b"\xff\xfe": "utf-16-le",
    b"\xfe\xff": "utf-16-be",
}


def detect_bom(data: bytes) -> Optional[Tuple[str, int]]:
    """Find a byte order mark at the start of ``data``.

    Returns:
        ``(encoding, mark_length)``, or ``None`` if there is no mark
    """
    for mark in sorted(BOM_ENCODINGS, key=len, reverse=True):
        if data.startswith(mark):
            return BOM_ENCODINGS[mark], len(mark)
    return None


def decode_document(data: bytes, encoding: str) -> str:
    """Decode file content, letting a byte order mark override ``encoding``.

    The mark itself is dropped. Line endings are left untouched so reported
    line numbers match the file.

    Raises:
        UnicodeDecodeError: If the content is not valid in the chosen codec
    """
    bom = detect_bom(data)
    if bom is not None:
        encoding, mark_length = bom
        data = data[mark_length:]
    return data.decode(encoding)


def _run_parser(
    text: str,
    factory: Optional[DocumentFactory],
    source_name: Optional[str],
    config: ParserConfig,
    component: str,
) -> ParseOutput:
    start_time = time.time()
    logger = get_logger(__name__, config.correlation_id, component)

    tree_factory = None
    if factory is None:
        factory = tree_factory = TreeBuilderFactory()

    parser = Parser(text, factory, source_name=source_name, config=config)
    try:
        roots = parser.parse()
    except XMLSyntaxError as e:
        logger.warning(
            "Syntax error while parsing",
            extra={
                "source_name": e.source_name,
                "line": e.line,
                "column": e.column,
                "expected": e.expected,
                "actual": e.actual,
            }
        )
        raise

    processing_time = (time.time() - start_time) * MS_PER_SECOND
    logger.info(
        "Parse completed",
        extra={
            "source_name": parser.source_name,
            "root_count": len(roots),
            "processing_time_ms": processing_time,
        }
    )

    if tree_factory is not None:
        return tree_factory.build_fragment(roots, source_name=parser.source_name)
    return roots


def parse_string(
    xml_string: str,
    factory: Optional[DocumentFactory] = None,
    source_name: Optional[str] = None,
    config: Optional[ParserConfig] = None,
) -> ParseOutput:
    """Parse XML from a string.

    Args:
        xml_string: Complete document text
        factory: Document factory to build through; the built-in tree is used
            when omitted
        source_name: Name used in diagnostics
        config: Optional parser configuration

    Returns:
        An :class:`XMLFragment` when no factory is given, otherwise the list
        of root handles the factory produced

    Raises:
        XMLSyntaxError: If the text is not well-formed

    Examples:
        >>> fragment = parse_string('<root><item id="1">Hello</item></root>')
        >>> fragment.root.find('item').get_attribute('id')
        '1'
    """
    config = config or ParserConfig()
    logger = get_logger(__name__, config.correlation_id, "parse_string")
    logger.info(
        "Starting string parse operation",
        extra={
            "content_length": len(xml_string),
            "preview": preview(xml_string),
        }
    )
    return _run_parser(xml_string, factory, source_name, config, "parse_string")


def parse_file(
    file_path: Union[str, Path],
    factory: Optional[DocumentFactory] = None,
    encoding: Optional[str] = None,
    config: Optional[ParserConfig] = None,
) -> ParseOutput:
    """Parse XML from a file, reporting errors against the file's path.

    Args:
        file_path: Path to XML file (string or Path object)
        factory: Document factory to build through; the built-in tree is used
            when omitted
        encoding: Codec override, defaults to ``config.encoding``; a byte
            order mark at the start of the file takes precedence over both
        config: Optional parser configuration

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid in the chosen encoding
        XMLSyntaxError: If the content is not well-formed
    """
    config = config or ParserConfig()
    path_obj = Path(file_path)
    logger = get_logger(__name__, config.correlation_id, "parse_file")
    logger.info(
        "Starting file parse operation",
        extra={
            "file_path": str(path_obj),
            "encoding_override": encoding,
        }
    )

    content = decode_document(path_obj.read_bytes(), encoding or config.encoding)

    return _run_parser(content, factory, str(path_obj), config, "parse_file")


class StrictXMLParser:
    """Configured parser for repeated use.

    Examples:
        >>> parser = StrictXMLParser(ParserConfig(source_name="inline"))
        >>> parser.parse_string("<br/>").root.tag
        'br'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        factory_class: Optional[type] = None,
    ) -> None:
        """Initialize parser.

        Args:
            config: Configuration used for every parse
            factory_class: :class:`DocumentFactory` subclass instantiated per
                parse; the built-in tree is used when omitted
        """
        self.config = config or ParserConfig()
        self.factory_class = factory_class
        self._logger = get_logger(__name__, self.config.correlation_id, "StrictXMLParser")
        self._parse_count = 0

    @property
    def parse_count(self) -> int:
        """Number of successful parses made with this instance."""
        return self._parse_count

    def _factory(self) -> Optional[DocumentFactory]:
        return self.factory_class() if self.factory_class is not None else None

    def parse_string(self, xml_string: str, source_name: Optional[str] = None) -> ParseOutput:
        """Parse XML from a string with this parser's configuration."""
        result = parse_string(
            xml_string, factory=self._factory(), source_name=source_name, config=self.config
        )
        self._parse_count += 1
        return result

    def parse_file(
        self, file_path: Union[str, Path], encoding: Optional[str] = None
    ) -> ParseOutput:
        """Parse XML from a file with this parser's configuration."""
        result = parse_file(
            file_path, factory=self._factory(), encoding=encoding, config=self.config
        )
        self._parse_count += 1
        return result
