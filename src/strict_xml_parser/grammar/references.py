"""Entity and character reference expansion.

Only the five predefined XML entities are known; any other ``&name;`` is left
in the text untouched, as is any malformed or out-of-range character
reference. Expansion never raises.
"""

import re
from types import MappingProxyType
from typing import Mapping

XML_ENTITIES: Mapping[str, str] = MappingProxyType({
    "&quot;": '"',
    "&apos;": "'",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
})

_ENTITY_RE = re.compile("|".join(re.escape(name) for name in XML_ENTITIES))
_CHAR_REF_RE = re.compile(r"&#x([0-9a-fA-F]+);|&#([0-9]+);")
_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")

MAX_CODE_POINT = 0x10FFFF


def expand_entities(value: str) -> str:
    """Replace predefined entity references with their characters."""
    return _ENTITY_RE.sub(lambda match: XML_ENTITIES[match.group(0)], value)


def _char_for_reference(match: "re.Match[str]") -> str:
    hex_value, dec_value = match.groups()
    if hex_value is not None:
        code_point = int(hex_value, 16)
    else:
        code_point = int(dec_value, 10)
    if code_point > MAX_CODE_POINT:
        return match.group(0)
    return chr(code_point)


def expand_char_references(value: str) -> str:
    """Replace ``&#N;`` and ``&#xH;`` references with their code points."""
    return _CHAR_REF_RE.sub(_char_for_reference, value)


def expand_references(value: str) -> str:
    """Expand entity references, then character references.

    Each pass runs once over its input, so ``&amp;lt;`` becomes ``&lt;``
    rather than ``<``.

    Examples:
        >>> expand_references("6 &#xf7; 2 &amp; more")
        '6 ÷ 2 & more'
    """
    return expand_char_references(expand_entities(value))


def normalize_line_endings(value: str) -> str:
    """Collapse ``\\r\\n``, ``\\n`` and ``\\r`` into ``\\n``."""
    return _LINE_BREAK_RE.sub("\n", value)


def count_line_breaks(value: str) -> int:
    """Count line breaks, treating ``\\r\\n`` as one."""
    return len(_LINE_BREAK_RE.findall(value))
