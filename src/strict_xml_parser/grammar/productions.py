"""Lexical patterns and the small productions shared by every grammar context.

Each ``parse_*`` function takes the cursor of the running parse. Optional
productions return ``None``/``False`` without consuming anything when they do
not apply; ``parse_required_*`` variants raise instead.
"""

import re
from typing import Optional

from .cursor import Cursor

# [4] NameStartChar and [4a] NameChar
NAME_START_CHARS = (
    ":A-Z_a-z"
    "\xC0-\xD6\xD8-\xF6\xF8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    "\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF"
    "\uF900-\uFDCF\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
NAME_CHARS = NAME_START_CHARS + "\\-.0-9\xB7\u0300-\u036F\u203F-\u2040"

NAME_RE = re.compile(f"[{NAME_START_CHARS}][{NAME_CHARS}]*")
SPACE_RE = re.compile(r"[ \t\r\n]+")
CHAR_DATA_RE = re.compile(r"[^<]+")

DOUBLE_QUOTED_VALUE_RE = re.compile(r'[^<"]*')
SINGLE_QUOTED_VALUE_RE = re.compile(r"[^<']*")

COMMENT_BODY_RE = re.compile(r"(?:[^-]|-[^-])*")
PI_BODY_RE = re.compile(r"(?:[^?]|\?(?!>))*")
CDATA_BODY_RE = re.compile(r"(?:[^\]]|\](?!\]>))*")

PE_REFERENCE_RE = re.compile(f"%[{NAME_START_CHARS}][{NAME_CHARS}]*;")
SYSTEM_LITERAL_RE = re.compile(r"\"[^\"]*\"|'[^']*'")
PUBID_LITERAL_RE = re.compile(
    r"\"[ \r\na-zA-Z0-9\-'()+,./:=?;!*#@$_%]*\""
    r"|'[ \r\na-zA-Z0-9\-()+,./:=?;!*#@$_%]*'"
)


def parse_space(cur: Cursor) -> Optional[str]:
    """[3] S, optional."""
    return cur.try_regex(SPACE_RE)


def parse_required_space(cur: Cursor) -> str:
    """[3] S, mandatory."""
    space = parse_space(cur)
    if space is None:
        cur.fail("whitespace")
    return space


def parse_name(cur: Cursor) -> Optional[str]:
    """[5] Name, optional."""
    return cur.try_regex(NAME_RE)


def parse_required_name(cur: Cursor, production: str) -> str:
    """[5] Name, mandatory; ``production`` describes it in the error."""
    name = parse_name(cur)
    if name is None:
        cur.fail(production)
    return name


def parse_comment(cur: Cursor) -> bool:
    """[15] Comment. The body is consumed and discarded."""
    if cur.try_literal("<!--") is None:
        return False
    cur.try_regex(COMMENT_BODY_RE)
    if cur.try_literal("-->") is None:
        cur.fail("-->")
    return True


def parse_pi(cur: Cursor) -> bool:
    """[16] PI. Target and data are consumed and discarded."""
    if cur.try_literal("<?") is None:
        return False
    cur.try_regex(PI_BODY_RE)
    if cur.try_literal("?>") is None:
        cur.fail("?>")
    return True


def parse_cdata_section(cur: Cursor) -> bool:
    """[18] CDSect. The section text is consumed and discarded."""
    if cur.try_literal("<![CDATA[") is None:
        return False
    cur.try_regex(CDATA_BODY_RE)
    if cur.try_literal("]]>") is None:
        cur.fail("]]>")
    return True


def parse_misc(cur: Cursor) -> bool:
    """[27] Misc: a comment, processing instruction or white space."""
    return parse_comment(cur) or parse_pi(cur) or parse_space(cur) is not None
