"""Scan position and matching primitives for the grammar engine.

A :class:`Cursor` is created for a single parse and owned by it. Every match
either consumes input and returns the matched token, or returns ``None`` and
leaves the position untouched; there is no way to move the cursor backwards.
"""

from typing import NoReturn, Optional, Pattern

from .errors import END_OF_INPUT, XMLSyntaxError
from .references import count_line_breaks

QUOTES = "\"'"


def find_declaration_end(text: str, start: int, terminator: str = ">") -> int:
    """Find the end of a markup declaration body.

    Scans ``text`` from ``start`` for ``terminator``, stepping over quoted
    literals so a terminator inside quotes does not end the declaration.

    Args:
        text: Source buffer
        start: Offset at which to begin scanning
        terminator: Character that closes the declaration

    Returns:
        Offset just past the terminator, or -1 if the declaration (or one of
        its quoted literals) runs to the end of the buffer.
    """
    pos = start
    length = len(text)
    while pos < length:
        char = text[pos]
        if char in QUOTES:
            closing = text.find(char, pos + 1)
            if closing == -1:
                return -1
            pos = closing + 1
        elif char == terminator:
            return pos + 1
        else:
            pos += 1
    return -1


class Cursor:
    """Forward-only scanner over a source string.

    Attributes:
        text: The complete source
        source_name: Name reported in syntax errors
        offset: Index of the next unconsumed character
        line: 1-based line number of the next unconsumed character
    """

    def __init__(self, text: str, source_name: str) -> None:
        self.text = text
        self.source_name = source_name
        self.offset = 0
        self.line = 1

    def __repr__(self) -> str:
        return (
            f"Cursor(source_name={self.source_name!r}, offset={self.offset}, "
            f"line={self.line}, column={self.column})"
        )

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    @property
    def column(self) -> int:
        """1-based column of the next unconsumed character."""
        line_start = max(
            self.text.rfind("\n", 0, self.offset),
            self.text.rfind("\r", 0, self.offset),
        )
        return self.offset - line_start

    def _advance(self, token: str) -> str:
        self.offset += len(token)
        self.line += count_line_breaks(token)
        return token

    def try_literal(self, literal: str) -> Optional[str]:
        """Consume ``literal`` if the input continues with it."""
        if self.text.startswith(literal, self.offset):
            return self._advance(literal)
        return None

    def try_regex(self, pattern: Pattern[str]) -> Optional[str]:
        """Consume the match of ``pattern`` anchored at the current offset.

        A zero-length match succeeds and returns an empty string.
        """
        match = pattern.match(self.text, self.offset)
        if match is None:
            return None
        return self._advance(match.group(0))

    def peek(self, literal: str) -> bool:
        """Check whether the input continues with ``literal`` without consuming."""
        return self.text.startswith(literal, self.offset)

    def peek_char(self) -> str:
        """The next character, or ``"end of input"`` for diagnostics."""
        if self.at_end:
            return END_OF_INPUT
        return self.text[self.offset]

    def skip_to(self, end: int) -> str:
        """Consume everything up to the absolute offset ``end``."""
        if end < self.offset:
            raise ValueError("Cursor cannot move backwards")
        return self._advance(self.text[self.offset:end])

    def fail(self, expected: str, actual: Optional[str] = None) -> NoReturn:
        """Raise a syntax error located at the current position."""
        raise XMLSyntaxError(
            self.peek_char() if actual is None else actual,
            expected,
            self.column,
            self.source_name,
            self.line,
        )
