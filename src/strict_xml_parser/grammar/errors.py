"""Exception types raised by the grammar engine."""

from typing import Any, Dict

END_OF_INPUT = "end of input"

MESSAGE_FORMAT = (
    "XML syntax error at line {line}, column {column} of {source_name}: "
    "expecting {expected}, but encountered '{actual}'"
)


class XMLParserError(Exception):
    """Base exception for all parser failures."""


class XMLSyntaxError(XMLParserError):
    """A grammar violation, located by line and column within the source.

    Attributes:
        actual: The offending token, or ``"end of input"``
        expected: Human-readable description of what would have been accepted
        column: 1-based column within the current line
        source_name: Name of the source, used only for diagnostics
        line: 1-based line number
    """

    def __init__(
        self,
        actual: str,
        expected: str,
        column: int,
        source_name: str,
        line: int,
    ) -> None:
        super().__init__(
            MESSAGE_FORMAT.format(
                line=line,
                column=column,
                source_name=source_name,
                expected=expected,
                actual=actual,
            )
        )
        self._actual = actual
        self._expected = expected
        self._column = column
        self._source_name = source_name
        self._line = line

    @property
    def actual(self) -> str:
        return self._actual

    @property
    def expected(self) -> str:
        return self._expected

    @property
    def column(self) -> int:
        return self._column

    @property
    def source_name(self) -> str:
        return self._source_name

    @property
    def line(self) -> int:
        return self._line

    @property
    def message(self) -> str:
        """The rendered diagnostic message."""
        return str(self)

    def __reduce__(self) -> Any:
        return (
            self.__class__,
            (self._actual, self._expected, self._column, self._source_name, self._line),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the diagnostic to a dictionary."""
        return {
            "line": self._line,
            "column": self._column,
            "source_name": self._source_name,
            "expected": self._expected,
            "actual": self._actual,
            "message": self.message,
        }
