import enum
from typing import Optional

from confoosion.putback import PutBackChars


class ErrorKind(enum.Enum):
    UNCLOSED_MODIFIER = "unclosed-modifier"
    STRAY_TERMINATOR = "stray-terminator"
    UNTERMINATED_CONSTRUCT = "unterminated-construct"
    MALFORMED_CLOSE = "malformed-close"
    TOO_MANY_ARGUMENTS = "too-many-arguments"
    RECURSION_LIMIT_EXCEEDED = "recursion-limit-exceeded"
    TEMPLATE_NOT_FOUND = "template-not-found"
    TEMPLATE_CONTRACT_VIOLATION = "template-contract-violation"
    TEMPLATE_ARGUMENT = "template-argument"
    IO_FAILURE = "io-failure"
    PATH_RESOLUTION_FAILURE = "path-resolution-failure"


class ParseError(Exception):
    """Conversion failure at a (line, column) of the source.

    Errors raised away from any character stream (template lookup, file
    access) carry position 0:0.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        line: int = 0,
        column: int = 0,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.line = line
        self.column = column
        self.detail = detail

    @classmethod
    def at(
        cls, chars: PutBackChars, kind: ErrorKind, message: str, detail: Optional[str] = None
    ) -> "ParseError":
        return cls(kind, message, chars.line_number, chars.column_number, detail=detail)

    def __str__(self) -> str:
        return "%d:%d. %s" % (self.line, self.column, self.message)

    def __repr__(self) -> str:
        return "ParseError(%s, %r, line=%d, column=%d)" % (
            self.kind.name,
            self.message,
            self.line,
            self.column,
        )
