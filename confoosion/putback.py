from typing import Optional


class PutBackChars(object):
    """Character reader with an unbounded pushback stack.

    Tracks the 1-indexed line/column of the next character to be read.
    Pushing a character back undoes exactly the position change its read made.
    """

    def __init__(self, text: str, primed: bool = False):
        self._text = text
        self._pos = 0
        self._buffer: list[str] = []
        self._newline_columns: list[int] = []
        self._consumed = 0
        self.line_number = 1
        self.column_number = 1
        if primed:
            # the leading newline is not part of the source, so it must land on line 1
            self._buffer.append("\n")
            self.line_number = 0

    def __repr__(self) -> str:
        return "<PutBackChars line=%d column=%d>" % (self.line_number, self.column_number)

    @property
    def position(self) -> tuple[int, int]:
        return (self.line_number, self.column_number)

    def next(self) -> Optional[str]:
        if self._buffer:
            c = self._buffer.pop()
        elif self._pos < len(self._text):
            c = self._text[self._pos]
            self._pos += 1
        else:
            return None
        self._consumed += 1
        if c == "\n":
            self._newline_columns.append(self.column_number)
            self.line_number += 1
            self.column_number = 1
        else:
            self.column_number += 1
        return c

    def putback(self, c: str) -> None:
        if self._consumed == 0:
            raise AssertionError("cannot put %r back: nothing has been read" % c)
        self._consumed -= 1
        self._buffer.append(c)
        if c == "\n":
            self.line_number -= 1
            self.column_number = self._newline_columns.pop() if self._newline_columns else 1
        else:
            self.column_number -= 1

    def putback_maybe(self, c: Optional[str]) -> None:
        if c is not None:
            self.putback(c)

    def putback_str(self, s: str) -> None:
        for c in reversed(s):
            self.putback(c)
