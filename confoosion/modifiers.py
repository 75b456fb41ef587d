from __future__ import annotations

import enum
from typing import Union

import attr


class TextModifier(enum.Enum):
    BOLD = "b"
    ITALICS = "i"
    STRIKETHROUGH = "del"
    UNDERLINE = "u"
    QUOTE = "blockquote"

    def open(self) -> str:
        return "<%s>" % self.value

    def close(self) -> str:
        return "</%s>" % self.value


@attr.s(frozen=True, slots=True)
class Heading(object):
    level: int = attr.ib()

    @level.validator
    def _check_level(self, attribute: attr.Attribute, value: int) -> None:
        if value < 1:
            raise ValueError("heading level must be positive: %d" % value)

    def open(self) -> str:
        return "</p><h%d>" % self.level

    def close(self) -> str:
        return "</h%d><p>" % self.level


class ExclusiveModifier(enum.Enum):
    ESCAPE = enum.auto()
    TEMPLATE = enum.auto()
    WIKI_LINK = enum.auto()
    INLINE_CODE = enum.auto()
    CODE_BLOCK = enum.auto()
    PARAGRAPH = enum.auto()
    LINK = enum.auto()
    IMAGE = enum.auto()
    END_OF_ARGUMENT = enum.auto()
    END_OF_TEMPLATE = enum.auto()
    END_OF_LINK = enum.auto()


# modifiers which live on the modifier stack
ToggleModifier = Union[TextModifier, Heading]
Delimiter = Union[TextModifier, Heading, ExclusiveModifier]
