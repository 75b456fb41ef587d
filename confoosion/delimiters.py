from typing import Optional

from confoosion.modifiers import Delimiter, ExclusiveModifier, Heading, TextModifier, ToggleModifier
from confoosion.putback import PutBackChars

# delimiters made of one character repeated twice
_DOUBLED: dict[str, Delimiter] = {
    "~": TextModifier.STRIKETHROUGH,
    "_": TextModifier.UNDERLINE,
    "{": ExclusiveModifier.TEMPLATE,
    "}": ExclusiveModifier.END_OF_TEMPLATE,
    "]": ExclusiveModifier.END_OF_LINK,
}

_SINGLE: dict[str, Delimiter] = {
    "\\": ExclusiveModifier.ESCAPE,
    "`": ExclusiveModifier.INLINE_CODE,
    "|": ExclusiveModifier.END_OF_ARGUMENT,
}


def _expect(chars: PutBackChars, expected: str) -> bool:
    """Consume ``expected`` if it comes next; otherwise leave the stream untouched."""
    read = ""
    for e in expected:
        c = chars.next()
        if c != e:
            chars.putback_maybe(c)
            chars.putback_str(read)
            return False
        read += c
    return True


def find_open_delimiter(chars: PutBackChars) -> Optional[Delimiter]:
    c = chars.next()
    if c is None:
        return None

    if c in _SINGLE:
        return _SINGLE[c]
    if c in _DOUBLED:
        if _expect(chars, c):
            return _DOUBLED[c]
        chars.putback(c)
        return None

    match c:
        case "*":
            if _expect(chars, "*"):
                return TextModifier.BOLD
            return TextModifier.ITALICS
        case "[":
            if _expect(chars, "["):
                return ExclusiveModifier.WIKI_LINK
            return ExclusiveModifier.LINK
        case "!":
            if _expect(chars, "["):
                return ExclusiveModifier.IMAGE
        case "\n":
            delimiter = _find_line_start_delimiter(chars)
            if delimiter is not None:
                return delimiter

    chars.putback(c)
    return None


def _find_line_start_delimiter(chars: PutBackChars) -> Optional[Delimiter]:
    """Delimiters which are only recognized right after a newline."""
    if _expect(chars, "\n"):
        return ExclusiveModifier.PARAGRAPH
    if _expect(chars, "```"):
        return ExclusiveModifier.CODE_BLOCK
    if _expect(chars, "> "):
        return TextModifier.QUOTE

    level = 0
    while _expect(chars, "#"):
        level += 1
    if level:
        return Heading(level)
    return None


def has_close_delimiter(chars: PutBackChars, modifier: ToggleModifier) -> bool:
    if isinstance(modifier, Heading):
        c = chars.next()
        chars.putback_maybe(c)
        return c is None or c == "\n"

    match modifier:
        case TextModifier.BOLD:
            return _expect(chars, "**")
        case TextModifier.STRIKETHROUGH:
            return _expect(chars, "~~")
        case TextModifier.UNDERLINE:
            return _expect(chars, "__")
        case TextModifier.ITALICS:
            # "**" closes an enclosing bold, never this italics
            if _expect(chars, "**"):
                chars.putback_str("**")
                return False
            return _expect(chars, "*")
        case TextModifier.QUOTE:
            return _has_quote_close(chars)
    raise AssertionError("unknown modifier: %r" % modifier)


def _has_quote_close(chars: PutBackChars) -> bool:
    c = chars.next()
    if c is None:
        return True
    if c != "\n":
        chars.putback(c)
        return False
    still_open = _expect(chars, "> ")
    if still_open:
        chars.putback_str("> ")
    chars.putback("\n")
    return not still_open
