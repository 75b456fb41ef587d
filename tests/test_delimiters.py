import pytest

from confoosion.delimiters import find_open_delimiter, has_close_delimiter
from confoosion.modifiers import (
    Delimiter,
    ExclusiveModifier,
    Heading,
    TextModifier,
    ToggleModifier,
)
from confoosion.putback import PutBackChars

from .test_putback import read_all


@pytest.mark.parametrize(
    ("data", "expected", "rest"),
    [
        ("**x", TextModifier.BOLD, "x"),
        ("*x", TextModifier.ITALICS, "x"),
        ("*", TextModifier.ITALICS, ""),
        ("~~x", TextModifier.STRIKETHROUGH, "x"),
        ("__x", TextModifier.UNDERLINE, "x"),
        ("\\x", ExclusiveModifier.ESCAPE, "x"),
        ("`x", ExclusiveModifier.INLINE_CODE, "x"),
        ("\n\nx", ExclusiveModifier.PARAGRAPH, "x"),
        ("\n```x", ExclusiveModifier.CODE_BLOCK, "x"),
        ("\n> x", TextModifier.QUOTE, "x"),
        ("\n# x", Heading(1), " x"),
        ("\n###x", Heading(3), "x"),
        ("![x", ExclusiveModifier.IMAGE, "x"),
        ("[[x", ExclusiveModifier.WIKI_LINK, "x"),
        ("[x", ExclusiveModifier.LINK, "x"),
        ("{{x", ExclusiveModifier.TEMPLATE, "x"),
        ("}}x", ExclusiveModifier.END_OF_TEMPLATE, "x"),
        ("]]x", ExclusiveModifier.END_OF_LINK, "x"),
        ("|x", ExclusiveModifier.END_OF_ARGUMENT, "x"),
    ],
)
def test_find_open_delimiter(data: str, expected: Delimiter, rest: str):
    chars = PutBackChars(data)
    assert find_open_delimiter(chars) == expected
    assert read_all(chars) == rest


@pytest.mark.parametrize(
    ("data"),
    ["x", "~x", "_x", "\nx", "\n", "\n``x", "\n>x", "!x", "!", "{x", "}x", "]x", "]", ""],
)
def test_no_open_delimiter(data: str):
    chars = PutBackChars(data)
    assert find_open_delimiter(chars) is None
    assert chars.position == (1, 1)
    assert read_all(chars) == data


@pytest.mark.parametrize(
    ("data", "modifier", "expected", "rest"),
    [
        ("**x", TextModifier.BOLD, True, "x"),
        ("*x", TextModifier.BOLD, False, "*x"),
        ("*x", TextModifier.ITALICS, True, "x"),
        ("**x", TextModifier.ITALICS, False, "**x"),
        ("~~", TextModifier.STRIKETHROUGH, True, ""),
        ("~x", TextModifier.STRIKETHROUGH, False, "~x"),
        ("__", TextModifier.UNDERLINE, True, ""),
        ("_", TextModifier.UNDERLINE, False, "_"),
        ("\nx", TextModifier.QUOTE, True, "\nx"),
        ("\n>x", TextModifier.QUOTE, True, "\n>x"),
        ("\n> x", TextModifier.QUOTE, False, "\n> x"),
        ("", TextModifier.QUOTE, True, ""),
        ("x", TextModifier.QUOTE, False, "x"),
        ("\nx", Heading(2), True, "\nx"),
        ("", Heading(2), True, ""),
        ("x", Heading(2), False, "x"),
    ],
)
def test_has_close_delimiter(data: str, modifier: ToggleModifier, expected: bool, rest: str):
    chars = PutBackChars(data)
    assert has_close_delimiter(chars, modifier) is expected
    assert read_all(chars) == rest


@pytest.mark.parametrize(
    ("modifier", "open_tag", "close_tag"),
    [
        (TextModifier.BOLD, "<b>", "</b>"),
        (TextModifier.QUOTE, "<blockquote>", "</blockquote>"),
        (Heading(4), "</p><h4>", "</h4><p>"),
    ],
)
def test_tags(modifier: ToggleModifier, open_tag: str, close_tag: str):
    assert modifier.open() == open_tag
    assert modifier.close() == close_tag


def test_heading_level_must_be_positive():
    with pytest.raises(ValueError):
        Heading(0)
