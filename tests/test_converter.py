import logging
import os.path

import pytest

from confoosion.config import load_config
from confoosion.converter import Confoosion
from confoosion.errors import ErrorKind, ParseError

from .conftest import WikiDirFixture, WritePageFixture


def test_convert(write_page: WritePageFixture):
    src = write_page("page.md", "# Title\n**bold** [[other]]")
    converter = Confoosion()
    target = os.path.join(os.path.dirname(src), "other.md")
    expected = '<p></p><h1>Title</h1><p>\n<b>bold</b> <a href="%s">other.md</a></p>' % target
    assert converter.convert(src) == expected


def test_convert_file(write_page: WritePageFixture):
    src = write_page("sub/page.md", "{{parent|index.md}}[[a]][[b|B]]")
    parsed = Confoosion().convert_file(src)
    directory = os.path.dirname(src)
    assert parsed.links_to == [os.path.join(directory, "a.md"), os.path.join(directory, "b.md")]
    assert parsed.parents == ["index.md"]


def test_convert_standalone(write_page: WritePageFixture):
    src = write_page("page.md", "# A *nice* page\n{{parent|index.md}}text")
    converter = Confoosion(config=load_config({"output_config": {"standalone": True}}))
    output = converter.convert(src)
    assert "<title>A nice page</title>" in output
    assert '<link rel="up" href="index.md">' in output
    assert "<h1>A <i>nice</i> page</h1>" in output
    assert output.startswith("<!DOCTYPE html>")


def test_convert_standalone_without_title(write_page: WritePageFixture):
    src = write_page("untitled.md", "text")
    converter = Confoosion(config=load_config({"output_config": {"standalone": True}}))
    assert "<title>untitled.md</title>" in converter.convert(src)


def test_convert_custom_template(wiki_dir: WikiDirFixture, write_page: WritePageFixture):
    tmpl = write_page("custom.tmpl", "[{{ page.title }}] {{ content }}")
    src = write_page("page.md", "# T\nx")
    config = load_config({"output_config": {"standalone": True, "template_file": tmpl}})
    assert Confoosion(config=config).convert(src) == "[T] <p></p><h1>T</h1><p>\nx</p>"


def test_convert_to_file(wiki_dir: WikiDirFixture, write_page: WritePageFixture, caplog):
    caplog.set_level(logging.INFO, logger="confoosion")
    src = write_page("page.md", "text")
    dst = os.path.join(wiki_dir, "page.html")
    output = Confoosion().convert(src, dst)
    with open(dst, "r", encoding="utf-8") as f:
        assert f.read() == output
    assert "+ Convert File: %s" % src in caplog.messages
    assert "++ done." in caplog.messages


def test_convert_missing_file(wiki_dir: WikiDirFixture):
    with pytest.raises(ParseError) as excinfo:
        Confoosion().convert(os.path.join(wiki_dir, "missing.md"))
    assert excinfo.value.kind == ErrorKind.IO_FAILURE


def test_unknown_template():
    with pytest.raises(ValueError) as excinfo:
        Confoosion(config=load_config({"parser_config": {"templates": ["nope"]}}))
    assert str(excinfo.value) == "unknown template: nope (available: double, parent)"


def test_disabled_template(write_page: WritePageFixture):
    src = write_page("page.md", "{{double|x}}")
    converter = Confoosion(config=load_config({"parser_config": {"templates": ["parent"]}}))
    with pytest.raises(ParseError) as excinfo:
        converter.convert(src)
    assert excinfo.value.kind == ErrorKind.TEMPLATE_NOT_FOUND


def test_convert_deep_nesting_with_large_budget(write_page: WritePageFixture):
    nesting = 401
    src = write_page("page.md", "{{double|" * nesting + "x" + "}}" * nesting)
    converter = Confoosion(config=load_config({"parser_config": {"max_recursion_depth": 400}}))
    with pytest.raises(ParseError) as excinfo:
        converter.convert(src)
    assert excinfo.value.kind == ErrorKind.RECURSION_LIMIT_EXCEEDED


def test_convert_unresolvable_directory(wiki_dir: WikiDirFixture):
    src = os.path.join(wiki_dir, "missing", "page.md")
    with pytest.raises(ParseError) as excinfo:
        Confoosion().convert(src)
    assert excinfo.value.kind == ErrorKind.PATH_RESOLUTION_FAILURE
    assert excinfo.value.detail == src
