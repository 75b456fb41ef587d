from typing import Callable, TypeAlias

import pytest

from confoosion.markdown_parser import markdown_document_to_html
from confoosion.template import TemplateRegistry

ConvertFixture: TypeAlias = Callable[[str], str]


@pytest.fixture
def convert(templates: TemplateRegistry) -> ConvertFixture:
    def factory(text: str) -> str:
        return markdown_document_to_html(text, templates).html

    return factory
