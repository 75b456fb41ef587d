import logging
import os
from typing import Callable, Iterator, TypeAlias

import pytest

from confoosion.template import TemplateRegistry
from confoosion.template_extensions import build_registry


@pytest.fixture
def templates() -> TemplateRegistry:
    return build_registry(["double", "parent"], max_depth=128)


@pytest.fixture
def empty_templates() -> TemplateRegistry:
    return TemplateRegistry()


WikiDirFixture: TypeAlias = str


@pytest.fixture
def wiki_dir(tmp_path) -> WikiDirFixture:
    return str(tmp_path)


WritePageFixture: TypeAlias = Callable[[str, str], str]


@pytest.fixture
def write_page(wiki_dir: WikiDirFixture) -> WritePageFixture:
    def factory(name: str, content: str) -> str:
        path = os.path.join(wiki_dir, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    return factory


@pytest.fixture(autouse=True)
def reset_app_logger() -> Iterator[None]:
    yield
    app_logger = logging.getLogger("confoosion")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)
