from __future__ import annotations

import enum
import logging
import sys
from abc import ABCMeta, abstractmethod
from typing import Callable, Optional, Union

from confoosion.errors import ErrorKind, ParseError
from confoosion.parsed_html import ExitReason, ParsedHTML
from confoosion.putback import PutBackChars

logger = logging.getLogger(__name__)

MAX_RECURSION_DEPTH = 128
MAX_RECURSION_DEPTH_LIMIT = 1024

# upper bound of interpreter frames used by one nesting level
_FRAMES_PER_LEVEL = 16
_BASE_FRAMES = 1000

RenderResult = tuple[ParsedHTML, ExitReason]
RenderFunction = Callable[[list[str], "TemplateRegistry", str, int], RenderResult]


class Template(metaclass=ABCMeta):
    name: str = ""

    @abstractmethod
    def render(
        self, args: list[str], registry: TemplateRegistry, directory: str, depth: int
    ) -> RenderResult:
        """Render raw template arguments.

        ``depth`` is the nesting depth the rendered text must be parsed at.
        A well-behaved template returns ``ExitReason.END_OF_FILE``.
        """
        pass


class FunctionTemplate(Template):
    def __init__(self, name: str, function: RenderFunction):
        self.name = name
        self.function = function

    def render(
        self, args: list[str], registry: TemplateRegistry, directory: str, depth: int
    ) -> RenderResult:
        return self.function(args, registry, directory, depth)


class TemplateRegistry(object):
    def __init__(self, max_depth: int = MAX_RECURSION_DEPTH):
        self.templates: dict[str, Template] = {}
        self.max_depth = max_depth
        reserve_stack(max_depth)

    def __contains__(self, name: str) -> bool:
        return name in self.templates

    def __len__(self) -> int:
        return len(self.templates)

    def register(self, name: str, template: Union[Template, RenderFunction]) -> bool:
        """Register a template; return False when it replaced an existing one."""
        if not isinstance(template, Template):
            template = FunctionTemplate(name, template)
        is_new = name not in self.templates
        if not is_new:
            logger.warning("template '%s' is overridden" % name)
        self.templates[name] = template
        return is_new

    def call(self, name: str, args: list[str], directory: str, depth: int) -> RenderResult:
        if depth >= self.max_depth:
            raise ParseError(
                ErrorKind.RECURSION_LIMIT_EXCEEDED, "Maximum template recursion depth exceeded."
            )
        template = self.templates.get(name)
        if template is None:
            raise ParseError(
                ErrorKind.TEMPLATE_NOT_FOUND, "Template {{%s}} not found" % name, detail=name
            )
        logger.debug("call template: name=%s args=%r depth=%d" % (name, args, depth))
        return template.render(args, self, directory, depth + 1)


class NestKind(enum.Enum):
    TEMPLATE = ("{", "}")
    WIKI_LINK = ("[", "]")

    @property
    def opener(self) -> str:
        return self.value[0]

    @property
    def closer(self) -> str:
        return self.value[1]


_TERMINATORS = {
    "]": ExitReason.END_OF_LINK,
    "}": ExitReason.END_OF_TEMPLATE,
}


def _next_is(chars: PutBackChars, expected: str) -> bool:
    c = chars.next()
    if c == expected:
        return True
    chars.putback_maybe(c)
    return False


def read_template_argument(chars: PutBackChars) -> tuple[str, ExitReason]:
    """Read one raw argument of a template or a wiki-link.

    Nested ``{{...}}`` and ``[[...]]`` are kept as they are, so separators
    inside them don't end the argument.
    """
    arg = ""
    stack: list[NestKind] = []

    while (c := chars.next()) is not None:
        if c == "\\":
            escaped = chars.next()
            if escaped is None:
                raise ParseError.at(
                    chars,
                    ErrorKind.UNTERMINATED_CONSTRUCT,
                    "Stray escape character and end of file inside template or wiki-link.",
                    detail="escape",
                )
            arg += c + escaped
            continue

        if stack:
            if c == stack[-1].closer and _next_is(chars, c):
                stack.pop()
                arg += c + c
                continue
        elif c == "|":
            return (arg, ExitReason.END_OF_ARGUMENT)
        elif c in _TERMINATORS:
            if not _next_is(chars, c):
                raise ParseError.at(
                    chars,
                    ErrorKind.MALFORMED_CLOSE,
                    "Lone “%s” inside link or template" % c,
                )
            return (arg, _TERMINATORS[c])

        nest = _opened_nest(c)
        if nest is not None and _next_is(chars, c):
            stack.append(nest)
            arg += c + c
            continue
        arg += c

    return (arg, ExitReason.END_OF_FILE)


def _opened_nest(c: str) -> Optional[NestKind]:
    for kind in NestKind:
        if kind.opener == c:
            return kind
    return None


def reserve_stack(max_depth: int) -> None:
    """Raise the interpreter recursion limit so that ``max_depth`` levels fit."""
    needed = _BASE_FRAMES + max_depth * _FRAMES_PER_LEVEL
    if sys.getrecursionlimit() < needed:
        logger.debug("raise recursion limit to %d" % needed)
        sys.setrecursionlimit(needed)
