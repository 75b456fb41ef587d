import html
import logging
import os.path
from typing import Callable, Optional

import confoosion.title
from confoosion.delimiters import find_open_delimiter, has_close_delimiter
from confoosion.errors import ErrorKind, ParseError
from confoosion.modifiers import Delimiter, ExclusiveModifier, Heading, TextModifier, ToggleModifier
from confoosion.parsed_html import ExitReason, ParsedHTML
from confoosion.putback import PutBackChars
from confoosion.template import TemplateRegistry, read_template_argument

logger = logging.getLogger(__name__)

WIKILINK_EXTENSION = ".md"

_TERMINATORS: dict[ExclusiveModifier, ExitReason] = {
    ExclusiveModifier.END_OF_ARGUMENT: ExitReason.END_OF_ARGUMENT,
    ExclusiveModifier.END_OF_TEMPLATE: ExitReason.END_OF_TEMPLATE,
    ExclusiveModifier.END_OF_LINK: ExitReason.END_OF_LINK,
}

_STRAY_MESSAGES: dict[ExitReason, str] = {
    ExitReason.END_OF_ARGUMENT: "Stray argument separator",
    ExitReason.END_OF_TEMPLATE: "Stray template terminator",
    ExitReason.END_OF_LINK: "Stray link terminator",
}


class MarkdownParser(object):
    def __init__(
        self,
        chars: PutBackChars,
        templates: TemplateRegistry,
        directory: str = "",
        depth: int = 0,
        paragraphs: bool = False,
    ):
        if depth > templates.max_depth:
            raise ParseError.at(
                chars, ErrorKind.RECURSION_LIMIT_EXCEEDED, "Maximum recursion depth exceeded."
            )
        self.chars = chars
        self.templates = templates
        self.directory = directory
        self.depth = depth
        self.paragraphs = paragraphs  # wrap output in <p>...</p>
        self.parsed = ParsedHTML()
        self.modifier_stack: list[ToggleModifier] = []

    # Public Method ----------------------------------------------------------
    @classmethod
    def parse(
        cls, text: str, templates: TemplateRegistry, directory: str = "", depth: int = 0
    ) -> tuple[ParsedHTML, ExitReason]:
        parser = cls(PutBackChars(text), templates, directory, depth=depth)
        return parser.run_parse()

    # Private Parsing/Formatting Entrypoint ----------------------------------
    def run_parse(self) -> tuple[ParsedHTML, ExitReason]:
        try:
            return self._parse_loop()
        except RecursionError as e:
            # a template nested deeper than the reserved interpreter stack
            raise ParseError.at(
                self.chars,
                ErrorKind.RECURSION_LIMIT_EXCEEDED,
                "Maximum recursion depth exceeded.",
            ) from e

    def _parse_loop(self) -> tuple[ParsedHTML, ExitReason]:
        if self.paragraphs:
            self.parsed.add_html("<p>")

        while (c := self.chars.next()) is not None:
            self.chars.putback(c)
            if self.modifier_stack:
                top = self.modifier_stack[-1]
                if has_close_delimiter(self.chars, top):
                    self.modifier_stack.pop()
                    self.parsed.add_html(top.close())
                    continue

            delimiter = find_open_delimiter(self.chars)
            if delimiter is None:
                self.parsed.add_html(self.chars.next() or "")
                continue
            if delimiter in _TERMINATORS:
                return (self.parsed, _TERMINATORS[delimiter])
            self._dispatch(delimiter)

        # quotes and headings are also closed by the end of input
        while self.modifier_stack and has_close_delimiter(self.chars, self.modifier_stack[-1]):
            self.parsed.add_html(self.modifier_stack.pop().close())

        if self.modifier_stack:
            raise ParseError.at(
                self.chars,
                ErrorKind.UNCLOSED_MODIFIER,
                "Unclosed modifiers left on the stack: %s"
                % ", ".join([_modifier_name(m) for m in self.modifier_stack]),
            )
        if self.paragraphs:
            self.parsed.add_html("</p>")
        return (self.parsed, ExitReason.END_OF_FILE)

    def _dispatch(self, delimiter: Delimiter) -> None:
        if isinstance(delimiter, Heading):
            self._heading_handler(delimiter)
            return
        if isinstance(delimiter, TextModifier):
            self._toggle_handler(delimiter)
            return

        dispatcher: dict[ExclusiveModifier, Callable[[], None]] = {
            ExclusiveModifier.ESCAPE: self._escape_handler,
            ExclusiveModifier.TEMPLATE: self._template_handler,
            ExclusiveModifier.WIKI_LINK: self._wiki_link_handler,
            ExclusiveModifier.INLINE_CODE: self._inline_code_handler,
            ExclusiveModifier.CODE_BLOCK: self._code_block_handler,
            ExclusiveModifier.PARAGRAPH: self._paragraph_handler,
            ExclusiveModifier.LINK: self._link_handler,
            ExclusiveModifier.IMAGE: self._image_handler,
        }
        dispatcher[delimiter]()

    def _parse_fragment(self, text: str, construct: str) -> ParsedHTML:
        """Parse text taken out of the stream (heading, label) one level deeper."""
        parser = MarkdownParser(PutBackChars(text), self.templates, self.directory, self.depth + 1)
        parsed, reason = parser.run_parse()
        if reason != ExitReason.END_OF_FILE:
            raise ParseError.at(
                self.chars,
                ErrorKind.STRAY_TERMINATOR,
                "%s in %s." % (_STRAY_MESSAGES[reason], construct),
                detail=reason.value,
            )
        return parsed

    def _error(self, kind: ErrorKind, message: str, detail: Optional[str] = None) -> ParseError:
        return ParseError.at(self.chars, kind, message, detail=detail)

    # Private Replace Method -------------------------------------------------
    def _toggle_handler(self, modifier: TextModifier):
        """Handle bold, italics, strikethrough, underline and quote openers."""
        if modifier == TextModifier.QUOTE and modifier in self.modifier_stack:
            # "> " at the start of a line continues the open quote
            self.parsed.add_html("\n")
            return
        self.modifier_stack.append(modifier)
        self.parsed.add_html(modifier.open())

    def _heading_handler(self, heading: Heading):
        """Handle headings: # text"""
        raw_heading = ""
        while (c := self.chars.next()) is not None:
            if c == "\n":
                self.chars.putback(c)
                break
            raw_heading += c
        parsed_heading = self._parse_fragment(raw_heading.strip(), "heading")
        self.modifier_stack.append(heading)
        self.parsed.add_html(heading.open())
        self.parsed.merge(parsed_heading)

    def _escape_handler(self):
        """Handle backslash escapes."""
        c = self.chars.next()
        if c is None:
            raise self._error(
                ErrorKind.UNTERMINATED_CONSTRUCT,
                "File may not end with an escape character",
                detail="escape",
            )
        self.parsed.add_html(c)

    def _paragraph_handler(self):
        """Handle paragraph breaks (an empty line)."""
        self.parsed.add_html("</p><p>")

    def _template_handler(self):
        """Handle {{name|arg|...}} templates."""
        name, exit_reason = read_template_argument(self.chars)
        args: list[str] = []
        while exit_reason == ExitReason.END_OF_ARGUMENT:
            arg, exit_reason = read_template_argument(self.chars)
            args.append(arg)

        if exit_reason == ExitReason.END_OF_FILE:
            raise self._error(
                ErrorKind.UNTERMINATED_CONSTRUCT,
                "Unexpected file ending inside template",
                detail="template",
            )
        if exit_reason == ExitReason.END_OF_LINK:
            raise self._error(
                ErrorKind.MALFORMED_CLOSE, "Incorrectly closed template", detail="template"
            )

        name = name.strip()
        try:
            result, template_exit = self.templates.call(name, args, self.directory, self.depth)
        except ParseError as e:
            raise self._error(
                e.kind, "Error occurred while parsing template %s:\n%s" % (name, e.message), name
            ) from e
        if template_exit != ExitReason.END_OF_FILE:
            raise self._error(
                ErrorKind.TEMPLATE_CONTRACT_VIOLATION,
                "Template {{%s}} stopped with %s instead of end-of-file. This is a bug."
                % (name, template_exit.value),
                detail=name,
            )
        self.parsed.merge(result)

    def _wiki_link_handler(self):
        """Handle [[page]] and [[page|label]] links to other files."""
        name, exit_reason = read_template_argument(self.chars)
        label: Optional[str] = None
        if exit_reason == ExitReason.END_OF_ARGUMENT:
            label, exit_reason = read_template_argument(self.chars)
            if exit_reason == ExitReason.END_OF_ARGUMENT:
                raise self._error(
                    ErrorKind.TOO_MANY_ARGUMENTS,
                    "Wiki-links take at most two arguments",
                    detail="wiki-link",
                )

        if exit_reason == ExitReason.END_OF_FILE:
            raise self._error(
                ErrorKind.UNTERMINATED_CONSTRUCT,
                "Unexpected file ending inside wiki-link",
                detail="wiki-link",
            )
        if exit_reason == ExitReason.END_OF_TEMPLATE:
            raise self._error(
                ErrorKind.MALFORMED_CLOSE, "Incorrectly closed wiki-link", detail="wiki-link"
            )

        filename = name.strip() + WIKILINK_EXTENSION
        target = os.path.join(self.directory, filename)
        if label is not None:
            parsed_label = self._parse_fragment(label.strip(), "wiki-link label")
            text = parsed_label.html
        else:
            parsed_label = ParsedHTML()
            title = confoosion.title.resolve_title(target, self.templates.max_depth, self.depth + 1)
            if title is None:
                logger.debug("no title found in %s, use its filename" % target)
                text = filename
            else:
                text = title

        self.parsed.add_html('<a href="%s">%s</a>' % (html.escape(target), text))
        self.parsed.links_to.append(target)
        self.parsed.links_to += parsed_label.links_to
        self.parsed.parents += parsed_label.parents

    def _inline_code_handler(self):
        """Handle `inline code`."""
        code = ""
        while True:
            c = self.chars.next()
            if c is None:
                raise self._error(
                    ErrorKind.UNTERMINATED_CONSTRUCT,
                    "Unexpected file ending inside inline code",
                    detail="inline-code",
                )
            if c == "`":
                break
            if c == "\\":
                escaped = self.chars.next()
                if escaped == "`":
                    code += escaped
                    continue
                self.chars.putback_maybe(escaped)
            code += c
        self.parsed.add_html("<code>%s</code>" % code)

    def _code_block_handler(self):
        """Handle fenced code blocks.

        The rest of the opening line is the language. The block ends with a
        line holding exactly three backticks.
        """
        language = ""
        while (c := self.chars.next()) != "\n":
            if c is None:
                raise self._unterminated_code_block()
            language += c

        # body lines are read starting from their leading newline
        body = ""
        self.chars.putback("\n")
        while True:
            c = self.chars.next()
            if c is None:
                raise self._unterminated_code_block()
            if c != "\n":
                body += c
                continue

            backticks = ""
            while len(backticks) < 3 and (tick := self.chars.next()) is not None:
                if tick != "`":
                    self.chars.putback(tick)
                    break
                backticks += tick
            if backticks == "```":
                following = self.chars.next()
                self.chars.putback_maybe(following)
                if following is None or following == "\n":
                    break
            body += c + backticks

        language = language.strip()
        class_attr = ' class="%s"' % html.escape(language) if language else ""
        # drop the newline which ended the language line
        self.parsed.add_html("</p><pre><code%s>%s</code></pre><p>" % (class_attr, body[1:]))

    def _unterminated_code_block(self) -> ParseError:
        return self._error(
            ErrorKind.UNTERMINATED_CONSTRUCT,
            "Unexpected file ending inside code block",
            detail="code-block",
        )

    def _link_handler(self):
        """Handle [text](url) links."""
        parts = self._read_link_parts("[", "link")
        if parts is None:
            return
        text, url = parts
        parsed_text = self._parse_fragment(text, "link text")
        self.parsed.add_html('<a href="%s">' % html.escape(url.strip()))
        self.parsed.merge(parsed_text)
        self.parsed.add_html("</a>")

    def _image_handler(self):
        """Handle ![alt](src) images."""
        parts = self._read_link_parts("![", "image")
        if parts is None:
            return
        alt, src = parts
        self.parsed.add_html(
            '<img src="%s" alt="%s">' % (html.escape(src.strip()), html.escape(_unescape(alt)))
        )

    def _read_link_parts(self, opener: str, construct: str) -> Optional[tuple[str, str]]:
        """Read the ``text](url)`` part of a link or an image.

        Without a parenthesis right after the bracket, the opener is emitted
        as text, the rest is pushed back and None is returned.
        """
        text = self._read_until("]", construct)
        c = self.chars.next()
        if c != "(":
            self.chars.putback_maybe(c)
            self.chars.putback("]")
            self.chars.putback_str(text)
            self.parsed.add_html(opener)
            return None
        url = self._read_until(")", construct + " target")
        return (text, url)

    def _read_until(self, terminator: str, construct: str) -> str:
        """Read raw text up to an unescaped terminator; escapes are kept."""
        text = ""
        while True:
            c = self.chars.next()
            if c is None:
                raise self._error(
                    ErrorKind.UNTERMINATED_CONSTRUCT,
                    "Unexpected file ending inside %s" % construct,
                    detail=construct,
                )
            if c == terminator:
                return text
            if c == "\\":
                escaped = self.chars.next()
                if escaped is None:
                    raise self._error(
                        ErrorKind.UNTERMINATED_CONSTRUCT,
                        "File may not end with an escape character",
                        detail="escape",
                    )
                c += escaped
            text += c


def _unescape(text: str) -> str:
    unescaped = ""
    escaping = False
    for c in text:
        if c == "\\" and not escaping:
            escaping = True
            continue
        escaping = False
        unescaped += c
    return unescaped


def _modifier_name(modifier: ToggleModifier) -> str:
    if isinstance(modifier, Heading):
        return "heading%d" % modifier.level
    return modifier.name.lower()


def markdown_text_to_html(
    text: str, templates: TemplateRegistry, directory: str = "", depth: int = 0
) -> tuple[ParsedHTML, ExitReason]:
    """Parse a fragment, e.g. a template argument. No paragraph is opened."""
    return MarkdownParser.parse(text, templates, directory, depth=depth)


def markdown_document_to_html(
    text: str, templates: TemplateRegistry, directory: str = ""
) -> ParsedHTML:
    chars = PutBackChars(text, primed=True)
    parser = MarkdownParser(chars, templates, directory, paragraphs=True)
    parsed, exit_reason = parser.run_parse()
    if exit_reason != ExitReason.END_OF_FILE:
        raise ParseError.at(
            chars, ErrorKind.STRAY_TERMINATOR, _STRAY_MESSAGES[exit_reason], exit_reason.value
        )
    return parsed


def parent_directory(path: str) -> str:
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(directory):
        raise ParseError(
            ErrorKind.PATH_RESOLUTION_FAILURE,
            "Cannot resolve the parent directory of %s" % path,
            detail=path,
        )
    return directory


def markdown_file_to_html(path: str, templates: TemplateRegistry) -> ParsedHTML:
    directory = parent_directory(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(
            ErrorKind.IO_FAILURE, "Cannot read %s: %s" % (path, e), detail=path
        ) from e
    logger.debug("parse %s (base directory: %s)" % (path, directory))
    return markdown_document_to_html(text, templates, directory)
