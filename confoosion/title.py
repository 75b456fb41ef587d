import logging
import os.path
from typing import Optional

import confoosion.markdown_parser
from confoosion.errors import ParseError
from confoosion.parsed_html import ExitReason
from confoosion.putback import PutBackChars
from confoosion.template import MAX_RECURSION_DEPTH, TemplateRegistry

logger = logging.getLogger(__name__)


def read_title_line(text: str) -> Optional[str]:
    """Return the text of a leading ``# heading`` line, escapes left as they are.

    Returns None unless the text starts with ``#`` and the line ends with an
    unescaped newline before any other unescaped ``#``.
    """
    chars = PutBackChars(text)
    if chars.next() != "#":
        return None
    line = ""
    while True:
        c = chars.next()
        if c is None or c == "#":
            return None
        if c == "\n":
            return line
        if c == "\\":
            escaped = chars.next()
            if escaped is None:
                return None
            c += escaped
        line += c


def resolve_title(
    path: str, max_depth: int = MAX_RECURSION_DEPTH, depth: int = 0
) -> Optional[str]:
    """Render the leading heading of the file at ``path`` as HTML.

    Templates are not available while rendering a title.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("cannot read title of %s: %s" % (path, e))
        return None

    line = read_title_line(text)
    if line is None:
        return None

    templates = TemplateRegistry(max_depth=max_depth)
    directory = os.path.dirname(path)
    try:
        parsed, exit_reason = confoosion.markdown_parser.markdown_text_to_html(
            line.strip(), templates, directory, depth=depth
        )
    except ParseError as e:
        logger.debug("cannot parse title of %s: %s" % (path, e))
        return None
    if exit_reason != ExitReason.END_OF_FILE:
        return None
    return parsed.html
