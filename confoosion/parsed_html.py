import enum

import attr


class ExitReason(enum.Enum):
    """Why a parse of a character stream stopped."""

    END_OF_ARGUMENT = "end-of-argument"
    END_OF_TEMPLATE = "end-of-template"
    END_OF_LINK = "end-of-link"
    END_OF_FILE = "end-of-file"


@attr.s(slots=True)
class ParsedHTML(object):
    html: str = attr.ib(default="")
    links_to: list[str] = attr.ib(default=attr.Factory(list))
    parents: list[str] = attr.ib(default=attr.Factory(list))

    def add_html(self, html: str) -> None:
        self.html += html

    def merge(self, other: "ParsedHTML") -> None:
        self.html += other.html
        self.links_to += other.links_to
        self.parents += other.parents
