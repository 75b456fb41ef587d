import logging
import os.path
from typing import Optional

import attr
import jinja2

from confoosion.config import Config
from confoosion.markdown_parser import markdown_file_to_html
from confoosion.parsed_html import ParsedHTML
from confoosion.template_extensions import build_registry
from confoosion.title import resolve_title

logger = logging.getLogger(__name__)


@attr.s(frozen=True)
class PageInfo:
    filepath: str = attr.ib()
    title: str = attr.ib()
    links_to: list[str] = attr.ib(factory=list)
    parents: list[str] = attr.ib(factory=list)


class Confoosion(object):
    def __init__(self, config: Optional[Config] = None):
        if config is not None:
            self.config = config
        else:
            self.config = Config()

        parser_config = self.config.parser_config
        self.templates = build_registry(parser_config.templates, parser_config.max_recursion_depth)

        output_config = self.config.output_config
        if output_config.template_file:
            tmpl_dir, tmpl_file = os.path.split(output_config.template_file)
            env = jinja2.Environment(loader=jinja2.FileSystemLoader(tmpl_dir))
        else:
            tmpl_file = "page.tmpl"
            env = jinja2.Environment(loader=jinja2.PackageLoader("confoosion", "templates"))
        self.page_tmpl = env.get_template(tmpl_file)

    def convert_file(self, src: str) -> ParsedHTML:
        logger.info("+ Convert File: %s" % src)
        parsed = markdown_file_to_html(src, self.templates)
        logger.debug("++ links to: %r" % parsed.links_to)
        logger.debug("++ parents: %r" % parsed.parents)
        return parsed

    def render_page(self, page: PageInfo, content: str) -> str:
        return self.page_tmpl.render(page=page, content=content)

    def convert(self, src: str, dst: Optional[str] = None) -> str:
        parsed = self.convert_file(src)
        if self.config.output_config.standalone:
            title = resolve_title(src, self.templates.max_depth)
            page = PageInfo(
                filepath=src,
                title=title if title is not None else os.path.basename(src),
                links_to=parsed.links_to,
                parents=parsed.parents,
            )
            output = self.render_page(page, parsed.html)
        else:
            output = parsed.html

        if dst is not None:
            logger.info("++ output: %s" % dst)
            with open(dst, "w", encoding="utf-8") as f:
                f.write(output)
        logger.info("++ done.")
        return output
