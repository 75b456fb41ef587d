from confoosion.errors import ErrorKind, ParseError
from confoosion.markdown_parser import markdown_text_to_html
from confoosion.template import RenderResult, Template, TemplateRegistry


class TemplateDouble(Template):
    """``{{double|text}}`` renders ``text`` twice."""

    name: str = "double"

    def render(
        self, args: list[str], registry: TemplateRegistry, directory: str, depth: int
    ) -> RenderResult:
        if len(args) != 1:
            raise ParseError(
                ErrorKind.TEMPLATE_ARGUMENT,
                "{{double}} only accepts one argument, not %d" % len(args),
                detail=self.name,
            )
        parsed, exit_reason = markdown_text_to_html(args[0], registry, directory, depth=depth)
        parsed.html += parsed.html
        return (parsed, exit_reason)
