from confoosion.errors import ErrorKind, ParseError
from confoosion.parsed_html import ExitReason, ParsedHTML
from confoosion.template import RenderResult, Template, TemplateRegistry


class TemplateParent(Template):
    """``{{parent|PageA|PageB}}`` records parent pages and renders nothing."""

    name: str = "parent"

    def render(
        self, args: list[str], registry: TemplateRegistry, directory: str, depth: int
    ) -> RenderResult:
        parents = [arg.strip() for arg in args]
        if not parents or not all(parents):
            raise ParseError(
                ErrorKind.TEMPLATE_ARGUMENT,
                "{{parent}} needs one or more non-empty page names",
                detail=self.name,
            )
        return (ParsedHTML(parents=parents), ExitReason.END_OF_FILE)
