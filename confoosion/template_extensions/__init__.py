from typing import Iterable, Optional, Type

from confoosion.template import Template, TemplateRegistry

from .double import TemplateDouble
from .parent import TemplateParent

_template_extensions: dict[str, Type[Template]] = {}


def get_template(name: str) -> Optional[Type[Template]]:
    global _template_extensions
    return _template_extensions.get(name)


def available_templates() -> list[str]:
    global _template_extensions
    return sorted(_template_extensions.keys())


def register_template_extension(template: Type[Template]):
    global _template_extensions

    if template.name in _template_extensions:
        raise AssertionError("template name='%s' is already registered" % template.name)
    _template_extensions[template.name] = template


def build_registry(names: Iterable[str], max_depth: int) -> TemplateRegistry:
    registry = TemplateRegistry(max_depth=max_depth)
    for name in names:
        template = get_template(name)
        if template is None:
            raise ValueError(
                "unknown template: %s (available: %s)" % (name, ", ".join(available_templates()))
            )
        registry.register(name, template())
    return registry


register_template_extension(TemplateDouble)
register_template_extension(TemplateParent)
