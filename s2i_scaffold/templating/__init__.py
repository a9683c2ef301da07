from s2i_scaffold.templating.catalog import DEFAULT_REGISTRY, DEFAULT_TEMPLATES, TEMPLATE_DIR
from s2i_scaffold.templating.registry import Template, TemplateRegistry, in_groups
from s2i_scaffold.templating.render import Renderer, find_placeholders, jinja2_env, render_template

__all__ = [
    "DEFAULT_REGISTRY",
    "DEFAULT_TEMPLATES",
    "TEMPLATE_DIR",
    "Renderer",
    "Template",
    "TemplateRegistry",
    "find_placeholders",
    "in_groups",
    "jinja2_env",
    "render_template",
]
