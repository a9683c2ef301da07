import logging
import re
from typing import Mapping

import jinja2
from jinja2 import meta

from s2i_scaffold.const import REGEX_IMAGE_TAG_SUFFIX_ALLOWED_CHARACTERS_PATTERN
from s2i_scaffold.error import ScaffoldRenderError, ScaffoldTemplateError, UnresolvedPlaceholderError

log = logging.getLogger(__name__)


def raise_template_exception(message: str) -> None:
    """Raises a ScaffoldTemplateError with the provided message.

    :param message: The error message to raise.

    :raises ScaffoldTemplateError: Always raises a ScaffoldTemplateError with the provided message.
    """
    raise ScaffoldTemplateError(message)


def jinja2_env(**kwargs) -> jinja2.Environment:
    """Creates a Jinja2 environment with custom filters

    Placeholders that have no value raise instead of rendering empty, and generated files keep their final newline.

    :param kwargs: Additional keyword arguments to pass to the Jinja2 Environment constructor.
    :return: A Jinja2 Environment instance with custom filters added.
    """
    kwargs.setdefault("undefined", jinja2.StrictUndefined)
    kwargs.setdefault("keep_trailing_newline", True)
    env = jinja2.Environment(**kwargs)
    env.filters["tagSafe"] = lambda s: re.sub(REGEX_IMAGE_TAG_SUFFIX_ALLOWED_CHARACTERS_PATTERN, "-", s).strip("-._")
    env.filters["quote"] = lambda s: '"' + s + '"'
    env.globals["raise"] = raise_template_exception
    return env


def find_placeholders(body: str, env: jinja2.Environment | None = None) -> set[str]:
    """Returns the names of all placeholders a template body reads from its render context

    Text inside ``{% raw %}`` blocks and string literals such as ``{{ "{{" }}`` are not placeholders.

    :param body: The Jinja2 template source.
    :param env: The environment to parse with. Defaults to a new ``jinja2_env()``.
    :raises ScaffoldRenderError: If the body is not valid template syntax.
    """
    env = env or jinja2_env()
    try:
        ast = env.parse(body)
    except jinja2.TemplateSyntaxError as e:
        raise ScaffoldRenderError(e)
    return meta.find_undeclared_variables(ast) - set(env.globals)


class Renderer:
    """Substitutes render context values into template bodies in a single pass.

    Rendered values are inserted verbatim and never scanned for placeholders again.
    """

    def __init__(self, env: jinja2.Environment | None = None):
        self.env = env or jinja2_env()

    def missing(self, body: str, context: Mapping[str, str]) -> list[str]:
        """Returns the sorted placeholder names used by ``body`` that ``context`` does not define"""
        return sorted(find_placeholders(body, self.env) - set(context))

    def render(self, body: str, context: Mapping[str, str], name: str = None) -> str:
        """Renders a template body against a render context

        :param body: The Jinja2 template source.
        :param context: Values for every placeholder the body references.
        :param name: Optional template name used in error messages.

        :raises UnresolvedPlaceholderError: If any referenced placeholder is missing from the context.
        :raises ScaffoldRenderError: If the body fails to parse or render.
        """
        try:
            missing = self.missing(body, context)
        except ScaffoldRenderError as e:
            e.template = name
            raise
        if missing:
            raise UnresolvedPlaceholderError(missing, template=name)

        try:
            return self.env.from_string(body).render(context)
        except jinja2.UndefinedError as e:
            # Attribute or item lookups on a defined value can still be undefined at render time
            raise UnresolvedPlaceholderError([str(e)], template=name) from e
        except (jinja2.TemplateError, ScaffoldTemplateError) as e:
            raise ScaffoldRenderError(e, template=name)


def render_template(template: str, **kwargs) -> str:
    """Renders a Jinja2 template with the provided keyword arguments and custom filters added

    :param template: The Jinja2 template string to render.
    :param kwargs: Additional values to pass to the template for rendering.
    :return: The rendered template as a string, with leading and trailing whitespace removed.
    """
    return Renderer().render(template, kwargs).strip()
