"""Tests for s2i_scaffold.templating.render module."""

import jinja2
import pytest

from s2i_scaffold.error import ScaffoldRenderError, UnresolvedPlaceholderError
from s2i_scaffold.templating.render import Renderer, find_placeholders, jinja2_env, render_template

pytestmark = [pytest.mark.unit]


class TestJinja2Env:
    def test_strict_undefined(self):
        """Test that the environment raises on undefined values instead of rendering empty strings."""
        env = jinja2_env()
        assert env.undefined is jinja2.StrictUndefined
        with pytest.raises(jinja2.UndefinedError):
            env.from_string("{{ missing }}").render()

    def test_keeps_trailing_newline(self):
        """Test that the final newline of a template body is kept."""
        assert jinja2_env().from_string("line\n").render() == "line\n"

    def test_overrides(self):
        """Test that keyword arguments override the defaults."""
        env = jinja2_env(keep_trailing_newline=False)
        assert env.from_string("line\n").render() == "line"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("my app", "my-app"),
            ("quay.io/org/app", "quay.io-org-app"),
            ("-leading.and.trailing_", "leading.and.trailing"),
        ],
    )
    def test_tag_safe_filter(self, value, expected):
        """Test that tagSafe replaces characters not allowed in tags."""
        assert jinja2_env().from_string("{{ value | tagSafe }}").render(value=value) == expected

    def test_quote_filter(self):
        """Test that quote wraps a value in double quotes."""
        assert jinja2_env().from_string("{{ value | quote }}").render(value="x") == '"x"'


class TestFindPlaceholders:
    def test_simple(self):
        """Test that all referenced names are found."""
        assert find_placeholders("{{ image_name }} on {{ test_port }}") == {"image_name", "test_port"}

    def test_raw_blocks_and_literals_are_ignored(self):
        """Test that escaped delimiters are not reported as placeholders."""
        body = '{% raw %}{{ .State.Pid }}{% endraw %} {{ "{{" }} literal }}'
        assert find_placeholders(body) == set()

    def test_loop_variables_and_globals(self):
        """Test that names bound inside the template and environment globals are not placeholders."""
        body = "{% for item in items %}{{ item }}{% endfor %}{% if false %}{{ raise('x') }}{% endif %}"
        assert find_placeholders(body) == {"items"}

    def test_syntax_error(self):
        """Test that invalid template syntax raises a ScaffoldRenderError."""
        with pytest.raises(ScaffoldRenderError):
            find_placeholders("{{ unclosed")


class TestRenderer:
    def test_render(self):
        """Test that placeholders are substituted from the context."""
        assert Renderer().render("FROM {{ base_image }}\n", {"base_image": "ubi9"}) == "FROM ubi9\n"

    def test_missing_lists_every_placeholder(self):
        """Test that every missing placeholder is reported at once, sorted by name."""
        renderer = Renderer()
        body = "{{ zeta }} {{ image_name }} {{ alpha }}"
        assert renderer.missing(body, {"image_name": "x"}) == ["alpha", "zeta"]

        with pytest.raises(UnresolvedPlaceholderError) as exc_info:
            renderer.render(body, {"image_name": "x"}, name="readme")
        assert exc_info.value.placeholders == ["alpha", "zeta"]
        assert exc_info.value.template == "readme"

    def test_unused_context_values(self):
        """Test that extra context values that the body does not reference are ignored."""
        assert Renderer().render("static\n", {"image_name": "x"}) == "static\n"

    def test_escaped_delimiters_render_literally(self):
        """Test that raw blocks emit literal placeholder delimiters."""
        body = 'docker inspect --format="{% raw %}{{(index .NetworkSettings.Ports \\"{{ port }}/tcp\\" 0).HostIp}}{% endraw %}"'
        result = Renderer().render(body, {})
        assert result == 'docker inspect --format="{{(index .NetworkSettings.Ports \\"{{ port }}/tcp\\" 0).HostIp}}"'

    def test_values_are_not_rendered_again(self):
        """Test that a value containing placeholder syntax is inserted verbatim."""
        context = {"image_name": "{{ base_image }}", "base_image": "ubi9"}
        assert Renderer().render("{{ image_name }}", context) == "{{ base_image }}"

    def test_reserved_context_key(self):
        """Test that a context key named after a render argument does not break rendering."""
        assert Renderer().render("{{ image_name }}", {"self": "x", "image_name": "app"}) == "app"

    def test_values_are_not_escaped(self):
        """Test that HTML characters in values are left untouched."""
        assert Renderer().render("{{ v }}", {"v": "<b>&</b>"}) == "<b>&</b>"

    def test_undefined_attribute(self):
        """Test that an undefined attribute of a defined value is reported as unresolved."""
        with pytest.raises(UnresolvedPlaceholderError):
            Renderer().render("{{ image_name.nope }}", {"image_name": "x"}, name="dockerfile")

    def test_raise_global(self):
        """Test that the raise() global surfaces as a ScaffoldRenderError."""
        with pytest.raises(ScaffoldRenderError, match="port is required") as exc_info:
            Renderer().render("{{ raise('port is required') }}", {}, name="makefile")
        assert exc_info.value.template == "makefile"

    def test_syntax_error_names_template(self):
        """Test that a parse error reports the template name and line."""
        with pytest.raises(ScaffoldRenderError) as exc_info:
            Renderer().render("ok\n{% if %}", {}, name="makefile")
        assert exc_info.value.template == "makefile"
        assert "line 2" in str(exc_info.value)

    def test_custom_environment(self):
        """Test that a renderer uses the environment it was given."""
        env = jinja2_env()
        env.filters["shout"] = lambda s: s.upper()
        assert Renderer(env).render("{{ image_name | shout }}", {"image_name": "app"}) == "APP"


class TestRenderTemplate:
    def test_render_template_strips(self):
        """Test that render_template strips surrounding whitespace."""
        assert render_template("  {{ name }}\n\n", name="app") == "app"

    def test_render_template_missing(self):
        """Test that render_template raises for missing values."""
        with pytest.raises(UnresolvedPlaceholderError):
            render_template("{{ name }}")
