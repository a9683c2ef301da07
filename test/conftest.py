from pathlib import Path

import pytest
from typer.testing import CliRunner, Result

from s2i_scaffold.cli.main import app
from s2i_scaffold.const import TemplateGroup, TemplateMode
from s2i_scaffold.log import stderr_console, stdout_console
from s2i_scaffold.scaffold import RenderContext, ScaffoldRequest
from s2i_scaffold.templating import Template, TemplateRegistry


@pytest.fixture
def render_context():
    """Return a render context for the "myapp" image"""
    return RenderContext(image_name="myapp")


@pytest.fixture
def scaffold_root(tmp_path):
    """Return a path beneath the temporary directory that does not exist yet"""
    return tmp_path / "scaffold"


@pytest.fixture
def get_request(scaffold_root):
    """Return a function that builds a ScaffoldRequest for the temporary scaffold root"""

    def _get_request(image_name: str = "myapp", **kwargs) -> ScaffoldRequest:
        context = kwargs.pop("context", None) or RenderContext(image_name=image_name)
        return ScaffoldRequest(root=kwargs.pop("root", scaffold_root), context=context, **kwargs)

    return _get_request


@pytest.fixture
def simple_templates():
    """Return a small set of templates covering both modes and groups"""
    return [
        Template(
            name="script",
            body="#!/bin/sh\necho {{ image_name }}\n",
            path="bin/script",
            mode=TemplateMode.EXECUTABLE,
            group=TemplateGroup.TESTS,
        ),
        Template(name="config", body="image = {{ image_name }}\n", path="config.txt", group=TemplateGroup.BUILDER),
        Template(
            name="page",
            body="<h1>{{ image_name }}</h1>\n",
            path="site/index.html",
            group=TemplateGroup.TESTS,
        ),
    ]


@pytest.fixture
def simple_registry(simple_templates):
    """Return a registry of the simple templates"""
    return TemplateRegistry(simple_templates)


def list_files(root: Path) -> list[str]:
    """Return all regular files beneath root as sorted relative POSIX paths"""
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@pytest.fixture
def get_files():
    return list_files


@pytest.fixture
def wide_consoles(monkeypatch):
    """Widen the shared rich consoles so CLI output is not wrapped"""
    monkeypatch.setattr(stdout_console, "_width", 250)
    monkeypatch.setattr(stderr_console, "_width", 250)


class ScaffoldCommand:
    """Class representing an s2i-scaffold command"""

    def __init__(self):
        self.args: list[str] = []
        self.env: dict[str, str] = {"TERM": "dumb", "NO_COLOR": "true"}
        self.result: Result | None = None

    def __str__(self):
        return "s2i-scaffold " + " ".join(self.args)

    def add_args(self, args: list[str]):
        # Filter out empty strings
        self.args.extend(a for a in args if a)
        return self

    def run(self) -> Result:
        self.result = CliRunner().invoke(app, self.args, catch_exceptions=True, env=self.env)
        return self.result


@pytest.fixture
def scaffold_command(wide_consoles):
    """Return a fresh command with wide console output"""
    return ScaffoldCommand()


@pytest.fixture
def repo_url(mocker):
    """Pin the repository URL detection to a known value"""
    return mocker.patch("s2i_scaffold.cli.create.try_get_repo_url", return_value="github.com/example/builders")
