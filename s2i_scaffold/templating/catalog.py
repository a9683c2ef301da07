"""The builder-image templates shipped with the package.

Bodies live as ``*.jinja2`` files next to this module and are loaded once at import time.
"""

import os
from pathlib import Path

from s2i_scaffold.const import TemplateGroup, TemplateMode
from s2i_scaffold.templating.registry import Template, TemplateRegistry

TEMPLATE_DIR: Path = Path(os.path.dirname(os.path.realpath(__file__))) / "templates"

TPL_DOCKERFILE = (TEMPLATE_DIR / "Dockerfile.jinja2").read_text()
TPL_ASSEMBLE = (TEMPLATE_DIR / "assemble.jinja2").read_text()
TPL_RUN = (TEMPLATE_DIR / "run.jinja2").read_text()
TPL_USAGE = (TEMPLATE_DIR / "usage.jinja2").read_text()
TPL_SAVE_ARTIFACTS = (TEMPLATE_DIR / "save-artifacts.jinja2").read_text()
TPL_README = (TEMPLATE_DIR / "README.md.jinja2").read_text()
TPL_TEST_RUN = (TEMPLATE_DIR / "test-run.jinja2").read_text()
TPL_MAKEFILE = (TEMPLATE_DIR / "Makefile.jinja2").read_text()
TPL_INDEX_HTML = (TEMPLATE_DIR / "index.html.jinja2").read_text()

DEFAULT_TEMPLATES: list[Template] = [
    Template(
        name="dockerfile",
        body=TPL_DOCKERFILE,
        path="Dockerfile",
        group=TemplateGroup.BUILDER,
        description="Builds the builder image.",
    ),
    Template(
        name="s2i-assemble",
        body=TPL_ASSEMBLE,
        path="s2i/bin/assemble",
        mode=TemplateMode.EXECUTABLE,
        group=TemplateGroup.BUILDER,
        description="Builds application source inside the builder.",
    ),
    Template(
        name="s2i-run",
        body=TPL_RUN,
        path="s2i/bin/run",
        mode=TemplateMode.EXECUTABLE,
        group=TemplateGroup.BUILDER,
        description="Starts the built application.",
    ),
    Template(
        name="s2i-usage",
        body=TPL_USAGE,
        path="s2i/bin/usage",
        mode=TemplateMode.EXECUTABLE,
        group=TemplateGroup.BUILDER,
        description="Prints builder usage.",
    ),
    Template(
        name="s2i-save-artifacts",
        body=TPL_SAVE_ARTIFACTS,
        path="s2i/bin/save-artifacts",
        mode=TemplateMode.EXECUTABLE,
        group=TemplateGroup.BUILDER,
        description="Streams artifacts for incremental builds.",
    ),
    Template(
        name="readme",
        body=TPL_README,
        path="README.md",
        group=TemplateGroup.BUILDER,
        description="Describes the builder project.",
    ),
    Template(
        name="test-run-script",
        body=TPL_TEST_RUN,
        path="test/run",
        mode=TemplateMode.EXECUTABLE,
        group=TemplateGroup.TESTS,
        description="Integration test for the candidate image.",
    ),
    Template(
        name="makefile",
        body=TPL_MAKEFILE,
        path="Makefile",
        group=TemplateGroup.TESTS,
        description="Build and test targets.",
    ),
    Template(
        name="index-html",
        body=TPL_INDEX_HTML,
        path="test/test-app/index.html",
        group=TemplateGroup.TESTS,
        description="Sample page served by the test application.",
    ),
]

DEFAULT_REGISTRY = TemplateRegistry(DEFAULT_TEMPLATES)
