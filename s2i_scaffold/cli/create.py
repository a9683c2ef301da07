import logging
import re
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from pydantic import ValidationError

from s2i_scaffold.cli.common import make_value_map, with_verbosity_flags
from s2i_scaffold.const import (
    DEFAULT_BASE_IMAGE,
    DEFAULT_TEST_PORT,
    ENV_VAR_PREFIX,
    REGEX_FULL_IMAGE_TAG_PATTERN,
    OverwritePolicy,
    TemplateGroup,
)
from s2i_scaffold.error import ScaffoldError, ScaffoldValidationErrorGroup
from s2i_scaffold.log import stderr_console, stdout_console
from s2i_scaffold.scaffold import RenderContext, ScaffoldRequest, scaffold
from s2i_scaffold.util import auto_path, nearest_existing_parent, try_get_repo_url

log = logging.getLogger(__name__)


def default_destination(image_name: str) -> Path:
    """Returns ``./<name>`` for an image reference, dropping any registry, namespace and tag."""
    match = re.match(REGEX_FULL_IMAGE_TAG_PATTERN, image_name)
    name = match.group("image").split("/")[-1] if match else image_name
    return auto_path() / name


@with_verbosity_flags
def create(
    image_name: Annotated[
        str, typer.Argument(show_default=False, help="The name of the builder image to create a skeleton for.")
    ],
    destination: Annotated[
        Optional[Path],
        typer.Argument(
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            show_default="./<image name>",
            help="The directory to generate the skeleton in. Created if it does not exist.",
        ),
    ] = None,
    base_image: Annotated[
        str,
        typer.Option(
            envvar=f"{ENV_VAR_PREFIX}_BASE_IMAGE",
            help="The base image used in the generated Dockerfile.",
            rich_help_panel="Template Values",
        ),
    ] = DEFAULT_BASE_IMAGE,
    test_port: Annotated[
        int,
        typer.Option(
            min=1,
            max=65535,
            envvar=f"{ENV_VAR_PREFIX}_TEST_PORT",
            help="The port the test application listens on.",
            rich_help_panel="Template Values",
        ),
    ] = int(DEFAULT_TEST_PORT),
    value: Annotated[
        Optional[List[str]],
        typer.Option(
            show_default=False,
            help="A 'key=value' pair to pass to the templates. Accepts multiple pairs.",
            rich_help_panel="Template Values",
        ),
    ] = None,
    tests: Annotated[
        bool,
        typer.Option("--tests/--no-tests", help="Generate the test harness.", rich_help_panel="Template Selection"),
    ] = True,
    builder: Annotated[
        bool,
        typer.Option(
            "--builder/--no-builder",
            help="Generate the Dockerfile, S2I scripts and README.",
            rich_help_panel="Template Selection",
        ),
    ] = True,
    template: Annotated[
        Optional[List[str]],
        typer.Option(
            "--template",
            "-t",
            show_default=False,
            help="Generate only the named template. Accepts multiple names and overrides group selection.",
            rich_help_panel="Template Selection",
        ),
    ] = None,
    policy: Annotated[
        OverwritePolicy,
        typer.Option(
            case_sensitive=False,
            envvar=f"{ENV_VAR_PREFIX}_POLICY",
            help="How to handle generated files that already exist.",
            rich_help_panel="Output",
        ),
    ] = OverwritePolicy.FAIL,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing files. Same as '--policy overwrite'.", rich_help_panel="Output"),
    ] = False,
) -> None:
    """Creates a skeleton for a new S2I builder image

    This tool will create the following structure in the destination directory:

    \b
    ```
    .
    └── destination/
        ├── Dockerfile
        ├── Makefile
        ├── README.md
        ├── s2i/
        │   └── bin/
        │       ├── assemble
        │       ├── run
        │       ├── save-artifacts
        │       └── usage
        └── test/
            ├── run
            └── test-app/
                └── index.html
    ```
    """
    value_map = make_value_map(value)
    if destination is None:
        destination = default_destination(image_name)
    if force:
        policy = OverwritePolicy.OVERWRITE

    groups = set()
    if builder:
        groups.add(TemplateGroup.BUILDER)
    if tests:
        groups.add(TemplateGroup.TESTS)
    if not groups and not template:
        stderr_console.print("❌ Nothing to generate, both --no-builder and --no-tests were given", style="error")
        raise typer.Exit(code=1)

    if "repo_url" not in value_map:
        value_map["repo_url"] = try_get_repo_url(nearest_existing_parent(destination))

    try:
        context = RenderContext(
            **{**value_map, "image_name": image_name, "base_image": base_image, "test_port": str(test_port)}
        )
        request = ScaffoldRequest(
            root=destination,
            context=context,
            policy=policy,
            groups=frozenset(groups),
            templates=template or None,
        )
    except ValidationError as e:
        log.debug("Invalid scaffold request", exc_info=e)
        stderr_console.print(f"❌ Invalid scaffold request for '{image_name}'", style="error")
        for error in e.errors():
            location = ".".join(str(loc) for loc in error["loc"])
            stderr_console.print(f"  - {location}: {error['msg']}", style="error", highlight=False)
        raise typer.Exit(code=1)

    try:
        result = scaffold(request)
    except ScaffoldValidationErrorGroup as e:
        stderr_console.print(str(e), style="error", highlight=False, markup=False)
        stderr_console.print(f"❌ Failed to create skeleton for '{image_name}'", style="error")
        raise typer.Exit(code=1)
    except ScaffoldError as e:
        stderr_console.print(f"❌ {e}", style="error", highlight=False, markup=False)
        for note in getattr(e, "__notes__", []):
            stderr_console.print(f"  {note}", style="error", highlight=False, markup=False)
        raise typer.Exit(code=1)

    stdout_console.print(result.table())
    if result.failed:
        stderr_console.print(f"❌ Failed to create skeleton for '{image_name}': {result.error}", style="error")
        raise typer.Exit(code=1)

    stderr_console.print(
        f"✅ Successfully created skeleton for '{image_name}' in '{result.root}' "
        f"({len(result.created)} created, {len(result.overwritten)} overwritten, {len(result.skipped)} skipped)",
        style="success",
        highlight=False,
    )
