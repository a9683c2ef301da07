import logging
from typing import Annotated, Optional

import typer
from rich.table import Table

from s2i_scaffold.const import TemplateGroup
from s2i_scaffold.log import stderr_console, stdout_console
from s2i_scaffold.templating import DEFAULT_REGISTRY, in_groups

log = logging.getLogger(__name__)


def templates(
    group: Annotated[
        Optional[TemplateGroup],
        typer.Option(case_sensitive=False, help="Only list templates in this group."),
    ] = None,
) -> None:
    """Lists the templates a skeleton can be generated from."""
    predicate = in_groups([group]) if group is not None else None
    selected = DEFAULT_REGISTRY.list(predicate)

    if not selected:
        stderr_console.print("No templates found matching the specified group.", style="warning")
        return

    table = Table(title="Templates")
    table.add_column("Name", justify="left")
    table.add_column("Path", justify="left")
    table.add_column("Mode", justify="left")
    table.add_column("Group", justify="left")
    table.add_column("Description", justify="left")
    for tpl in selected:
        table.add_row(tpl.name, str(tpl.path), tpl.mode.value, tpl.group.value, tpl.description)
    stdout_console.print(table)
