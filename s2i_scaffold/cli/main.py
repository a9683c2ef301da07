import typer

from s2i_scaffold.cli import create, templates, version
from s2i_scaffold.const import APP_NAME

app = typer.Typer(
    name=APP_NAME,
    no_args_is_help=True,
    rich_markup_mode="markdown",
    help="A tool for generating source-to-image builder image skeletons",
)

# Since "create" is a single command, we import the function directly rather than adding it as a typer subgroup
app.command(
    name="create",
    help="Create a new builder image skeleton (aliases: c, new)",
    rich_help_panel="Scaffolding",
)(create.create)
app.command(name="c", hidden=True)(create.create)
app.command(name="new", hidden=True)(create.create)

app.command(
    name="templates",
    help="List the available templates (aliases: ls)",
    rich_help_panel="Scaffolding",
)(templates.templates)
app.command(name="ls", hidden=True)(templates.templates)

app.command(name="version", help="Show the S2I Scaffold version")(version.version)
