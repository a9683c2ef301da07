import typer

from s2i_scaffold import __version__
from s2i_scaffold.log import stdout_console


def version():
    """Display the version of S2I Scaffold"""
    stdout_console.print(f"S2I Scaffold v{__version__}", highlight=False)
    raise typer.Exit()
