import functools
import inspect
import logging
from typing import Annotated, Optional

import typer

from s2i_scaffold.log import init_logging, stderr_console

log = logging.getLogger(__name__)


VerboseOption = Annotated[Optional[bool], typer.Option("--verbose", "-v", help="Print debug messages")]
QuietOption = Annotated[Optional[bool], typer.Option("--quiet", "-q", help="Only print errors")]


def verbosity_log_level(verbose: bool, quiet: bool) -> int:
    """Maps the --verbose and --quiet flags to a log level

    :raises typer.BadParameter: If both flags are set.
    """
    if verbose and quiet:
        raise typer.BadParameter("Cannot set both --verbose and --quiet flags.")
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def with_verbosity_flags(fn):
    """Adds --verbose and --quiet options to a command and sets up logging before it runs"""

    @functools.wraps(fn)
    def wrapper(*args, verbose: VerboseOption = False, quiet: QuietOption = False, **kwargs):
        init_logging(verbosity_log_level(verbose, quiet))
        return fn(*args, **kwargs)

    # Expose the flags in the signature typer inspects
    sig = inspect.signature(wrapper)
    flags = [
        inspect.Parameter(name, inspect.Parameter.KEYWORD_ONLY, default=False, annotation=annotation)
        for name, annotation in (("verbose", VerboseOption), ("quiet", QuietOption))
    ]
    wrapper.__signature__ = sig.replace(parameters=[*sig.parameters.values(), *flags])

    return wrapper


def make_value_map(value: list[str] | None) -> dict[str, str]:
    """Parses key=value option pairs into a dictionary"""
    value_map = dict()
    if value is not None:
        for v in value:
            sp = v.split("=", 1)
            if len(sp) != 2 or not sp[0]:
                stderr_console.print(f"❌ Expected key=value pair, got [bold]'{v}'", style="error")
                raise typer.Exit(code=1)
            if sp[0] in value_map:
                stderr_console.print(f"❌ Value [bold]'{sp[0]}'[/bold] given more than once", style="error")
                raise typer.Exit(code=1)
            value_map[sp[0]] = sp[1]
    return value_map
