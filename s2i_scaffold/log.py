import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

default_theme = Theme(
    {
        "info": "bright_blue",
        "error": "bright_red",
        "success": "green3",
        "warning": "yellow",
        "quiet": "bright_black",
    }
)

stdout_console = Console(theme=default_theme)
stderr_console = Console(stderr=True, theme=default_theme)


def init_logging(log_level: str | int = logging.INFO) -> None:
    """Routes log records through a rich handler on stderr

    Tracebacks show frames and locals only when debugging.

    :param log_level: Minimum level of records to show
    """
    debug = log_level in (logging.DEBUG, "DEBUG")

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=stderr_console,
                markup=True,
                rich_tracebacks=True,
                tracebacks_suppress=[typer],
                tracebacks_max_frames=20 if debug else 0,
                tracebacks_show_locals=debug,
            ),
        ],
        force=True,
    )
