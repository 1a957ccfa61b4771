"""Console logging setup for programs embedding this library.

The library itself only logs through `logging`; nothing is configured on import.
"""

import logging

from rich import traceback
from rich.logging import RichHandler


def install(level: int | str = "NOTSET", show_locals: bool = False) -> RichHandler:
    """Use `rich` for tracebacks and log records on the root logger."""
    traceback.install(show_locals=show_locals)
    # Logged command output may contain square brackets, so markup stays off.
    handler = RichHandler(rich_tracebacks=True, omit_repeated_times=False)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    return handler
