"""
Logging helpers.

Every module obtains its logger through ``get_logger(__name__)``. Handlers are
installed once by ``setup_logging()`` (called from the CLI) so library use stays
silent unless the host application configures logging itself.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "biosample_analyzer"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name`` under the package hierarchy."""
    return logging.getLogger(name)


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> None:
    """
    Attach a RichHandler to the package root logger.

    Safe to call more than once; only the level is updated on later calls.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO")
        console: Optional rich Console (defaults to stderr)
    """
    global _configured

    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(level.upper())

    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.propagate = False
    _configured = True
