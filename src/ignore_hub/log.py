"""
ignore_hub.log - Logging Setup
==============================

Diagnostics go through the standard :mod:`logging` module under the
``ignore_hub`` namespace and are rendered by rich on stderr, so they never
mix with ``--stdout`` output.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "ignore_hub"


def setup_logging(level: str = "WARNING", verbose: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the previous handler, so the CLI can run
    several times in one process (as the test runner does).

    Parameters
    ----------
    level : str
        Level name used when ``verbose`` is false.

    verbose : bool
        Force ``DEBUG``.

    Returns
    -------
    logging.Logger
        The configured ``ignore_hub`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else getattr(logging, level.upper()))
    logger.propagate = False
    return logger
