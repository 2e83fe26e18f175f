"""Logging configuration for the sfab command line."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

_LOG_LEVEL_ENV = "SFAB_LOG_LEVEL"

console = Console(stderr=True)


def _resolve_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    level_name = os.getenv(_LOG_LEVEL_ENV, "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger once with a Rich handler.

    Args:
        verbose: Log per-file progress (DEBUG)
    """
    root_logger = logging.getLogger()

    handler = next(
        (h for h in root_logger.handlers if getattr(h, "_sfab_managed", False)),
        None,
    )
    if handler is None:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._sfab_managed = True
        root_logger.addHandler(handler)

    root_logger.setLevel(_resolve_level(verbose))
    logging.captureWarnings(True)
