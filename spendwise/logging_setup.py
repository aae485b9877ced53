"""Centralized logging configuration for the ``spendwise`` package.

- ``configure_logging(...)``: attach a single rich handler to the package
  root logger (``"spendwise"``). Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger by name, ensuring the package root
  logger has at least a ``NullHandler`` when nothing configured it.

Library modules never attach their own handlers.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_PKG_LOGGER_NAME = "spendwise"
_CONFIGURED = False

DEFAULT_LEVEL = logging.WARNING


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def parse_level(level: int | str | None) -> int:
    """Resolve a level name or number, falling back to SPENDWISE_LOG_LEVEL then WARNING."""
    if isinstance(level, int):
        return level
    if isinstance(level, str) and (resolved := _level_from_name(level)) is not None:
        return resolved
    env_val = os.getenv("SPENDWISE_LOG_LEVEL")
    if env_val and (resolved := _level_from_name(env_val)) is not None:
        return resolved
    return DEFAULT_LEVEL


def configure_logging(level: int | str | None = None, console: Console | None = None) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Level as int or name (e.g. "INFO"). If None, uses the
            SPENDWISE_LOG_LEVEL environment variable, else WARNING.
        console: Console the handler writes to. Defaults to stderr.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = parse_level(level)
    handler = RichHandler(console=console or Console(stderr=True), show_path=False, rich_tracebacks=False)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until configure_logging runs."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
