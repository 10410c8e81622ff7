# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Opt-in logging setup for netrc_parser.

The library only creates loggers. Applications and scripts that want to
see its messages call ``setup_logging``, which attaches a rich console
handler to the ``netrc_parser`` logger. Debug output can also be turned
on with ``NETRC_PARSER_DEBUG=1``.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ENV_DEBUG = "NETRC_PARSER_DEBUG"
LOGGER_NAME = "netrc_parser"

_TRUTHY = {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """Return True if debug output was requested through the environment."""
    return os.getenv(ENV_DEBUG, "").strip().lower() in _TRUTHY


def setup_logging(
    debug: Optional[bool] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Attach a rich handler to the package logger.

    Calling it again replaces the handler installed by a previous call.

    Args:
        debug: Log at DEBUG level; read from ``NETRC_PARSER_DEBUG`` when None.
        console: Console to write to; stderr when omitted.

    Returns:
        The package logger.
    """
    if debug is None:
        debug = debug_enabled()

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return logger


__all__ = ["ENV_DEBUG", "debug_enabled", "setup_logging"]
