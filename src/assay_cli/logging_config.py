"""Logging setup for the ``assay`` process.

Diagnostics go to stderr through the stdlib :mod:`logging` package so
they never mix with payloads printed on stdout.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

DEBUG_ENV_VARS: tuple[str, ...] = ("ASSAY_DEBUG", "DEBUG")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def debug_requested(environ: Mapping[str, str] | None = None) -> bool:
    env = environ if environ is not None else os.environ
    return any(env.get(name) for name in DEBUG_ENV_VARS)


def configure_logging(verbose: bool = False, environ: Mapping[str, str] | None = None) -> None:
    """Attach a single stderr handler to the ``assay_cli`` logger.

    The level is WARNING unless *verbose* is set or one of
    :data:`DEBUG_ENV_VARS` is non-empty, in which case it is DEBUG.
    Calling this more than once replaces the previous handler.
    """
    level = logging.DEBUG if verbose or debug_requested(environ) else logging.WARNING

    logger = logging.getLogger("assay_cli")
    for handler in list(logger.handlers):
        if getattr(handler, "_assay_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._assay_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
