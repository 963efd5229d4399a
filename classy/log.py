# classy/log.py
"""
Logging setup for the command-line entry point.

stdout carries the book JSON back to mdBook, so every log record goes to
stderr. The level is read from ``CLASSY_LOG`` and then ``RUST_LOG`` (which
mdBook users already set for mdBook itself). Both accept a plain level name
(``debug``, ``warn``, ...) or comma-separated ``target=level`` directives, of
which only the ``classy`` target is honoured.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] (%(name)s): %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_ENV_VARS = ("CLASSY_LOG", "RUST_LOG")

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 1,
}

_handler = None


def parse_level(value, default=logging.INFO):
    """Turn a ``RUST_LOG`` style filter string into a logging level."""
    if not value:
        return default

    level = default
    for directive in value.split(","):
        directive = directive.strip().lower()
        if "=" in directive:
            target, _, name = (part.strip() for part in directive.partition("="))
            if target in ("classy", "mdbook_classy") and name in _LEVELS:
                return _LEVELS[name]
        elif directive in _LEVELS:
            level = _LEVELS[directive]
    return level


def configure_logging(stream=None):
    """Install the stderr handler on the root logger."""
    global _handler

    requested = next(
        (os.environ[var] for var in LOG_ENV_VARS if os.environ.get(var)), None
    )
    level = parse_level(requested)

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(_handler)
    root.setLevel(level)

    if requested is None:
        # pypandoc reports pandoc warnings at INFO/WARNING
        logging.getLogger("pypandoc").setLevel(logging.ERROR)

    return level
