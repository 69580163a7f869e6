"""Stderr logging configuration."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "fortune_cookie"
LOG_FORMAT = "%(name)s: %(levelname)s: %(message)s"


def configure_logging(debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Install one stderr handler on the package logger, replacing earlier ones."""
    root = logging.getLogger(LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    return root
