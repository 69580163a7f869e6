"""Logging setup for the command-line entrypoints."""

from .console import LOGGER_NAME, configure_logging

__all__ = ["LOGGER_NAME", "configure_logging"]
