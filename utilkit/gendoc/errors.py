"""Exceptions raised by the doc generator pipeline."""

from __future__ import annotations


class GendocError(RuntimeError):
    """Base class for fatal generator failures."""


class DiscoveryError(GendocError):
    """Raised when the source glob pattern cannot be evaluated."""


class ReadError(GendocError):
    """Raised when a required source or template file cannot be read."""


class WriteError(GendocError):
    """Raised when the output destination cannot be created or written."""


class ConfigError(GendocError):
    """Raised when the configuration file cannot be parsed."""


__all__ = ["ConfigError", "DiscoveryError", "GendocError", "ReadError", "WriteError"]
