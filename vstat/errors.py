"""Exceptions raised by vstat."""

from __future__ import annotations


class VstatError(Exception):
    """Base class for vstat errors."""


class NoDataError(VstatError):
    """Raised when a single-shot read returns no data."""


class ConfigError(VstatError):
    """Raised when the configuration is invalid."""
