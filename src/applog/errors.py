"""Exceptions raised by the log writer."""

from __future__ import annotations


class LogError(Exception):
    """Base class for failures surfaced by applog."""


class IOFailure(LogError):
    """The log file could not be opened, appended to, or deleted."""


class FormatFailure(LogError):
    """A placeholder referenced an argument that was not supplied."""
