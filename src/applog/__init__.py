"""applog: shared rolling append log with severity tags and live subscribers."""

from __future__ import annotations

__version__ = "0.1.0"

from applog.errors import FormatFailure, IOFailure, LogError
from applog.severity import Severity
from applog.writer import (
    LogWriter,
    close,
    get_writer,
    subscribe,
    unsubscribe,
    write,
)

__all__ = [
    "FormatFailure",
    "IOFailure",
    "LogError",
    "LogWriter",
    "Severity",
    "close",
    "get_writer",
    "subscribe",
    "unsubscribe",
    "write",
]
