"""Low-level DEBUG: trace output that never touches the log file.

Two raw sinks are available. When a debugger or tracer is attached at startup
lines go to the interpreter's original stderr, where the debugger console
shows them. Otherwise they go to the operating system's debug output
(``OutputDebugStringW`` on Windows, syslog elsewhere) so tools such as
DebugView or ``journalctl`` can pick them up. The choice is made once.

Under ``python -O`` the channel is disabled and ``write_line`` does nothing.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Callable

from applog.config import load_config
from applog.text import render

DEBUG_PREFIX = "DEBUG: "

_DEBUGGER_MODULES = ("pydevd", "debugpy")


def debugger_attached() -> bool:
    """True when a tracing debugger is active in this process."""
    if sys.gettrace() is not None:
        return True
    return any(name in sys.modules for name in _DEBUGGER_MODULES)


class TraceSink:
    """Writes to the stream a debugger console is watching."""

    def __init__(self, stream=None):
        self._stream = stream if stream is not None else sys.__stderr__

    def __call__(self, text: str) -> None:
        if self._stream is None:
            return
        try:
            self._stream.write(text)
            self._stream.flush()
        except (OSError, ValueError):
            pass


class OutputDebugStringSink:
    """Writes to the platform debug-string facility."""

    def __init__(self) -> None:
        self._emit: Callable[[str], None] | None = None
        if os.name == "nt":
            import ctypes

            self._emit = ctypes.windll.kernel32.OutputDebugStringW
        else:
            import syslog

            def _emit(text: str) -> None:
                syslog.syslog(syslog.LOG_DEBUG, text.rstrip("\n"))

            self._emit = _emit

    def __call__(self, text: str) -> None:
        if self._emit is None:
            return
        try:
            self._emit(text)
        except (OSError, ValueError, TypeError):
            pass


def select_sink() -> Callable[[str], None]:
    """Pick the raw sink for this process based on whether a debugger is attached."""
    if debugger_attached():
        return TraceSink()
    return OutputDebugStringSink()


class DebugChannel:
    """Fire-and-forget DEBUG: lines through one raw sink."""

    def __init__(self, sink: Callable[[str], None] | None = None, enabled: bool = __debug__):
        self.enabled = enabled
        if not enabled:
            self._sink = None
            self.write_line = self._disabled
            return
        self._sink = sink if sink is not None else select_sink()

    @property
    def sink(self) -> Callable[[str], None] | None:
        return self._sink

    def write_line(self, message: str, *args: Any) -> None:
        if args:
            message = render(message, args)
        if not message.endswith("\n"):
            message += "\n"
        self._sink(DEBUG_PREFIX + message)

    def _disabled(self, message: str, *args: Any) -> None:
        pass


_channel: DebugChannel | None = None
_channel_lock = threading.Lock()


def get_channel() -> DebugChannel:
    """Process-wide channel; the sink is resolved on first use and kept."""
    global _channel
    with _channel_lock:
        if _channel is None:
            _channel = DebugChannel(enabled=__debug__ and bool(load_config().get("debug_channel", True)))
        return _channel


if __debug__:
    def write_line(message: str, *args: Any) -> None:
        """Send one DEBUG: line through the process-wide channel."""
        get_channel().write_line(message, *args)
else:
    def write_line(message: str, *args: Any) -> None:
        pass
