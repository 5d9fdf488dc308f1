"""Shared append-only log file with size-based rollover and live subscribers.

Design:
- The file is opened lazily on the first write and kept open across writes
  until ``close()`` (or interpreter exit) so each entry costs one append.
- Before (re)opening, a file larger than ``max_bytes`` is deleted outright.
  History is not archived.
- One lock serializes open/rollover/append/notify/close. Entries never
  interleave and appear in lock-acquisition order.
- Subscribers are called on the writing thread, in registration order, while
  the lock is held. An entry written from inside a subscriber (directly or via
  the stdlib logging bridge) is appended straight away but not broadcast
  again; a close requested there runs once the outer write finishes.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, TextIO

from applog.config import load_config
from applog.errors import IOFailure
from applog.severity import Severity
from applog.text import format_entry

logger = logging.getLogger(__name__)

MAX_LOG_BYTES = 100 * 1024 * 1024  # 100 MiB

Subscriber = Callable[[Severity, str], Any]


def default_log_path() -> Path:
    """The running program's path with its extension replaced by ``.log``."""
    main = sys.argv[0] if sys.argv and sys.argv[0] not in ("", "-c") else sys.executable
    return Path(main).resolve().with_suffix(".log")


def separator_line(when: datetime) -> str:
    """Session header written each time the file is (re)opened."""
    designator = "AM" if when.hour < 12 else "PM"
    return f"-------- {when:%m/%d/%Y %I:%M:%S} {designator} " + "-" * 42


class LogWriter:
    """Owns one log file: lazy open, formatted append, rollover, close, broadcast."""

    def __init__(
        self,
        path: str | Path | None = None,
        max_bytes: int = MAX_LOG_BYTES,
        redact_exception_details: bool | None = None,
    ):
        self._path = Path(path).expanduser() if path else default_log_path()
        self.max_bytes = max_bytes
        # None follows the interpreter mode: redact unless running with assertions on.
        if redact_exception_details is None:
            redact_exception_details = not __debug__
        self.redact_exception_details = redact_exception_details
        self._stream: TextIO | None = None
        self._lock = threading.Lock()
        self._local = threading.local()
        self._subscribers: dict[Subscriber, None] = {}
        self._subscribers_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def __enter__(self) -> "LogWriter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- subscribers ---------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Subscriber:
        """Register ``callback(severity, message)``. Returns it, so it works as a decorator."""
        with self._subscribers_lock:
            self._subscribers[callback] = None
        return callback

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._subscribers_lock:
            self._subscribers.pop(callback, None)

    def subscribers(self) -> list[Subscriber]:
        with self._subscribers_lock:
            return list(self._subscribers)

    @property
    def _notifying(self) -> bool:
        return getattr(self._local, "notifying", False)

    def _notify(self, severity: Severity, message: str) -> None:
        self._local.notifying = True
        try:
            for callback in self.subscribers():
                try:
                    callback(severity, message)
                except Exception:
                    logger.exception("Log subscriber %r failed", callback)
        finally:
            self._local.notifying = False

    # -- file lifecycle ------------------------------------------------------

    def _open_locked(self) -> None:
        try:
            try:
                size = self._path.stat().st_size
            except FileNotFoundError:
                size = 0
            if size > self.max_bytes:
                self._path.unlink()
                logger.debug("Rolled over %s (%d bytes)", self._path, size)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            stream = open(self._path, "a", encoding="utf-8")
        except OSError as exc:
            raise IOFailure(f"Cannot open log file {self._path}: {exc}") from exc
        self._stream = stream
        self._append_locked(separator_line(datetime.now()))

    def _append_locked(self, line: str) -> None:
        assert self._stream is not None
        try:
            self._stream.write(line + "\n")
            self._stream.flush()
            os.fsync(self._stream.fileno())
        except OSError as exc:
            raise IOFailure(f"Cannot write to log file {self._path}: {exc}") from exc

    def _close_locked(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.flush()
        except OSError as exc:
            raise IOFailure(f"Cannot flush log file {self._path}: {exc}") from exc
        finally:
            stream.close()

    # -- public API ----------------------------------------------------------

    def write(self, severity: Severity, fmt: str | None, *args: Any) -> None:
        """Append one entry, or close the file when ``fmt`` is None.

        Raises IOFailure when the file cannot be opened, written or rolled
        over, and FormatFailure when a placeholder has no matching argument.
        """
        if fmt is None:
            if self._stream is None:
                return
            if self._notifying:
                self._local.close_requested = True
                return
            with self._lock:
                self._close_locked()
            return

        message = format_entry(fmt, args, self.redact_exception_details)
        line = message if severity is Severity.NONE else f"{severity.label}: {message}"

        if self._notifying:
            # This thread already holds the lock and the stream is open.
            self._append_locked(line)
            return

        with self._lock:
            if self._stream is None:
                self._open_locked()
            self._append_locked(line)
            self._notify(severity, message)
            if getattr(self._local, "close_requested", False):
                self._local.close_requested = False
                self._close_locked()

    def close(self) -> None:
        """Flush and close the file. Safe to call when already closed."""
        self.write(Severity.NONE, None)


def writer_from_config(cfg: dict[str, Any]) -> LogWriter:
    """Build a writer from a flat config dict as returned by ``load_config``."""
    return LogWriter(
        path=cfg.get("log_path"),
        max_bytes=int(cfg.get("max_bytes") or MAX_LOG_BYTES),
        redact_exception_details=cfg.get("redact_exception_details"),
    )


# ---------------------------------------------------------------------------
# Process-wide writer
# ---------------------------------------------------------------------------

_default_writer: LogWriter | None = None
_default_lock = threading.Lock()


def get_writer() -> LogWriter:
    """Return the process-wide writer, creating it from config on first use."""
    global _default_writer
    with _default_lock:
        if _default_writer is None:
            _default_writer = writer_from_config(load_config())
        return _default_writer


def set_writer(writer: LogWriter | None) -> LogWriter | None:
    """Replace the process-wide writer, closing the previous one. Returns the previous.

    The installed writer is closed at interpreter exit like one from get_writer.
    """
    global _default_writer
    with _default_lock:
        previous, _default_writer = _default_writer, writer
    if previous is not None and previous is not writer:
        previous.close()
    return previous


def write(severity: Severity, fmt: str | None, *args: Any) -> None:
    get_writer().write(severity, fmt, *args)


def close() -> None:
    """Close the process-wide writer if it was ever created."""
    if _default_writer is not None:
        _default_writer.close()


# Covers writers created by get_writer and installed by set_writer alike.
atexit.register(close)


def subscribe(callback: Subscriber) -> Subscriber:
    return get_writer().subscribe(callback)


def unsubscribe(callback: Subscriber) -> None:
    get_writer().unsubscribe(callback)
