"""Bridge stdlib logging into the applog file.

Records from any logger end up in the shared log file as severity-tagged
entries via ``LogWriterHandler``. The package's own diagnostics (logger
``applog``) are never routed into the file; they go to stderr only, and only
warnings and above unless debug mode is on.
"""

from __future__ import annotations

import logging

from applog.config import load_config
from applog.severity import Severity
from applog.writer import LogWriter, get_writer

_OWN_LOGGER = "applog"


class LogWriterHandler(logging.Handler):
    """Logging handler that appends each record to a LogWriter."""

    def __init__(self, writer: LogWriter | None = None, level: int = logging.NOTSET):
        super().__init__(level)
        self._writer = writer

    @property
    def writer(self) -> LogWriter:
        return self._writer if self._writer is not None else get_writer()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == _OWN_LOGGER or record.name.startswith(_OWN_LOGGER + "."):
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            # Braces in logged text are literal; no args means no substitution.
            self.writer.write(Severity.from_level(record.levelno), message)
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
        super().close()


_installed: list[tuple[logging.Logger, logging.Handler]] = []


def teardown_logging() -> None:
    """Remove and close the handlers installed by setup_logging."""
    while _installed:
        log, handler = _installed.pop()
        log.removeHandler(handler)
        handler.close()
    logging.getLogger(_OWN_LOGGER).propagate = True


def setup_logging(debug: bool = False, writer: LogWriter | None = None) -> LogWriterHandler:
    """Configure logging for the application and return the file handler.

    Calling it again replaces the handlers installed by the previous call.
    """
    teardown_logging()
    cfg = load_config()

    root = logging.getLogger()
    level = logging.DEBUG if debug else getattr(logging, cfg["stdlib_level"], logging.INFO)
    root.setLevel(level)

    fh = LogWriterHandler(writer)
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(fh)
    _installed.append((root, fh))

    # Stderr handler for applog's own diagnostics
    own = logging.getLogger(_OWN_LOGGER)
    own.setLevel(logging.DEBUG if debug else logging.WARNING)
    sh = logging.StreamHandler()
    sh.setLevel(logging.DEBUG if debug else logging.WARNING)
    sh.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    own.addHandler(sh)
    own.propagate = False
    _installed.append((own, sh))

    return fh
