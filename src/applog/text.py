"""Message rendering and whitespace normalization for log entries.

``render`` substitutes positional ``{0}``-style arguments; ``beautify`` tidies
the result so multi-line messages sit indented under their entry.
"""

from __future__ import annotations

import re
import traceback
from typing import Any, Sequence

from applog.errors import FormatFailure

ENTRY_INDENT = "    "

_LINE_COMMENT = re.compile(r"^[ \t]*(--|//).*?\n", re.MULTILINE)
_TRAILING_COMMENT = re.compile(r"[ \t]*(--|//).*?$", re.MULTILINE)
_BLOCK_COMMENT_LINES = re.compile(r"\n([ \t]*/\*.*?\*/[ \t]*\n)+", re.DOTALL)
_BLOCK_COMMENT = re.compile(r"[ \t]*/\*.*?\*/[ \t]*", re.DOTALL)
_TRAILING_SPACE = re.compile(r" +$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")


def beautify(text: str, strip_comments: bool = False, indent: str = "") -> str:
    """Normalize whitespace in ``text`` and optionally indent every line.

    Line endings become ``\\n``, tabs become two spaces, trailing spaces are
    dropped, runs of blank lines collapse to a single blank line and each
    non-blank line gets ``indent`` prepended. With ``strip_comments`` SQL
    (``--``), C++ (``//``) and C (``/* */``) comments are removed first.
    """
    s = text.replace("\r\n", "\n").replace("\r", "\n")
    if strip_comments:
        s = _LINE_COMMENT.sub("", s)
        s = _TRAILING_COMMENT.sub("", s)
        s = _BLOCK_COMMENT_LINES.sub("\n", s)
        s = _BLOCK_COMMENT.sub("", s)

    s = s.strip().replace("\t", "  ")
    s = _TRAILING_SPACE.sub("", s)
    s = _BLANK_RUNS.sub("\n\n", s)
    if indent:
        s = "\n".join(indent + line if line else line for line in s.split("\n"))
    return s


def describe_exception(exc: BaseException, redact: bool) -> str:
    """Message text only when redacting, otherwise the full traceback."""
    if redact:
        return str(exc) or type(exc).__name__
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()


def render(fmt: str, args: Sequence[Any], redact_exception_details: bool = False) -> str:
    """Substitute ``args`` into ``fmt``. Without args ``fmt`` is returned verbatim."""
    if not args:
        return fmt
    values = [
        describe_exception(a, redact_exception_details) if isinstance(a, BaseException) else a
        for a in args
    ]
    try:
        return fmt.format(*values)
    except (IndexError, KeyError, ValueError, AttributeError, TypeError) as exc:
        raise FormatFailure(f"Cannot format {fmt!r} with {len(values)} argument(s): {exc}") from exc


def format_entry(
    fmt: str,
    args: Sequence[Any],
    redact_exception_details: bool = False,
) -> str:
    """Render and normalize a message the way it is stored in the log file."""
    message = render(fmt, args, redact_exception_details)
    return beautify(message, strip_comments=False, indent=ENTRY_INDENT).lstrip()
