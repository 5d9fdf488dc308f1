"""Severity levels used for entry prefixes and display colours."""

from __future__ import annotations

import logging
from enum import Enum


class Severity(Enum):
    NONE = "None"
    SUCCESS = "Success"
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    VERBOSE = "Verbose"

    @property
    def label(self) -> str:
        return self.value

    @property
    def color(self) -> str:
        """Rich colour name used when mirroring entries to a terminal."""
        return _COLORS[self]

    @classmethod
    def parse(cls, name: str) -> "Severity":
        """Look up a severity by name, case-insensitively."""
        key = name.strip().lower()
        for sev in cls:
            if sev.value.lower() == key:
                return sev
        raise ValueError(f"Unknown severity '{name}'.")

    @classmethod
    def from_level(cls, level: int) -> "Severity":
        """Map a stdlib logging level onto the closest severity."""
        if level >= logging.ERROR:
            return cls.ERROR
        if level >= logging.WARNING:
            return cls.WARNING
        if level >= logging.INFO:
            return cls.INFO
        return cls.VERBOSE


_COLORS = {
    Severity.NONE: "default",
    Severity.SUCCESS: "green",
    Severity.ERROR: "red",
    Severity.WARNING: "gold1",
    Severity.INFO: "blue",
    Severity.VERBOSE: "purple",
}

SEVERITY_NAMES = [sev.value for sev in Severity]
