# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final


class Severity(IntEnum):
    """Severity levels reported by Spectral as small integers."""

    ERROR = 0
    WARNING = 1
    INFO = 2
    HINT = 3


class DisplaySeverity(str, Enum):
    """Presentation vocabulary used when rendering annotations."""

    ERROR = "error"
    WARNING = "warning"
    WEAK_WARNING = "weak_warning"
    INFORMATION = "information"


UNKNOWN_SEVERITY_FALLBACK: Final[Severity] = Severity.INFO

DISPLAY_SEVERITY: Final[dict[Severity, DisplaySeverity]] = {
    Severity.ERROR: DisplaySeverity.ERROR,
    Severity.WARNING: DisplaySeverity.WARNING,
    Severity.INFO: DisplaySeverity.WEAK_WARNING,
    Severity.HINT: DisplaySeverity.INFORMATION,
}

_SEVERITY_TO_SARIF_LEVEL: Final[dict[Severity, str]] = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
    Severity.HINT: "note",
}


def severity_from_code(value: object, default: Severity = UNKNOWN_SEVERITY_FALLBACK) -> Severity:
    """Return the :class:`Severity` matching a tool-reported integer.

    Args:
        value: Raw severity value taken from the tool output.
        default: Severity returned when ``value`` is not a known level.

    Returns:
        Severity: Matching severity, otherwise ``default``.
    """

    if isinstance(value, bool) or not isinstance(value, int):
        return default
    try:
        return Severity(value)
    except ValueError:
        return default


def to_display_severity(severity: Severity) -> DisplaySeverity:
    """Map ``severity`` onto the presentation vocabulary.

    Args:
        severity: Severity attached to an issue.

    Returns:
        DisplaySeverity: Entry from :data:`DISPLAY_SEVERITY`.
    """

    return DISPLAY_SEVERITY[severity]


def severity_to_sarif(severity: Severity) -> str:
    """Map :class:`Severity` to a SARIF reporting level.

    Args:
        severity: Severity value to translate.

    Returns:
        str: SARIF level string compatible with SARIF output.
    """

    return _SEVERITY_TO_SARIF_LEVEL.get(severity, "warning")


__all__ = [
    "DISPLAY_SEVERITY",
    "DisplaySeverity",
    "Severity",
    "UNKNOWN_SEVERITY_FALLBACK",
    "severity_from_code",
    "severity_to_sarif",
    "to_display_severity",
]
