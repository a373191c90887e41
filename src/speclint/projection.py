# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project issues onto flat document offsets for display.

Spectral occasionally reports ranges that do not fit the document (lines past
the end, characters past the end of a line, or an end before the start).
Such issues are dropped one by one; the rest of the batch is still projected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Final, Protocol, runtime_checkable

from .models import Issue, Position
from .severity import DisplaySeverity, Severity, to_display_severity

LOGGER = logging.getLogger(__name__)

UNRECOGNIZED_FORMAT_CODE: Final[str] = "unrecognized-format"
UNRECOGNIZED_FORMAT_MESSAGE: Final[str] = "File is not formatted correctly. Linting was skipped."


class InvalidRangeError(ValueError):
    """Raised when an issue range cannot be mapped onto the document."""


@runtime_checkable
class LineOffsetLookup(Protocol):
    """Line-indexed view of a document supplied by the caller."""

    @property
    def line_count(self) -> int:
        """Return the number of lines in the document."""
        ...

    def line_start_offset(self, line: int) -> int:
        """Return the flat offset of the first character of ``line``."""
        ...

    def line_end_offset(self, line: int) -> int:
        """Return the flat offset just past the content of ``line``, excluding its terminator."""
        ...


class LineIndex(LineOffsetLookup):
    """:class:`LineOffsetLookup` computed from plain text."""

    def __init__(self, starts: Sequence[int], ends: Sequence[int]) -> None:
        """Initialise the index from precomputed offsets.

        Args:
            starts: Monotonic start offset of every line.
            ends: End-of-content offset of every line.

        Raises:
            ValueError: If the sequences differ in length or are empty.
        """

        if not starts or len(starts) != len(ends):
            raise ValueError("line index requires matching, non-empty start and end offsets")
        self._starts = tuple(starts)
        self._ends = tuple(ends)

    @classmethod
    def from_text(cls, text: str) -> LineIndex:
        """Build an index for ``text`` recognising ``\\n``, ``\\r\\n`` and ``\\r`` terminators."""
        starts = [0]
        ends: list[int] = []
        index = 0
        length = len(text)
        while index < length:
            char = text[index]
            if char == "\n" or char == "\r":
                ends.append(index)
                if char == "\r" and index + 1 < length and text[index + 1] == "\n":
                    index += 1
                starts.append(index + 1)
            index += 1
        ends.append(length)
        return cls(starts, ends)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def _check_line(self, line: int) -> None:
        if line < 0 or line >= len(self._starts):
            raise IndexError(f"line {line} is outside the document (0..{len(self._starts) - 1})")

    def line_start_offset(self, line: int) -> int:
        self._check_line(line)
        return self._starts[line]

    def line_end_offset(self, line: int) -> int:
        self._check_line(line)
        return self._ends[line]


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Half-open flat offset range ``[start, end)``."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Annotation:
    """Range-anchored finding ready for display."""

    span: TextSpan
    severity: DisplaySeverity
    message: str
    issue: Issue


@dataclass(frozen=True, slots=True)
class DocumentNotice:
    """Document-level notice that is not anchored to a range."""

    severity: DisplaySeverity
    message: str


@dataclass(frozen=True, slots=True)
class Projection:
    """Projected view of one lint batch.

    When ``notice`` is set the document could not be analysed and
    ``annotations`` is empty.
    """

    annotations: tuple[Annotation, ...] = field(default_factory=tuple)
    notice: DocumentNotice | None = None
    skipped: tuple[Issue, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        """Return ``True`` when any annotation renders at error severity."""
        return any(annotation.severity is DisplaySeverity.ERROR for annotation in self.annotations)


def _offset(lookup: LineOffsetLookup, position: Position) -> int:
    if position.line < 0 or position.character < 0:
        raise InvalidRangeError(f"negative position {position.line}:{position.character}")
    if position.line >= lookup.line_count:
        raise InvalidRangeError(f"line {position.line} exceeds document line count {lookup.line_count}")
    start = lookup.line_start_offset(position.line)
    if start + position.character > lookup.line_end_offset(position.line):
        raise InvalidRangeError(f"character {position.character} exceeds length of line {position.line}")
    return start + position.character


def issue_text_span(issue: Issue, lookup: LineOffsetLookup) -> TextSpan:
    """Return the flat offset span covered by ``issue``.

    Args:
        issue: Issue whose range is mapped.
        lookup: Line offsets of the linted document.

    Returns:
        TextSpan: Absolute ``[start, end)`` offsets.

    Raises:
        InvalidRangeError: If the range does not fit the document.
    """

    start = _offset(lookup, issue.range.start)
    end = _offset(lookup, issue.range.end)
    if end < start:
        raise InvalidRangeError(f"range end {end} precedes start {start}")
    return TextSpan(start=start, end=end)


def format_message(issue: Issue) -> str:
    """Return the display message ``"<code>: <message>"`` for ``issue``."""
    return f"{issue.code}: {issue.message}"


def project_issues(issues: Iterable[Issue], lookup: LineOffsetLookup) -> Projection:
    """Map a batch of issues onto ``lookup``.

    Args:
        issues: Issues in tool order.
        lookup: Line offsets of the linted document.

    Returns:
        Projection: Annotations in tool order, or a single notice when the tool
        did not recognise the document format.
    """

    batch = list(issues)
    if any(issue.code == UNRECOGNIZED_FORMAT_CODE for issue in batch):
        LOGGER.warning("Linted document is not a recognised API specification: skipping linting")
        return Projection(notice=DocumentNotice(DisplaySeverity.WARNING, UNRECOGNIZED_FORMAT_MESSAGE))

    annotations: list[Annotation] = []
    skipped: list[Issue] = []
    for issue in batch:
        try:
            span = issue_text_span(issue, lookup)
        except Exception as exc:  # lookups are supplied by the host
            LOGGER.debug("Skipping issue %s with invalid range: %s", issue.code, exc)
            skipped.append(issue)
            continue
        annotations.append(
            Annotation(
                span=span,
                severity=to_display_severity(issue.severity),
                message=format_message(issue),
                issue=issue,
            ),
        )
    return Projection(annotations=tuple(annotations), skipped=tuple(skipped))


def count_by_severity(issues: Iterable[Issue]) -> dict[Severity, int]:
    """Return the number of issues per severity, including zero counts."""
    counts = dict.fromkeys(Severity, 0)
    for issue in issues:
        counts[issue.severity] += 1
    return counts


__all__ = [
    "Annotation",
    "DocumentNotice",
    "InvalidRangeError",
    "LineIndex",
    "LineOffsetLookup",
    "Projection",
    "TextSpan",
    "UNRECOGNIZED_FORMAT_CODE",
    "UNRECOGNIZED_FORMAT_MESSAGE",
    "count_by_severity",
    "format_message",
    "issue_text_span",
    "project_issues",
]
