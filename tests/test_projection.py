# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for projecting issues onto document offsets."""

from __future__ import annotations

import logging

import pytest
from support import make_issue_payload

from speclint.models import Issue
from speclint.projection import (
    UNRECOGNIZED_FORMAT_MESSAGE,
    InvalidRangeError,
    LineIndex,
    LineOffsetLookup,
    TextSpan,
    count_by_severity,
    format_message,
    issue_text_span,
    project_issues,
)
from speclint.severity import DisplaySeverity, Severity

DOCUMENT = "openapi: 3.0.0\ninfo:\n  title: Pets\n"


def _issue(code: str = "oas3-api-servers", **kwargs: object) -> Issue:
    return Issue.model_validate(make_issue_payload(code, **kwargs))


@pytest.fixture
def index() -> LineIndex:
    return LineIndex.from_text(DOCUMENT)


def test_line_index_offsets(index: LineIndex) -> None:
    assert isinstance(index, LineOffsetLookup)
    assert index.line_count == 4
    assert [index.line_start_offset(line) for line in range(4)] == [0, 15, 21, 35]
    assert [index.line_end_offset(line) for line in range(4)] == [14, 20, 34, 35]


def test_line_index_mixed_terminators() -> None:
    index = LineIndex.from_text("a\r\nbb\rccc")
    assert index.line_count == 3
    assert [index.line_start_offset(line) for line in range(3)] == [0, 3, 6]
    assert [index.line_end_offset(line) for line in range(3)] == [1, 5, 9]


def test_line_index_empty_text() -> None:
    index = LineIndex.from_text("")
    assert index.line_count == 1
    assert index.line_start_offset(0) == index.line_end_offset(0) == 0


def test_line_index_rejects_out_of_range(index: LineIndex) -> None:
    with pytest.raises(IndexError):
        index.line_start_offset(4)
    with pytest.raises(IndexError):
        index.line_end_offset(-1)


def test_line_index_requires_matching_offsets() -> None:
    with pytest.raises(ValueError):
        LineIndex([0, 4], [3])


def test_issue_text_span(index: LineIndex) -> None:
    issue = _issue(start=(2, 2), end=(2, 7))
    assert issue_text_span(issue, index) == TextSpan(23, 28)
    assert DOCUMENT[23:28] == "title"


def test_span_may_reach_line_end_and_cross_lines(index: LineIndex) -> None:
    assert issue_text_span(_issue(start=(0, 14), end=(1, 5)), index) == TextSpan(14, 20)


@pytest.mark.parametrize(
    ("start", "end"),
    [
        ((9, 0), (9, 1)),
        ((0, 0), (4, 0)),
        ((0, 20), (0, 21)),
        ((1, 3), (1, 1)),
        ((1, 3), (0, 0)),
        ((-1, 0), (0, 1)),
        ((0, -2), (0, 1)),
    ],
)
def test_invalid_ranges_rejected(index: LineIndex, start: tuple[int, int], end: tuple[int, int]) -> None:
    with pytest.raises(InvalidRangeError):
        issue_text_span(_issue(start=start, end=end), index)


def test_format_message() -> None:
    issue = _issue("info-contact", message="Info object must have contact object.")
    assert format_message(issue) == "info-contact: Info object must have contact object."


def test_project_issues_in_order(index: LineIndex) -> None:
    issues = [
        _issue("first", severity=0, start=(0, 0), end=(0, 7)),
        _issue("second", severity=3, start=(1, 0), end=(1, 4)),
    ]
    projection = project_issues(issues, index)
    assert projection.notice is None
    assert [annotation.issue.code for annotation in projection.annotations] == ["first", "second"]
    assert [annotation.severity for annotation in projection.annotations] == [
        DisplaySeverity.ERROR,
        DisplaySeverity.INFORMATION,
    ]
    assert projection.annotations[0].span == TextSpan(0, 7)
    assert projection.annotations[0].message == "first: msg"
    assert projection.has_errors is True


def test_invalid_range_skips_only_that_issue(index: LineIndex, caplog: pytest.LogCaptureFixture) -> None:
    issues = [
        _issue("kept-a", start=(0, 0), end=(0, 3)),
        _issue("dropped", start=(40, 0), end=(40, 3)),
        _issue("kept-b", start=(2, 0), end=(2, 5)),
    ]
    with caplog.at_level(logging.DEBUG, logger="speclint.projection"):
        projection = project_issues(issues, index)
    assert [annotation.issue.code for annotation in projection.annotations] == ["kept-a", "kept-b"]
    assert [issue.code for issue in projection.skipped] == ["dropped"]
    assert "dropped" in caplog.text
    assert projection.has_errors is False


def test_unrecognized_format_yields_single_notice(index: LineIndex) -> None:
    issues = [
        _issue("a", severity=0),
        _issue("unrecognized-format", severity=1),
        _issue("b", severity=0),
    ]
    projection = project_issues(issues, index)
    assert projection.annotations == ()
    assert projection.notice is not None
    assert projection.notice.severity is DisplaySeverity.WARNING
    assert projection.notice.message == UNRECOGNIZED_FORMAT_MESSAGE
    assert projection.has_errors is False


def test_unrecognized_format_ignores_ranges(index: LineIndex) -> None:
    projection = project_issues([_issue("unrecognized-format", start=(99, 0), end=(99, 1))], index)
    assert projection.notice is not None
    assert projection.skipped == ()


def test_empty_batch(index: LineIndex) -> None:
    projection = project_issues([], index)
    assert projection.annotations == ()
    assert projection.notice is None


def test_unknown_severity_projects_as_weak_warning(index: LineIndex) -> None:
    projection = project_issues([_issue(severity=7)], index)
    (annotation,) = projection.annotations
    assert annotation.severity is DisplaySeverity.WEAK_WARNING
    assert annotation.issue.raw_severity == 7


def test_count_by_severity() -> None:
    counts = count_by_severity([_issue(severity=0), _issue(severity=0), _issue(severity=3)])
    assert counts == {Severity.ERROR: 2, Severity.WARNING: 0, Severity.INFO: 0, Severity.HINT: 1}


class _StaleLookup:
    """Lookup whose line count is out of date with its offset table."""

    def __init__(self) -> None:
        self._lines = {0: (0, 14), 1: (15, 20), 2: (21, 34)}

    @property
    def line_count(self) -> int:
        return 5

    def line_start_offset(self, line: int) -> int:
        return self._lines[line][0]

    def line_end_offset(self, line: int) -> int:
        return self._lines[line][1]


def test_lookup_errors_skip_only_the_affected_issue() -> None:
    issues = [
        _issue("kept", start=(0, 0), end=(0, 2)),
        _issue("stale", start=(3, 0), end=(3, 1)),
    ]
    projection = project_issues(issues, _StaleLookup())
    assert [annotation.issue.code for annotation in projection.annotations] == ["kept"]
    assert [issue.code for issue in projection.skipped] == ["stale"]
