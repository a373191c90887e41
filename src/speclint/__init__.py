# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Spectral lint orchestration and result projection."""

from __future__ import annotations

from .config import ConfigError, SpectralSettings, load_settings
from .errors import (
    CancelledFailure,
    LaunchFailure,
    LintError,
    LintFailureKind,
    MaterializationFailure,
    ParseFailure,
    TimeoutFailure,
    UnexpectedExitCode,
    UnexpectedStderr,
)
from .matcher import PathInclusionMatcher, is_included, parse_inclusion_patterns, should_lint
from .materializer import InputMaterializer, TemporaryFileMaterializer
from .models import Command, Issue, Position, ProcessResult, Range
from .orchestrator import ACCEPTED_EXIT_CODES, LintOutcome, SpectralRunner
from .parser import SpectralOutputParser
from .process import ProcessRunner, SubprocessRunner
from .projection import (
    Annotation,
    DocumentNotice,
    LineIndex,
    LineOffsetLookup,
    Projection,
    TextSpan,
    project_issues,
)
from .severity import DISPLAY_SEVERITY, DisplaySeverity, Severity

__all__ = [
    "ACCEPTED_EXIT_CODES",
    "Annotation",
    "CancelledFailure",
    "Command",
    "ConfigError",
    "DISPLAY_SEVERITY",
    "DisplaySeverity",
    "DocumentNotice",
    "InputMaterializer",
    "Issue",
    "LaunchFailure",
    "LineIndex",
    "LineOffsetLookup",
    "LintError",
    "LintFailureKind",
    "LintOutcome",
    "MaterializationFailure",
    "ParseFailure",
    "PathInclusionMatcher",
    "Position",
    "ProcessResult",
    "ProcessRunner",
    "Projection",
    "Range",
    "Severity",
    "SpectralOutputParser",
    "SpectralRunner",
    "SpectralSettings",
    "SubprocessRunner",
    "TemporaryFileMaterializer",
    "TextSpan",
    "TimeoutFailure",
    "UnexpectedExitCode",
    "UnexpectedStderr",
    "is_included",
    "load_settings",
    "parse_inclusion_patterns",
    "project_issues",
    "should_lint",
]
