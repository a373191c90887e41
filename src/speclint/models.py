# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the speclint package."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .severity import Severity, severity_from_code


class Position(BaseModel):
    """Zero-based line/character position reported by the linter."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    line: int
    character: int


class Range(BaseModel):
    """Start/end positions of a finding.

    No ordering is enforced here; ranges emitted by the tool are untrusted and
    validated only when projected onto a document.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    start: Position
    end: Position


class Issue(BaseModel):
    """Single finding reported by Spectral."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    code: str = Field(min_length=1)
    message: str
    severity: Severity
    range: Range
    raw_severity: int | None = None
    path: tuple[str | int, ...] = Field(default_factory=tuple)
    source: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_severity(cls, data: Any) -> Any:
        """Translate the tool's integer severity while keeping the raw value."""
        if not isinstance(data, dict) or "severity" not in data:
            return data
        raw = data["severity"]
        if isinstance(raw, Severity):
            return data
        coerced = dict(data)
        coerced["severity"] = severity_from_code(raw)
        coerced["raw_severity"] = raw if isinstance(raw, int) and not isinstance(raw, bool) else None
        return coerced


@dataclass(slots=True, frozen=True)
class Command:
    """Fully resolved external command for a single lint invocation."""

    executable: tuple[str, ...]
    arguments: tuple[str, ...]
    input_path: Path
    working_directory: Path | None = None

    @property
    def argv(self) -> list[str]:
        """Return the argument vector passed to the operating system."""
        return [*self.executable, *self.arguments]


@dataclass(slots=True, frozen=True)
class ProcessResult:
    """Exit status and fully captured output streams of a finished process."""

    exit_code: int
    stdout: str
    stderr: str


__all__ = [
    "Command",
    "Issue",
    "Position",
    "ProcessResult",
    "Range",
]
