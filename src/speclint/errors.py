# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Failure taxonomy raised at the lint orchestration boundary."""

from __future__ import annotations

from enum import Enum
from typing import Final

PARSE_FAILURE_PREVIEW_LIMIT: Final[int] = 200


class LintFailureKind(str, Enum):
    """Tag identifying which stage of a lint invocation failed."""

    LAUNCH = "launch"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    EXIT_CODE = "exit_code"
    STDERR = "stderr"
    PARSE = "parse"
    MATERIALIZE = "materialize"


class LintError(RuntimeError):
    """Base class for every fatal lint invocation failure."""

    kind: LintFailureKind

    def describe(self) -> str:
        """Return a user-facing explanation of the failure.

        Returns:
            str: Message suitable for a single notice shown to the user.
        """

        return str(self)


class LaunchFailure(LintError):
    """Raised when the external executable cannot be started."""

    kind = LintFailureKind.LAUNCH

    def __init__(self, argv: list[str], os_error: OSError) -> None:
        """Initialise the failure with the command and underlying OS error.

        Args:
            argv: Argument vector that failed to launch.
            os_error: Error raised by the operating system.
        """

        super().__init__(f"Failed to execute command '{argv[0] if argv else '<empty>'}': {os_error}")
        self.argv = tuple(argv)
        self.os_error = os_error


class TimeoutFailure(LintError):
    """Raised when the process exceeds its allotted duration."""

    kind = LintFailureKind.TIMEOUT

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Spectral did not finish within {timeout:.1f}s")
        self.timeout = timeout


class CancelledFailure(LintError):
    """Raised when the caller cancels an in-flight invocation."""

    kind = LintFailureKind.CANCELLED

    def __init__(self) -> None:
        super().__init__("Spectral run was cancelled")


class UnexpectedExitCode(LintError):
    """Raised when the exit status is outside the accepted set."""

    kind = LintFailureKind.EXIT_CODE

    def __init__(self, exit_code: int, stderr: str, accepted: frozenset[int]) -> None:
        """Initialise the failure with the offending exit code.

        Args:
            exit_code: Status reported by the process.
            stderr: Captured standard error stream.
            accepted: Exit codes treated as a successful run.
        """

        expected = ", ".join(str(code) for code in sorted(accepted))
        super().__init__(f"Spectral finished with exit code {exit_code} but expected one of [{expected}]\n{stderr}")
        self.exit_code = exit_code
        self.stderr = stderr


class UnexpectedStderr(LintError):
    """Raised when a run with an accepted exit code still wrote to stderr."""

    kind = LintFailureKind.STDERR

    def __init__(self, stderr: str) -> None:
        super().__init__(f"An unexpected error occurred:\n{stderr}")
        self.stderr = stderr


class ParseFailure(LintError):
    """Raised when stdout is not a JSON array of issues."""

    kind = LintFailureKind.PARSE

    def __init__(self, reason: str, text: str) -> None:
        """Initialise the failure with a bounded preview of the offending output.

        Args:
            reason: Parser diagnostic explaining the rejection.
            text: Raw output that failed to parse.
        """

        preview = text[:PARSE_FAILURE_PREVIEW_LIMIT]
        super().__init__(f"Failed to parse output: {reason}")
        self.reason = reason
        self.text = preview
        self.truncated = len(text) > PARSE_FAILURE_PREVIEW_LIMIT

    def describe(self) -> str:
        suffix = "..." if self.truncated else ""
        return f"{self}\n{self.text}{suffix}"


class MaterializationFailure(LintError):
    """Raised when the document content cannot be exposed as a readable file."""

    kind = LintFailureKind.MATERIALIZE

    def __init__(self, cause: OSError | UnicodeError) -> None:
        super().__init__(f"Failed to create temporary file: {cause}")
        self.cause = cause


__all__ = [
    "CancelledFailure",
    "LaunchFailure",
    "LintError",
    "LintFailureKind",
    "MaterializationFailure",
    "PARSE_FAILURE_PREVIEW_LIMIT",
    "ParseFailure",
    "TimeoutFailure",
    "UnexpectedExitCode",
    "UnexpectedStderr",
]
