# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run Spectral against document content and interpret the result."""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .config import SpectralSettings
from .errors import LintError, LintFailureKind, UnexpectedExitCode, UnexpectedStderr
from .materializer import InputMaterializer, TemporaryFileMaterializer
from .models import Command, Issue, ProcessResult
from .parser import SpectralOutputParser
from .process import CancellationSignal, ProcessRunner, SubprocessRunner

LOGGER = logging.getLogger(__name__)

# 0: no findings, 1: findings at or above the fail severity, 2: findings below it.
ACCEPTED_EXIT_CODES: Final[frozenset[int]] = frozenset({0, 1, 2})
OUTPUT_FORMAT: Final[str] = "json"
LINT_SUBCOMMAND: Final[str] = "lint"
WINDOWS_SYSTEM: Final[str] = "windows"


def resolve_executable(name: str, system: str | None = None) -> tuple[str, ...]:
    """Return the invocation prefix for ``name`` on the given platform.

    Windows installs npm binaries as ``.cmd`` shims that must run through
    ``cmd /C``; every other platform calls the executable directly.

    Args:
        name: Executable name, e.g. ``"spectral"``.
        system: Platform name as reported by :func:`platform.system`.

    Returns:
        tuple[str, ...]: Executable prefix of the argument vector.
    """

    resolved_system = (system if system is not None else platform.system()).lower()
    if WINDOWS_SYSTEM in resolved_system:
        return ("cmd", "/C", f"{name}.cmd")
    return (name,)


def build_arguments(ruleset: str, input_path: Path) -> tuple[str, ...]:
    """Return the argument list for a JSON lint run of ``input_path``."""
    return ("-r", ruleset, "-f", OUTPUT_FORMAT, LINT_SUBCOMMAND, str(input_path))


@dataclass(frozen=True, slots=True)
class LintOutcome:
    """Result value of :meth:`SpectralRunner.try_run`.

    Exactly one of ``issues`` (possibly empty) or ``error`` is meaningful: a
    failed run never carries a partial issue list.
    """

    issues: tuple[Issue, ...] = field(default_factory=tuple)
    error: LintError | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when the run completed without a fatal error."""
        return self.error is None

    @property
    def kind(self) -> LintFailureKind | None:
        """Return the failure tag, or ``None`` on success."""
        return self.error.kind if self.error is not None else None


class SpectralRunner:
    """Coordinate materialisation, execution, validation and parsing of a lint run."""

    def __init__(
        self,
        settings: SpectralSettings | None = None,
        *,
        runner: ProcessRunner | None = None,
        parser: SpectralOutputParser | None = None,
        materializer: InputMaterializer | None = None,
        timeout: float | None = None,
        system: str | None = None,
    ) -> None:
        """Initialise the runner with its collaborators.

        Args:
            settings: User settings; defaults are used when omitted.
            runner: Process execution capability.
            parser: Parser for the tool's stdout.
            materializer: Default capability exposing content as a file.
            timeout: Override for ``settings.timeout`` in seconds.
            system: Platform name override used to pick the executable shape.
        """

        self.settings = settings or SpectralSettings()
        self._runner = runner or SubprocessRunner()
        self._parser = parser or SpectralOutputParser()
        self._materializer = materializer or TemporaryFileMaterializer()
        self.timeout = timeout if timeout is not None else self.settings.timeout
        self._system = system

    def build_command(self, ruleset: str, input_path: Path) -> Command:
        """Return a fresh command linting ``input_path`` with ``ruleset``."""
        return Command(
            executable=resolve_executable(self.settings.executable, self._system),
            arguments=build_arguments(ruleset, input_path),
            input_path=input_path,
            working_directory=self.settings.project_root,
        )

    def run(
        self,
        content: str,
        ruleset: str | None = None,
        *,
        materializer: InputMaterializer | None = None,
        cancel: CancellationSignal | None = None,
    ) -> list[Issue]:
        """Lint ``content`` and return the reported issues in tool order.

        Args:
            content: Current document text.
            ruleset: Ruleset path or identifier; ``settings.ruleset`` when omitted.
            materializer: Override for the capability exposing ``content`` as a file.
            cancel: Optional signal aborting the process wait.

        Returns:
            list[Issue]: Issues in order of appearance.

        Raises:
            LintError: On any launch, timeout, cancellation, exit-code, stderr,
                parse or materialisation failure.
        """

        active_ruleset = ruleset or self.settings.ruleset
        scope = (materializer or self._materializer).materialize(content)
        with scope as input_path:
            command = self.build_command(active_ruleset, input_path)
            result = self._runner.execute(command, self.timeout, cancel=cancel)
            self._check_result(result)
            issues = self._parser.parse(result.stdout)
        LOGGER.debug("Spectral reported %d issue(s)", len(issues))
        return issues

    def try_run(
        self,
        content: str,
        ruleset: str | None = None,
        *,
        materializer: InputMaterializer | None = None,
        cancel: CancellationSignal | None = None,
    ) -> LintOutcome:
        """Variant of :meth:`run` returning failures as values.

        Args:
            content: Current document text.
            ruleset: Ruleset path or identifier.
            materializer: Override for the capability exposing ``content`` as a file.
            cancel: Optional signal aborting the process wait.

        Returns:
            LintOutcome: Issues on success, otherwise the tagged error.
        """

        try:
            issues = self.run(content, ruleset, materializer=materializer, cancel=cancel)
        except LintError as exc:
            LOGGER.warning("Spectral run failed (%s): %s", exc.kind.value, exc)
            return LintOutcome(error=exc)
        return LintOutcome(issues=tuple(issues))

    @staticmethod
    def _check_result(result: ProcessResult) -> None:
        if result.exit_code not in ACCEPTED_EXIT_CODES:
            raise UnexpectedExitCode(result.exit_code, result.stderr, ACCEPTED_EXIT_CODES)
        if result.stderr.strip():
            raise UnexpectedStderr(result.stderr)


__all__ = [
    "ACCEPTED_EXIT_CODES",
    "LintOutcome",
    "SpectralRunner",
    "build_arguments",
    "resolve_executable",
]
