# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Behavioural tests for :mod:`speclint.orchestrator`."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from support import FakeRunner, make_issue_payload

from speclint.config import SpectralSettings
from speclint.errors import (
    LaunchFailure,
    LintError,
    LintFailureKind,
    MaterializationFailure,
    ParseFailure,
    TimeoutFailure,
    UnexpectedExitCode,
    UnexpectedStderr,
)
from speclint.materializer import TemporaryFileMaterializer
from speclint.models import Command, ProcessResult
from speclint.orchestrator import ACCEPTED_EXIT_CODES, SpectralRunner, build_arguments, resolve_executable
from speclint.severity import Severity

CONTENT = "openapi: 3.0.0\ninfo:\n  title: Pets\n"


def _runner(fake: FakeRunner, tmp_path: Path, **kwargs: object) -> SpectralRunner:
    settings = SpectralSettings(ruleset="rules.yaml", project_root=tmp_path)
    return SpectralRunner(
        settings,
        runner=fake,
        materializer=TemporaryFileMaterializer(tmp_path),
        system="Linux",
        **kwargs,  # type: ignore[arg-type]
    )


def _leftovers(tmp_path: Path) -> list[Path]:
    return [path for path in tmp_path.iterdir() if path.name.startswith("spectral-input-")]


def test_resolve_executable_per_platform() -> None:
    assert resolve_executable("spectral", "Linux") == ("spectral",)
    assert resolve_executable("spectral", "Darwin") == ("spectral",)
    assert resolve_executable("spectral", "Windows") == ("cmd", "/C", "spectral.cmd")


def test_argument_order(tmp_path: Path) -> None:
    path = tmp_path / "in.tmp"
    assert build_arguments("rules.yaml", path) == ("-r", "rules.yaml", "-f", "json", "lint", str(path))


def test_accepted_exit_codes() -> None:
    assert ACCEPTED_EXIT_CODES == frozenset({0, 1, 2})


def test_run_builds_command_and_returns_issues(fake_runner: FakeRunner, tmp_path: Path, spectral_stdout: str) -> None:
    seen: dict[str, str] = {}

    def _capture(command: Command) -> None:
        seen["content"] = command.input_path.read_text(encoding="utf-8")

    fake_runner.result = ProcessResult(1, spectral_stdout, "")
    fake_runner.on_execute = _capture
    issues = _runner(fake_runner, tmp_path).run(CONTENT)

    assert len(issues) == 1
    issue = issues[0]
    assert issue.code == "no-$ref-siblings"
    assert issue.severity is Severity.WARNING
    assert (issue.range.start.line, issue.range.start.character) == (0, 0)
    assert (issue.range.end.line, issue.range.end.character) == (0, 5)

    (command,) = fake_runner.commands
    assert command.executable == ("spectral",)
    assert command.arguments == ("-r", "rules.yaml", "-f", "json", "lint", str(command.input_path))
    assert command.working_directory == tmp_path
    assert seen["content"] == CONTENT
    assert fake_runner.timeouts == [30.0]
    assert _leftovers(tmp_path) == []


def test_windows_command_shape(fake_runner: FakeRunner, tmp_path: Path) -> None:
    runner = SpectralRunner(
        SpectralSettings(),
        runner=fake_runner,
        materializer=TemporaryFileMaterializer(tmp_path),
        system="Windows",
    )
    runner.run(CONTENT)
    assert fake_runner.commands[0].argv[:3] == ["cmd", "/C", "spectral.cmd"]
    assert fake_runner.commands[0].working_directory is None


def test_explicit_ruleset_and_timeout(fake_runner: FakeRunner, tmp_path: Path) -> None:
    runner = _runner(fake_runner, tmp_path, timeout=1.5)
    runner.run(CONTENT, "spectral:oas")
    assert fake_runner.commands[0].arguments[:2] == ("-r", "spectral:oas")
    assert fake_runner.timeouts == [1.5]


@pytest.mark.parametrize("exit_code", [0, 1, 2])
def test_accepted_exit_codes_parse_output(fake_runner: FakeRunner, tmp_path: Path, exit_code: int) -> None:
    fake_runner.result = ProcessResult(exit_code, "", "")
    assert _runner(fake_runner, tmp_path).run(CONTENT) == []


def test_unexpected_exit_code(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.result = ProcessResult(3, "[]", "")
    with pytest.raises(UnexpectedExitCode) as excinfo:
        _runner(fake_runner, tmp_path).run(CONTENT)
    assert excinfo.value.exit_code == 3
    assert excinfo.value.kind is LintFailureKind.EXIT_CODE
    assert _leftovers(tmp_path) == []


def test_unexpected_exit_code_carries_stderr(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.result = ProcessResult(127, "", "spectral: command not found")
    with pytest.raises(UnexpectedExitCode) as excinfo:
        _runner(fake_runner, tmp_path).run(CONTENT)
    assert excinfo.value.stderr == "spectral: command not found"
    assert "spectral: command not found" in str(excinfo.value)


def test_stderr_with_accepted_exit_code_fails(fake_runner: FakeRunner, tmp_path: Path, spectral_stdout: str) -> None:
    fake_runner.result = ProcessResult(0, spectral_stdout, "warning: deprecated flag")
    with pytest.raises(UnexpectedStderr) as excinfo:
        _runner(fake_runner, tmp_path).run(CONTENT)
    assert excinfo.value.stderr == "warning: deprecated flag"
    assert _leftovers(tmp_path) == []


def test_whitespace_stderr_is_ignored(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.result = ProcessResult(0, "[]", " \n")
    assert _runner(fake_runner, tmp_path).run(CONTENT) == []


def test_parse_failure_is_lint_error(fake_runner: FakeRunner, tmp_path: Path) -> None:
    fake_runner.result = ProcessResult(0, "Error running Spectral!", "")
    with pytest.raises(LintError) as excinfo:
        _runner(fake_runner, tmp_path).run(CONTENT)
    assert isinstance(excinfo.value, ParseFailure)
    assert _leftovers(tmp_path) == []


@pytest.mark.parametrize(
    "error",
    [TimeoutFailure(30.0), LaunchFailure(["spectral"], FileNotFoundError(2, "No such file"))],
)
def test_runner_failures_propagate_and_clean_up(fake_runner: FakeRunner, tmp_path: Path, error: LintError) -> None:
    fake_runner.error = error
    with pytest.raises(type(error)):
        _runner(fake_runner, tmp_path).run(CONTENT)
    assert _leftovers(tmp_path) == []


def test_try_run_success(fake_runner: FakeRunner, tmp_path: Path) -> None:
    stdout = json.dumps([make_issue_payload("a"), make_issue_payload("b", severity=0)])
    fake_runner.result = ProcessResult(1, stdout, "")
    outcome = _runner(fake_runner, tmp_path).try_run(CONTENT)
    assert outcome.ok is True
    assert outcome.kind is None
    assert [issue.code for issue in outcome.issues] == ["a", "b"]


def test_try_run_failure_has_no_issues(fake_runner: FakeRunner, tmp_path: Path, spectral_stdout: str) -> None:
    fake_runner.result = ProcessResult(0, spectral_stdout, "oops")
    outcome = _runner(fake_runner, tmp_path).try_run(CONTENT)
    assert outcome.ok is False
    assert outcome.kind is LintFailureKind.STDERR
    assert outcome.issues == ()


def test_each_run_uses_fresh_input(fake_runner: FakeRunner, tmp_path: Path) -> None:
    runner = _runner(fake_runner, tmp_path)
    runner.run("first")
    runner.run("second")
    first, second = fake_runner.commands
    assert first.input_path != second.input_path
    assert first is not second


def test_unencodable_content_surfaces_as_lint_error(fake_runner: FakeRunner, tmp_path: Path) -> None:
    runner = _runner(fake_runner, tmp_path)
    with pytest.raises(MaterializationFailure):
        runner.run("openapi: \udc80\n")
    outcome = runner.try_run("openapi: \udc80\n")
    assert outcome.kind is LintFailureKind.MATERIALIZE
    assert fake_runner.commands == []
    assert _leftovers(tmp_path) == []
