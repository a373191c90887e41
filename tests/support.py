# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Test doubles and payload builders shared across the suite."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from speclint.models import Command, ProcessResult
from speclint.process import CancellationSignal


def make_issue_payload(
    code: str = "no-$ref-siblings",
    *,
    message: str = "msg",
    severity: int = 1,
    start: tuple[int, int] = (0, 0),
    end: tuple[int, int] = (0, 5),
    **extra: object,
) -> dict[str, object]:
    """Return one issue object shaped like Spectral's JSON output."""
    payload: dict[str, object] = {
        "code": code,
        "message": message,
        "severity": severity,
        "range": {
            "start": {"line": start[0], "character": start[1]},
            "end": {"line": end[0], "character": end[1]},
        },
    }
    payload.update(extra)
    return payload


@dataclass
class FakeRunner:
    """Process runner returning a canned result and recording each command."""

    result: ProcessResult = field(default_factory=lambda: ProcessResult(0, "[]", ""))
    error: Exception | None = None
    on_execute: Callable[[Command], None] | None = None
    commands: list[Command] = field(default_factory=list)
    timeouts: list[float] = field(default_factory=list)

    def execute(
        self,
        command: Command,
        timeout: float,
        *,
        cancel: CancellationSignal | None = None,
    ) -> ProcessResult:
        del cancel
        self.commands.append(command)
        self.timeouts.append(timeout)
        if self.on_execute is not None:
            self.on_execute(command)
        if self.error is not None:
            raise self.error
        return self.result
