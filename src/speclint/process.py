# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process execution capability used by the lint orchestrator."""

from __future__ import annotations

import logging

# Bandit: subprocess usage is intentional. Commands are built from fixed argument
# lists and never pass through a shell.
import subprocess  # nosec B404
import time
from collections.abc import Callable, Mapping
from typing import Final, Protocol, runtime_checkable

from .errors import CancelledFailure, LaunchFailure, TimeoutFailure
from .models import Command, ProcessResult

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL: Final[float] = 0.1
OUTPUT_ENCODING: Final[str] = "utf-8"

Clock = Callable[[], float]


@runtime_checkable
class CancellationSignal(Protocol):
    """Cooperative cancellation flag; :class:`threading.Event` satisfies it."""

    def is_set(self) -> bool:
        """Return ``True`` once cancellation has been requested."""
        ...


@runtime_checkable
class ProcessRunner(Protocol):
    """Run an external command to completion and capture its output."""

    def execute(
        self,
        command: Command,
        timeout: float,
        *,
        cancel: CancellationSignal | None = None,
    ) -> ProcessResult:
        """Execute ``command`` and return its captured result.

        Args:
            command: Fully resolved command to run.
            timeout: Maximum number of seconds to wait for completion.
            cancel: Optional signal that aborts the wait when set.

        Returns:
            ProcessResult: Exit status with fully materialised output streams.

        Raises:
            LaunchFailure: If the executable cannot be started.
            TimeoutFailure: If the process does not finish within ``timeout``.
            CancelledFailure: If ``cancel`` is set before the process finishes.
        """
        ...


class SubprocessRunner(ProcessRunner):
    """:class:`ProcessRunner` backed by :class:`subprocess.Popen`."""

    def __init__(
        self,
        *,
        clock: Clock = time.monotonic,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialise the runner.

        Args:
            clock: Monotonic time source used to enforce the timeout.
            poll_interval: Seconds between cancellation checks while waiting.
            env: Optional environment for the child; inherits ours when ``None``.

        Raises:
            ValueError: If ``poll_interval`` is not positive.
        """

        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self._clock = clock
        self._poll_interval = poll_interval
        self._env = dict(env) if env is not None else None

    def execute(
        self,
        command: Command,
        timeout: float,
        *,
        cancel: CancellationSignal | None = None,
    ) -> ProcessResult:
        argv = command.argv
        LOGGER.debug("Executing command=%s cwd=%s timeout=%.1f", argv, command.working_directory, timeout)
        try:
            with command.input_path.open("rb") as stdin:
                # Bandit: argv is a fixed argument list; shell=False.
                process = subprocess.Popen(  # nosec B603
                    argv,
                    cwd=str(command.working_directory) if command.working_directory is not None else None,
                    env=self._env,
                    stdin=stdin,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    encoding=OUTPUT_ENCODING,
                    errors="replace",
                )
        except OSError as exc:
            raise LaunchFailure(argv, exc) from exc

        with process:
            try:
                stdout, stderr = self._wait(process, timeout, cancel)
            finally:
                _terminate(process)
        LOGGER.debug("Command finished exit_code=%s", process.returncode)
        return ProcessResult(exit_code=process.returncode, stdout=stdout or "", stderr=stderr or "")

    def _wait(
        self,
        process: subprocess.Popen[str],
        timeout: float,
        cancel: CancellationSignal | None,
    ) -> tuple[str, str]:
        deadline = self._clock() + timeout
        while True:
            if cancel is not None and cancel.is_set():
                raise CancelledFailure()
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise TimeoutFailure(timeout)
            try:
                return process.communicate(timeout=min(self._poll_interval, remaining))
            except subprocess.TimeoutExpired:
                continue


def _terminate(process: subprocess.Popen[str]) -> None:
    """Kill ``process`` if it is still running and reap its handle."""

    if process.poll() is not None:
        return
    LOGGER.debug("Killing process pid=%s", process.pid)
    process.kill()
    process.communicate()


__all__ = [
    "CancellationSignal",
    "Clock",
    "DEFAULT_POLL_INTERVAL",
    "ProcessRunner",
    "SubprocessRunner",
]
