# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from support import FakeRunner, make_issue_payload


@pytest.fixture
def spectral_stdout() -> str:
    """Return stdout holding a single warning-level issue."""
    return json.dumps([make_issue_payload()])


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return a runner that reports no findings."""
    return FakeRunner()


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    """Return a small readable input file."""
    path = tmp_path / "input.yaml"
    path.write_text("openapi: 3.0.0\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo handler and level changes made by CLI invocations."""
    logger = logging.getLogger("speclint")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
