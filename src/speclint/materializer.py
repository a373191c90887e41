# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expose in-memory document content as a transient readable file."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .errors import MaterializationFailure

LOGGER = logging.getLogger(__name__)

TEMP_FILE_PREFIX: Final[str] = "spectral-input-"
TEMP_FILE_SUFFIX: Final[str] = ".tmp"


@runtime_checkable
class InputMaterializer(Protocol):
    """Scoped acquisition of a unique file holding the content to lint."""

    def materialize(self, content: str) -> AbstractContextManager[Path]:
        """Return a context manager yielding a readable path containing ``content``.

        The path is unique to the call and must be removed when the context exits,
        whether or not the body raised.

        Args:
            content: Document text to expose.

        Returns:
            AbstractContextManager[Path]: Scope owning the transient file.
        """
        ...


class TemporaryFileMaterializer(InputMaterializer):
    """Write content to a uniquely named file inside a temporary directory."""

    def __init__(self, directory: Path | None = None, *, encoding: str = "utf-8") -> None:
        """Initialise the materializer.

        Args:
            directory: Directory for transient files; the system default when ``None``.
            encoding: Text encoding used for the written content.
        """

        self._directory = directory
        self._encoding = encoding

    @contextmanager
    def materialize(self, content: str) -> Iterator[Path]:
        try:
            fd, raw_path = tempfile.mkstemp(
                prefix=TEMP_FILE_PREFIX,
                suffix=TEMP_FILE_SUFFIX,
                dir=str(self._directory) if self._directory is not None else None,
            )
        except OSError as exc:
            raise MaterializationFailure(exc) from exc
        path = Path(raw_path)
        try:
            try:
                with os.fdopen(fd, "w", encoding=self._encoding, newline="") as handle:
                    handle.write(content)
            except (OSError, UnicodeError) as exc:
                raise MaterializationFailure(exc) from exc
            yield path
        finally:
            _discard(path)


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        LOGGER.debug("Failed to delete temporary file %s: %s", path, exc)


__all__ = [
    "InputMaterializer",
    "TEMP_FILE_PREFIX",
    "TemporaryFileMaterializer",
]
