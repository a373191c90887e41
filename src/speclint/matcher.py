# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ant-style path matching used to decide which documents are linted.

Patterns support ``*`` (any characters inside one segment), ``**`` (any number
of segments) and ``?`` (a single character). Matching is purely lexical: no
filesystem access happens and the current working directory is never
consulted, so results depend only on the explicit arguments.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Sequence
from functools import lru_cache
from os import PathLike
from typing import Final

LOGGER = logging.getLogger(__name__)

_Pathish = str | PathLike[str]

DOUBLE_WILDCARD: Final[str] = "**"
_WILDCARD_CHARS: Final[frozenset[str]] = frozenset({"*", "?"})
_DRIVE_PREFIX: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z]:")
_SEPARATORS: Final[tuple[str, ...]] = ("/", "\\")
_SEGMENT_CACHE_SIZE: Final[int] = 512


@lru_cache(maxsize=_SEGMENT_CACHE_SIZE)
def _segment_regex(segment: str) -> re.Pattern[str]:
    """Compile a single path segment pattern into an anchored regex.

    Args:
        segment: Pattern segment that may contain ``*`` and ``?`` wildcards.

    Returns:
        re.Pattern[str]: Regex matching the entire segment.
    """

    parts: list[str] = []
    for char in segment:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def normalize_separators(value: str, separator: str) -> str:
    """Return ``value`` with both ``/`` and ``\\`` replaced by ``separator``.

    Args:
        value: Path or pattern text to normalise.
        separator: Single separator character used for comparisons.

    Returns:
        str: Normalised text.
    """

    for candidate in _SEPARATORS:
        value = value.replace(candidate, separator)
    return value


class AntPathMatcher:
    """Match normalised paths against Ant-style patterns."""

    def __init__(self, separator: str = os.sep) -> None:
        """Initialise the matcher for a path separator.

        Args:
            separator: Single character splitting path segments.

        Raises:
            ValueError: If ``separator`` is not exactly one character.
        """

        if len(separator) != 1:
            raise ValueError("separator must be a single character")
        self.separator = separator

    def _tokenize(self, value: str) -> list[str]:
        return [token for token in value.split(self.separator) if token]

    @staticmethod
    def _match_segment(pattern: str, segment: str) -> bool:
        if not _WILDCARD_CHARS.intersection(pattern):
            return pattern == segment
        return _segment_regex(pattern).fullmatch(segment) is not None

    def match(self, pattern: str, path: str) -> bool:
        """Return whether ``path`` matches ``pattern`` in its entirety.

        Both arguments must already use :attr:`separator`. A pattern and a path
        must agree on having a leading separator, except that a pattern opening
        with ``**`` spans any prefix, rooted or not.

        Args:
            pattern: Ant-style pattern.
            path: Candidate path.

        Returns:
            bool: ``True`` when the full path matches.
        """

        sep = self.separator
        if path.startswith(sep) != pattern.startswith(sep) and not pattern.startswith(DOUBLE_WILDCARD):
            return False

        patt_dirs = self._tokenize(pattern)
        path_dirs = self._tokenize(path)
        patt_start, patt_end = 0, len(patt_dirs) - 1
        path_start, path_end = 0, len(path_dirs) - 1

        # Leading segments up to the first '**'.
        while patt_start <= patt_end and path_start <= path_end:
            patt_dir = patt_dirs[patt_start]
            if patt_dir == DOUBLE_WILDCARD:
                break
            if not self._match_segment(patt_dir, path_dirs[path_start]):
                return False
            patt_start += 1
            path_start += 1

        if path_start > path_end:
            if patt_start > patt_end:
                return pattern.endswith(sep) == path.endswith(sep)
            if patt_start == patt_end and patt_dirs[patt_start] == "*" and path.endswith(sep):
                return True
            return self._only_double_wildcards(patt_dirs, patt_start, patt_end)
        if patt_start > patt_end:
            return False

        # Trailing segments after the last '**'.
        while patt_start <= patt_end and path_start <= path_end:
            patt_dir = patt_dirs[patt_end]
            if patt_dir == DOUBLE_WILDCARD:
                break
            if not self._match_segment(patt_dir, path_dirs[path_end]):
                return False
            patt_end -= 1
            path_end -= 1

        if path_start > path_end:
            return self._only_double_wildcards(patt_dirs, patt_start, patt_end)

        # Segment groups between '**' markers, each matched at the first position it fits.
        while patt_start != patt_end and path_start <= path_end:
            next_double = next(
                index for index in range(patt_start + 1, patt_end + 1) if patt_dirs[index] == DOUBLE_WILDCARD
            )
            if next_double == patt_start + 1:
                patt_start += 1
                continue
            group = patt_dirs[patt_start + 1 : next_double]
            found = self._find_group(group, path_dirs, path_start, path_end)
            if found is None:
                return False
            patt_start = next_double
            path_start = found + len(group)

        return self._only_double_wildcards(patt_dirs, patt_start, patt_end)

    def _find_group(self, group: Sequence[str], path_dirs: Sequence[str], start: int, end: int) -> int | None:
        span = end - start + 1
        for offset in range(span - len(group) + 1):
            candidate = start + offset
            if all(
                self._match_segment(sub_pattern, path_dirs[candidate + index])
                for index, sub_pattern in enumerate(group)
            ):
                return candidate
        return None

    @staticmethod
    def _only_double_wildcards(patt_dirs: Sequence[str], start: int, end: int) -> bool:
        return all(patt_dirs[index] == DOUBLE_WILDCARD for index in range(start, end + 1))


class PathInclusionMatcher:
    """Decide whether a document path falls under configured inclusion patterns."""

    def __init__(self, separator: str = os.sep) -> None:
        self._matcher = AntPathMatcher(separator)

    @property
    def separator(self) -> str:
        """Return the separator all paths and patterns are normalised to."""
        return self._matcher.separator

    def is_rooted(self, pattern: str) -> bool:
        """Return whether ``pattern`` is matched as-is rather than under the base path.

        Args:
            pattern: Pattern already normalised to :attr:`separator`.

        Returns:
            bool: ``True`` for absolute patterns and patterns opening with a wildcard.
        """

        if pattern.startswith("*"):
            return True
        if pattern.startswith(self.separator):
            return True
        return _DRIVE_PREFIX.match(pattern) is not None

    def resolve_pattern(self, base_path: _Pathish, pattern: str) -> str:
        """Return ``pattern`` normalised and anchored under ``base_path`` when relative.

        Args:
            base_path: Directory relative patterns resolve against.
            pattern: Raw configured pattern.

        Returns:
            str: Pattern ready for matching.
        """

        sep = self.separator
        normalized = normalize_separators(pattern, sep)
        if self.is_rooted(normalized):
            return normalized
        base = normalize_separators(os.fspath(base_path), sep)
        if not base.endswith(sep):
            base += sep
        return base + normalized

    def is_included(self, base_path: _Pathish, candidate_path: _Pathish, patterns: Iterable[str]) -> bool:
        """Return ``True`` when any pattern matches ``candidate_path``.

        Args:
            base_path: Directory relative patterns resolve against.
            candidate_path: Path of the document being considered.
            patterns: Configured inclusion patterns; empty strings are ignored.

        Returns:
            bool: ``True`` if at least one pattern matches.
        """

        candidate = normalize_separators(os.fspath(candidate_path), self.separator)
        for pattern in patterns:
            if not pattern:
                continue
            if self._matcher.match(self.resolve_pattern(base_path, pattern), candidate):
                return True
        return False


def is_included(
    base_path: _Pathish,
    candidate_path: _Pathish,
    patterns: Iterable[str],
    separator: str = os.sep,
) -> bool:
    """Functional shorthand for :meth:`PathInclusionMatcher.is_included`.

    Args:
        base_path: Directory relative patterns resolve against.
        candidate_path: Path of the document being considered.
        patterns: Configured inclusion patterns.
        separator: Separator character used for normalisation.

    Returns:
        bool: ``True`` if at least one pattern matches.
    """

    return PathInclusionMatcher(separator).is_included(base_path, candidate_path, patterns)


def parse_inclusion_patterns(text: str | None) -> tuple[str, ...]:
    """Split a newline-separated settings value into individual patterns.

    Args:
        text: Raw settings value, possibly ``None``.

    Returns:
        tuple[str, ...]: Non-blank, stripped patterns in their configured order.
    """

    if not text:
        return ()
    return tuple(line.strip() for line in text.splitlines() if line.strip())


def should_lint(
    base_path: _Pathish | None,
    candidate_path: _Pathish | None,
    patterns: Sequence[str],
    separator: str = os.sep,
) -> bool:
    """Return whether a document is in scope, treating any failure as excluded.

    Args:
        base_path: Project directory, or ``None`` when it cannot be determined.
        candidate_path: Document path, or ``None`` when it cannot be determined.
        patterns: Configured inclusion patterns.
        separator: Separator character used for normalisation.

    Returns:
        bool: ``True`` only when the document is positively matched.
    """

    if base_path is None or candidate_path is None:
        LOGGER.error(
            "Failed to check if file is included. basePath=%s path=%s includedFiles=%s",
            base_path,
            candidate_path,
            list(patterns),
        )
        return False
    try:
        included = is_included(base_path, candidate_path, patterns, separator)
    except (TypeError, ValueError) as exc:
        LOGGER.error(
            "Failed to check if file is included. basePath=%s path=%s includedFiles=%s: %s",
            base_path,
            candidate_path,
            list(patterns),
            exc,
        )
        return False
    if not included:
        LOGGER.debug("The given file %s did not match any configured pattern", candidate_path)
    return included


__all__ = [
    "AntPathMatcher",
    "PathInclusionMatcher",
    "is_included",
    "normalize_separators",
    "parse_inclusion_patterns",
    "should_lint",
]
