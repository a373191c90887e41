# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse Spectral's JSON output into :class:`~speclint.models.Issue` records."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import cast

from pydantic import TypeAdapter, ValidationError

from .errors import ParseFailure
from .models import Issue

JsonValue = dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None

_ISSUES_ADAPTER: TypeAdapter[list[Issue]] = TypeAdapter(list[Issue])


def _load_json_array(stdout: str) -> list[JsonValue]:
    try:
        payload = cast(JsonValue, json.loads(stdout))
    except json.JSONDecodeError as exc:
        raise ParseFailure(f"invalid JSON ({exc.msg} at line {exc.lineno} column {exc.colno})", stdout) from exc
    except RecursionError as exc:
        raise ParseFailure("JSON nesting is too deep", stdout) from exc
    if not isinstance(payload, list):
        raise ParseFailure(f"expected a JSON array but found {type(payload).__name__}", stdout)
    return payload


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}"


class SpectralOutputParser:
    """Turn the linter's stdout into an ordered list of issues.

    Blank output is the tool's way of reporting no findings. Everything else
    must be a JSON array whose elements match the issue schema; unknown keys
    are ignored and the element order is preserved.
    """

    def parse(self, stdout: str) -> list[Issue]:
        """Parse ``stdout`` into issues.

        Args:
            stdout: Complete standard output of a Spectral run.

        Returns:
            list[Issue]: Issues in order of appearance.

        Raises:
            ParseFailure: If the output is not a JSON array of issue objects.
        """

        if not stdout.strip():
            return []
        payload = _load_json_array(stdout)
        for index, entry in enumerate(payload):
            if not isinstance(entry, Mapping):
                raise ParseFailure(f"element {index} is not an object", stdout)
        try:
            return _ISSUES_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            raise ParseFailure(_first_error(exc), stdout) from exc


__all__ = ["JsonValue", "SpectralOutputParser"]
