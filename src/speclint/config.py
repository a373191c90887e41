# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for speclint."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .matcher import parse_inclusion_patterns

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAME: Final[str] = ".speclint.toml"
PYPROJECT_TABLE: Final[tuple[str, str]] = ("tool", "speclint")
ENV_PREFIX: Final[str] = "SPECLINT_"
DEFAULT_INCLUDED_FILES: Final[str] = "**/*.json\n**/*.yml\n**/*.yaml"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0

_ENV_FIELDS: Final[dict[str, str]] = {
    "EXECUTABLE": "executable",
    "RULESET": "ruleset",
    "INCLUDED_FILES": "included_files",
    "TIMEOUT": "timeout",
}


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class SpectralSettings(BaseModel):
    """User settings consumed by the lint pipeline."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    executable: str = Field(default="spectral", min_length=1)
    ruleset: str = Field(default=".spectral.yaml", min_length=1)
    included_files: str = DEFAULT_INCLUDED_FILES
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    project_root: Path | None = None

    @property
    def inclusion_patterns(self) -> tuple[str, ...]:
        """Return the configured inclusion patterns in order."""
        return parse_inclusion_patterns(self.included_files)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: unable to read configuration: {exc}") from exc


def _pyproject_section(root: Path) -> dict[str, Any]:
    path = root / PYPROJECT_FILENAME
    if not path.is_file():
        return {}
    data: Any = _read_toml(path)
    for key in PYPROJECT_TABLE:
        if not isinstance(data, Mapping):
            return {}
        data = data.get(key, {})
    if not isinstance(data, Mapping):
        raise ConfigError(f"{path}: [tool.speclint] must be a table")
    return dict(data)


def _config_file_section(root: Path) -> dict[str, Any]:
    path = root / CONFIG_FILENAME
    if not path.is_file():
        return {}
    return _read_toml(path)


def _normalise_fragment(fragment: Mapping[str, Any]) -> dict[str, Any]:
    normalised: dict[str, Any] = {}
    for key, value in fragment.items():
        name = key.replace("-", "_")
        if name == "included_files" and isinstance(value, list):
            value = "\n".join(str(item) for item in value)
        normalised[name] = value
    return normalised


def _environment_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for suffix, field in _ENV_FIELDS.items():
        value = environ.get(f"{ENV_PREFIX}{suffix}")
        if value is not None and value.strip():
            overrides[field] = value
    return overrides


def load_settings(
    root: Path,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SpectralSettings:
    """Load settings for ``root`` with layered precedence.

    Sources are merged lowest first: defaults, ``[tool.speclint]`` in
    ``pyproject.toml``, ``.speclint.toml``, ``SPECLINT_*`` environment
    variables, then explicit ``overrides`` (typically CLI flags). The project
    root defaults to ``root`` unless a source sets it.

    Args:
        root: Project directory searched for configuration files.
        environ: Environment mapping; ``os.environ`` when omitted.
        overrides: Highest-precedence values, ``None`` entries are ignored.

    Returns:
        SpectralSettings: Validated settings.

    Raises:
        ConfigError: If any source is unreadable or a value fails validation.
    """

    merged: dict[str, Any] = {"project_root": root}
    merged.update(_normalise_fragment(_pyproject_section(root)))
    merged.update(_normalise_fragment(_config_file_section(root)))
    merged.update(_environment_overrides(os.environ if environ is None else environ))
    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        settings = SpectralSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"invalid speclint configuration: {exc}") from exc
    if settings.project_root is not None and not settings.project_root.is_absolute():
        settings.project_root = (root / settings.project_root).resolve()
    return settings


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_INCLUDED_FILES",
    "DEFAULT_TIMEOUT_SECONDS",
    "SpectralSettings",
    "load_settings",
]
