# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line interface for running Spectral through speclint."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Final

import typer

from .config import ConfigError, SpectralSettings, load_settings
from .console import get_console_manager
from .errors import LintError
from .logging import configure_logging, fail, info, ok, warn
from .matcher import should_lint
from .orchestrator import SpectralRunner
from .projection import LineIndex, project_issues
from .reporting import render_json, render_sarif, render_table

EXIT_OK: Final[int] = 0
EXIT_FINDINGS: Final[int] = 1
EXIT_LINT_ERROR: Final[int] = 2
EXIT_EXCLUDED: Final[int] = 3
EXIT_NOT_INCLUDED: Final[int] = 1

app = typer.Typer(help="Run the Spectral API linter and project its findings.", no_args_is_help=True)


class OutputFormat(str, Enum):
    """Rendering formats supported by ``speclint lint``."""

    TABLE = "table"
    JSON = "json"
    SARIF = "sarif"


def _runner_factory(settings: SpectralSettings) -> SpectralRunner:
    return SpectralRunner(settings)


def _load(root: Path, **overrides: object) -> SpectralSettings:
    try:
        return load_settings(root, overrides=overrides)
    except ConfigError as exc:
        fail(str(exc), use_emoji=False)
        raise typer.Exit(code=EXIT_LINT_ERROR) from exc


@app.command("lint")
def lint_command(
    path: Annotated[Path, typer.Argument(help="Document to lint.", exists=True, dir_okay=False, readable=True)],
    root: Annotated[Path, typer.Option("--root", help="Project root used for configuration and patterns.")] = Path(),
    ruleset: Annotated[str | None, typer.Option("--ruleset", "-r", help="Ruleset path or identifier.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Seconds before Spectral is killed.")] = None,
    output: Annotated[OutputFormat, typer.Option("--format", "-f", help="Output format.")] = OutputFormat.TABLE,
    force: Annotated[bool, typer.Option("--force", help="Lint even when no inclusion pattern matches.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable ANSI colour output.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
) -> None:
    """Lint a single API specification document."""

    use_color = not no_color
    use_emoji = not no_emoji
    configure_logging(verbose=verbose, use_color=use_color)
    project_root = root.resolve()
    settings = _load(project_root, ruleset=ruleset, timeout=timeout)
    document = path.resolve()

    if not force and not should_lint(settings.project_root, document, settings.inclusion_patterns):
        warn(f"{path} does not match any included file pattern; skipping", use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=EXIT_EXCLUDED)

    try:
        content = document.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        fail(f"Unable to read {path}: {exc}", use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=EXIT_LINT_ERROR) from exc
    try:
        issues = _runner_factory(settings).run(content)
    except LintError as exc:
        fail(exc.describe(), use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=EXIT_LINT_ERROR) from exc

    projection = project_issues(issues, LineIndex.from_text(content))
    label = str(path)
    if output is OutputFormat.JSON:
        typer.echo(render_json(projection, label))
    elif output is OutputFormat.SARIF:
        typer.echo(render_sarif(projection, label))
    else:
        render_table(projection, label, get_console_manager().get(color=use_color, emoji=use_emoji))
    raise typer.Exit(code=EXIT_FINDINGS if projection.has_errors else EXIT_OK)


@app.command("included")
def included_command(
    path: Annotated[Path, typer.Argument(help="Candidate document path.")],
    root: Annotated[Path, typer.Option("--root", help="Project root used for configuration and patterns.")] = Path(),
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
) -> None:
    """Report whether a path is covered by the configured inclusion patterns."""

    use_emoji = not no_emoji
    settings = _load(root.resolve())
    candidate = path if path.is_absolute() else (root.resolve() / path)
    if should_lint(settings.project_root, candidate, settings.inclusion_patterns):
        ok(f"{path} is included", use_emoji=use_emoji)
        raise typer.Exit(code=EXIT_OK)
    info(f"{path} is not included", use_emoji=use_emoji)
    raise typer.Exit(code=EXIT_NOT_INCLUDED)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
