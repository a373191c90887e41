# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render projected lint results for the terminal and machine consumers."""

from __future__ import annotations

import json
from typing import Final

from rich import box
from rich.console import Console
from rich.table import Table

from .projection import Annotation, Projection, count_by_severity
from .severity import DisplaySeverity, severity_to_sarif

SARIF_VERSION: Final[str] = "2.1.0"
SARIF_SCHEMA: Final[str] = "https://schemastore.azurewebsites.net/schemas/json/sarif-2.1.0.json"
TOOL_NAME: Final[str] = "spectral"

_SEVERITY_COLORS: Final[dict[DisplaySeverity, str]] = {
    DisplaySeverity.ERROR: "red",
    DisplaySeverity.WARNING: "yellow",
    DisplaySeverity.WEAK_WARNING: "blue",
    DisplaySeverity.INFORMATION: "cyan",
}


def severity_color(severity: DisplaySeverity) -> str:
    """Return the rich colour name associated with a display severity."""

    return _SEVERITY_COLORS.get(severity, "yellow")


def location_label(annotation: Annotation) -> str:
    """Return a one-based ``line:column`` label for ``annotation``."""

    start = annotation.issue.range.start
    return f"{start.line + 1}:{start.character + 1}"


def render_table(projection: Projection, document: str, console: Console) -> None:
    """Print ``projection`` as a Rich table.

    Args:
        projection: Projected lint result.
        document: Document name shown in the title.
        console: Console receiving the output.
    """

    if projection.notice is not None:
        console.print(f"[yellow]{document}: {projection.notice.message}[/]")
        return
    if not projection.annotations:
        console.print(f"[green]{document}: no issues found[/]")
        return

    table = Table(title=document, box=box.SIMPLE, expand=True)
    table.add_column("Location", style="bold", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Code", style="magenta")
    table.add_column("Message", overflow="fold")
    for annotation in projection.annotations:
        color = severity_color(annotation.severity)
        table.add_row(
            location_label(annotation),
            f"[{color}]{annotation.severity.value}[/]",
            annotation.issue.code,
            annotation.issue.message,
        )
    console.print(table)

    counts = count_by_severity(annotation.issue for annotation in projection.annotations)
    summary = ", ".join(f"{count} {severity.name.lower()}" for severity, count in counts.items() if count)
    console.print(f"{len(projection.annotations)} issue(s): {summary}")
    if projection.skipped:
        console.print(f"[dim]{len(projection.skipped)} issue(s) with invalid ranges were skipped[/]")


def projection_to_dict(projection: Projection, document: str) -> dict[str, object]:
    """Return a JSON-friendly mapping describing ``projection``."""

    return {
        "document": document,
        "notice": (
            None
            if projection.notice is None
            else {"severity": projection.notice.severity.value, "message": projection.notice.message}
        ),
        "annotations": [
            {
                "start": annotation.span.start,
                "end": annotation.span.end,
                "severity": annotation.severity.value,
                "message": annotation.message,
                "issue": annotation.issue.model_dump(mode="json"),
            }
            for annotation in projection.annotations
        ],
        "skipped": len(projection.skipped),
    }


def render_json(projection: Projection, document: str) -> str:
    """Serialise ``projection`` as indented JSON."""

    return json.dumps(projection_to_dict(projection, document), indent=2)


def render_sarif(projection: Projection, document: str, *, version: str | None = None) -> str:
    """Serialise ``projection`` as a SARIF document.

    Args:
        projection: Projected lint result.
        document: Artifact URI recorded for each result.
        version: Optional tool version recorded with the run.

    Returns:
        str: SARIF JSON text.
    """

    rules: dict[str, dict[str, object]] = {}
    results: list[dict[str, object]] = []
    for annotation in projection.annotations:
        issue = annotation.issue
        if issue.code not in rules:
            rules[issue.code] = {
                "id": issue.code,
                "name": issue.code,
                "shortDescription": {"text": issue.message[:120]},
            }
        results.append(
            {
                "ruleId": issue.code,
                "level": severity_to_sarif(issue.severity),
                "message": {"text": issue.message},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": document},
                            "region": {
                                "startLine": issue.range.start.line + 1,
                                "startColumn": issue.range.start.character + 1,
                                "endLine": issue.range.end.line + 1,
                                "endColumn": issue.range.end.character + 1,
                            },
                        },
                    },
                ],
            },
        )
    if projection.notice is not None:
        results.append(
            {
                "ruleId": "unrecognized-format",
                "level": "warning",
                "message": {"text": projection.notice.message},
                "locations": [{"physicalLocation": {"artifactLocation": {"uri": document}}}],
            },
        )

    sarif_doc = {
        "version": SARIF_VERSION,
        "$schema": SARIF_SCHEMA,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": TOOL_NAME,
                        "version": version or "unknown",
                        "rules": list(rules.values()),
                    },
                },
                "results": results,
            },
        ],
    }
    return json.dumps(sarif_doc, indent=2)


__all__ = [
    "location_label",
    "projection_to_dict",
    "render_json",
    "render_sarif",
    "render_table",
    "severity_color",
]
