"""Report generator: render a review result as console text or JSON."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.text import Text

from archreview.violations import Severity

if TYPE_CHECKING:
    from rich.console import Console

    from archreview.config import ReviewOptions
    from archreview.violations import ReviewResult

_RULE = "─" * 80

# Section header and style per severity.
_SECTIONS: dict[Severity, tuple[str, str]] = {
    Severity.ERROR: ("✗ Errors:", "red"),
    Severity.WARNING: ("⚠ Warnings:", "yellow"),
    Severity.INFO: ("ℹ Info:", "blue"),
}


def render_text(result: ReviewResult, *, detailed: bool = False) -> list[tuple[str, str]]:
    """Render *result* as ``(line, style)`` pairs.

    Info-level violations are only listed when *detailed* is set; they are
    always counted in the summary.

    Example output::

        Code Review Report
        ────────────────
        Summary:
          Files scanned: 3
          Errors: 1
          Warnings: 0
          Info: 0
          Total violations: 1

        ✗ Errors:
          src/application/WidgetService.ts:1
            [LAYER_VIOLATION] Application layer cannot import from ...

        ────────────────
        ⚠ Found 1 violation(s)
    """
    stats = result.stats
    lines: list[tuple[str, str]] = [
        ("Code Review Report", "bold blue"),
        (_RULE, "dim"),
        ("Summary:", "bold"),
        (f"  Files scanned: {stats.files_scanned}", "dim"),
        (f"  Errors: {len(result.errors)}", "red"),
        (f"  Warnings: {len(result.warnings)}", "yellow"),
        (f"  Info: {len(result.info)}", "blue"),
        (f"  Total violations: {stats.total_violations}", "dim"),
        ("", ""),
    ]

    for severity, (header, style) in _SECTIONS.items():
        if severity is Severity.INFO and not detailed:
            continue
        violations = result.bucket(severity)
        if not violations:
            continue
        lines.append((header, f"bold {style}"))
        for v in violations:
            lines.append((f"  {v.location}", style))
            lines.append((f"    [{v.code}] {v.message}", "dim"))
        lines.append(("", ""))

    lines.append((_RULE, "dim"))
    if not result.errors and not result.warnings:
        lines.append(("✓ No violations found! Code looks good.", "bold green"))
    else:
        lines.append((f"⚠ Found {stats.total_violations} violation(s)", "bold yellow"))
    return lines


def format_text(result: ReviewResult, *, detailed: bool = False) -> str:
    """Plain-text report without styling."""
    return "\n".join(line for line, _style in render_text(result, detailed=detailed))


def to_dict(result: ReviewResult) -> dict[str, object]:
    """Structured form of *result*; info is always included."""
    return {
        "errors": [v.to_dict() for v in result.errors],
        "warnings": [v.to_dict() for v in result.warnings],
        "info": [v.to_dict() for v in result.info],
        "stats": {
            "files_scanned": result.stats.files_scanned,
            "total_violations": result.stats.total_violations,
        },
        "passed": not result.failed,
    }


def format_json(result: ReviewResult) -> str:
    return json.dumps(to_dict(result), indent=2)


def print_report(result: ReviewResult, options: ReviewOptions, console: Console) -> None:
    """Write the report for *result* to *console* in the configured format."""
    if options.format == "json":
        console.out(format_json(result), highlight=False)
        return
    for line, style in render_text(result, detailed=options.detailed):
        console.print(Text(line, style=style), soft_wrap=True)
