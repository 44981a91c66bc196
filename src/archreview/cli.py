"""archreview CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from archreview import __version__


@click.group()
@click.version_option(version=__version__, prog_name="archreview")
@click.option("--verbose", "-v", is_flag=True, help="Verbose (debug) logging.")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool) -> None:
    """archreview - Clean Architecture checks for TypeScript projects."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)
@click.option(
    "--src",
    "source_dir",
    default=None,
    help="Source directory relative to the project root (default: from .archreview.yml or 'src').",
)
@click.option("--detailed", is_flag=True, help="Include info-level findings.")
@click.option("--json", "output_json", is_flag=True, help="Structured JSON output.")
@click.option("--fix", is_flag=True, help="Reserved; no fixes are applied.")
def review(
    *,
    project: Path | None,
    source_dir: str | None,
    detailed: bool,
    output_json: bool,
    fix: bool,
) -> None:
    """Review the project's TypeScript sources for architecture violations.

    Exit codes: 0 = no errors, 1 = error-level violations found,
    2 = configuration error (e.g. missing source directory).
    """
    from archreview.config import load_options
    from archreview.errors import ReviewError
    from archreview.reviewer import CodeReviewer

    project_root = project or Path.cwd()

    try:
        options = load_options(project_root).merged(
            source_dir=source_dir,
            detailed=detailed or None,
            format="json" if output_json else None,
            fix=fix or None,
        )
        result = CodeReviewer(project_root, options).analyze()
    except ReviewError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if result.failed:
        sys.exit(1)
