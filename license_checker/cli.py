"""CLI entry point for license-checker."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Literal, cast

import click
from rich.console import Console

from license_checker import __version__
from license_checker.config import load_config
from license_checker.constants import (
    DEFAULT_REPORT_NAME,
    EXIT_ERROR,
    EXIT_ISSUES,
    EXIT_SUCCESS,
)
from license_checker.exceptions import LicenseCheckerError, ReportError
from license_checker.logging_config import configure_logging
from license_checker.models.dependency import Ecosystem
from license_checker.models.report import LicenseReport
from license_checker.models.scan import ReportOptions, Verbosity
from license_checker.output.report_html import HtmlReportFormatter
from license_checker.output.report_json import JsonReportFormatter
from license_checker.output.terminal import TerminalFormatter
from license_checker.scanner import ALL_ECOSYSTEMS, scan_project

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Dependency License Checker - Map dependency licenses of a project.

    Finds package.json and requirements.txt below a project directory,
    resolves the full transitive dependency tree from npm and PyPI, and
    flags copyleft licenses.

    \b
    Examples:
        license-checker report
        license-checker report path/to/project
        license-checker report --format json -o report.json
        license-checker report --format terminal
    """
    pass


@main.command()
@click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "json", "terminal"], case_sensitive=False),
    default="html",
    help="Output format of the report (default: html).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Report file (default: {DEFAULT_REPORT_NAME} for html, stdout otherwise).",
)
@click.option(
    "--ecosystem",
    "ecosystems",
    type=click.Choice([e.value for e in Ecosystem], case_sensitive=False),
    multiple=True,
    help="Only scan the given ecosystem (repeatable; default: all).",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_flag",
    is_flag=True,
    default=False,
    help="Show debug logging and package page links.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Suppress non-essential output.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
@click.option(
    "--fail-on-copyleft",
    is_flag=True,
    default=False,
    help="Exit with status 1 when copyleft licenses are found.",
)
def report(
    root: Path,
    output_format: str,
    output_path: str | None,
    ecosystems: tuple[str, ...],
    verbose_flag: bool,
    quiet_flag: bool,
    config_path: str | None,
    fail_on_copyleft: bool,
) -> None:
    """Generate a dependency license report for a project.

    \b
    Examples:
        license-checker report
        license-checker report ./my-app --ecosystem node
        license-checker report --format json > report.json
        license-checker report --output licenses.html
        license-checker report --fail-on-copyleft --quiet
    """
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")

    if quiet_flag:
        verbosity = Verbosity.QUIET
    elif verbose_flag:
        verbosity = Verbosity.VERBOSE
    else:
        verbosity = Verbosity.NORMAL

    configure_logging(verbose=verbose_flag, quiet=quiet_flag)

    format_value = cast(Literal["html", "json", "terminal"], output_format.lower())
    options = ReportOptions(
        format=format_value,
        verbosity=verbosity,
        fail_on_copyleft=fail_on_copyleft,
    )
    selected = (
        tuple(Ecosystem(value.lower()) for value in ecosystems)
        if ecosystems
        else ALL_ECOSYSTEMS
    )

    try:
        config = load_config(config_path, search_dir=root)

        show_progress = (
            options.format != "json" and options.verbosity != Verbosity.QUIET
        )
        result = asyncio.run(
            scan_project(
                root,
                config,
                ecosystems=selected,
                console=_error_console if show_progress else None,
                show_progress=show_progress,
            )
        )
        _display_report(result, options, output_path)

        if options.fail_on_copyleft and result.has_copyleft:
            sys.exit(EXIT_ISSUES)
        sys.exit(EXIT_SUCCESS)

    except LicenseCheckerError as e:
        _display_error(e, options.format)
        sys.exit(EXIT_ERROR)


def _write_output_to_file(content: str, path: str, quiet: bool = False) -> None:
    """Write report content to file.

    Args:
        content: The report content to write.
        path: The file path to write to.
        quiet: Suppress the confirmation message.

    Raises:
        ReportError: If file cannot be written.
    """
    file_path = Path(path)

    try:
        if file_path.exists() and not quiet:
            _console.print(
                f"[yellow]Warning: Overwriting existing file: {path}[/yellow]"
            )

        file_path.write_text(content, encoding="utf-8")
        # User read/write, group/other read
        file_path.chmod(0o644)
    except OSError as e:
        raise ReportError(f"Cannot write to file '{path}': {e}") from e

    if not quiet:
        _console.print(f"[green]{path} generated successfully![/green]")


def _display_report(
    result: LicenseReport, options: ReportOptions, output_path: str | None = None
) -> None:
    """Render the report in the requested format.

    HTML always goes to a file; JSON and terminal output go to stdout unless
    an output path is given.

    Args:
        result: The report to render.
        options: Report options including format.
        output_path: Optional file path to write output to.
    """
    quiet = options.verbosity == Verbosity.QUIET

    if options.format == "html":
        content = HtmlReportFormatter().format_report(result)
        _write_output_to_file(content, output_path or DEFAULT_REPORT_NAME, quiet)
        return

    if options.format == "json":
        content = JsonReportFormatter().format_report(result)
    else:  # terminal
        if output_path:
            # Terminal format to file uses html instead
            content = HtmlReportFormatter().format_report(result)
        else:
            TerminalFormatter(
                console=_console, verbosity=options.verbosity
            ).format_report(result)
            return

    if output_path:
        _write_output_to_file(content, output_path, quiet)
    else:
        click.echo(content)


def _display_error(error: LicenseCheckerError, format_type: str) -> None:
    """Display error message to user on stderr.

    Args:
        error: The exception that occurred.
        format_type: Output format type for styling.
    """
    error_type = type(error).__name__
    message = f"Error: {error_type}: {error}"

    if format_type == "terminal":
        _error_console.print(f"[red bold]{message}[/red bold]")
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
