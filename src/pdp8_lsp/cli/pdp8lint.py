"""
pdp8lint - PDP-8 Assembly Linter Command-Line Interface
=======================================================

Runs the analyzer over source files and prints the diagnostics an editor
would show.

Usage Examples
--------------
Check a program:
    $ pdp8lint program.asm

Several files, machine-readable output:
    $ pdp8lint --format json a.asm b.asm

Report every problem instead of the first 99:
    $ pdp8lint --max-problems 10000 program.asm

Output Format
-------------
    program.asm:4:1: error: Missing END instruction.

Line and column are 1-based. The exit status is 1 when any error-severity
diagnostic was reported.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from pdp8_lsp import __version__
from pdp8_lsp.analyzer import Analyzer, Diagnostic, Severity
from pdp8_lsp.cli import configure_logging
from pdp8_lsp.cli.errors import ExitCode, handle_cli_exception
from pdp8_lsp.config import LSPSettings

logger = logging.getLogger(__name__)


def format_diagnostic(path: Path, diagnostic: Diagnostic) -> str:
    """Format a diagnostic as 'file:line:column: severity: message'."""
    start = diagnostic.range.start
    severity = diagnostic.severity.name.lower()
    return f"{path}:{start.line + 1}:{start.character + 1}: {severity}: {diagnostic.message}"


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-m", "--max-problems",
    type=click.IntRange(min=1),
    default=None,
    help="Problem budget per file (default: $PDP8_LSP_MAX_PROBLEMS or 100)",
)
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="pdp8lint")
def main(
    input_files: tuple[Path, ...],
    max_problems: Optional[int],
    output_format: str,
    verbose: bool,
) -> None:
    """
    Check PDP-8 style assembly source files.

    INPUT_FILE is one or more assembly source files.

    \b
    Examples:
        pdp8lint program.asm
        pdp8lint -f json program.asm
        pdp8lint -m 500 *.asm
    """
    configure_logging(verbose)

    settings = LSPSettings.from_env()
    if max_problems is not None:
        settings.max_number_of_problems = max_problems

    analyzer = Analyzer(settings.max_number_of_problems)
    has_errors = False
    report = []

    try:
        for path in input_files:
            if verbose:
                click.echo(f"Analyzing {path}...", err=True)

            diagnostics = analyzer.analyze(path.read_text(encoding="utf-8"))
            has_errors |= any(d.severity is Severity.ERROR for d in diagnostics)

            if output_format.lower() == "json":
                report.extend({"file": str(path), **d.to_dict()} for d in diagnostics)
            else:
                for diagnostic in diagnostics:
                    click.echo(format_diagnostic(path, diagnostic))

            if verbose:
                click.echo(f"{path}: {len(diagnostics)} problem(s)", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Analysis")

    if output_format.lower() == "json":
        click.echo(json.dumps(report, indent=2))

    sys.exit(ExitCode.BUILD_ERROR if has_errors else ExitCode.SUCCESS)


if __name__ == "__main__":
    main()
