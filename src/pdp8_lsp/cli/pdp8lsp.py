"""
pdp8-lsp - Language Server Command-Line Interface
=================================================

Starts the language server on stdio. Editors launch this command and talk
to it over stdin/stdout, so nothing but protocol messages may be written
to stdout; use --log-file to keep a log.

Usage Examples
--------------
    $ pdp8-lsp
    $ pdp8-lsp -v --log-file /tmp/pdp8-lsp.log
    $ pdp8-lsp --max-problems 500
"""

import asyncio
from pathlib import Path
from typing import Optional

import click

from pdp8_lsp import __version__
from pdp8_lsp.cli import configure_logging
from pdp8_lsp.cli.errors import handle_cli_exception
from pdp8_lsp.config import LSPSettings
from pdp8_lsp.server import LanguageServer


@click.command()
@click.option(
    "-m", "--max-problems",
    type=click.IntRange(min=1),
    default=None,
    help="Initial problem budget (the editor's maxNumberOfProblems overrides it)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the server log to this file instead of stderr",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Log debug messages",
)
@click.version_option(version=__version__, prog_name="pdp8-lsp")
def main(max_problems: Optional[int], log_file: Optional[Path], verbose: bool) -> None:
    """
    Run the PDP-8 assembly language server on stdio.
    """
    configure_logging(verbose, log_file)

    settings = LSPSettings.from_env()
    if max_problems is not None:
        settings.max_number_of_problems = max_problems

    try:
        asyncio.run(LanguageServer(settings=settings).run())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Server")


if __name__ == "__main__":
    main()
