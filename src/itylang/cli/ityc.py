"""
ityc - Ity Checker Command-Line Interface
=========================================

This module implements the command-line interface for the Ity frontend.
It scans a source file, expands its Require directives, and checks it
against the Ity grammar, printing both reports.

Usage Examples
--------------
Basic check:
    $ ityc program.txt

With include path:
    $ ityc -I ./lib program.txt

Scanner report only:
    $ ityc --scan-only program.txt

Save the reports:
    $ ityc program.txt -o program.report

Verbose mode:
    $ ityc -v program.txt

Exit Codes
----------
    0   no lexical or syntax errors
    1   the program has errors
    2   invalid arguments or unreadable source
    3   internal error
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from itylang import __version__
from itylang.cli.errors import ExitCode, handle_cli_exception
from itylang.frontend import FrontendOptions, FrontendPipeline


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-I", "--include",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Add include search path for Require (can be repeated)",
)
@click.option(
    "--strict-includes",
    is_flag=True,
    help="Report Require targets that cannot be found as errors",
)
@click.option(
    "--scan-only",
    is_flag=True,
    help="Print the scanner report only",
)
@click.option(
    "--force-parse",
    is_flag=True,
    help="Run the recognizer even if the scanner reported errors",
)
@click.option(
    "--encoding",
    default=None,
    help="Source file encoding (default: utf-8, or ITYLANG_ENCODING)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the reports to this file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="ityc")
def main(
    source: Path,
    include: tuple[Path, ...],
    strict_includes: bool,
    scan_only: bool,
    force_parse: bool,
    encoding: Optional[str],
    output: Optional[Path],
    verbose: bool,
) -> None:
    """
    Check an Ity source file.

    SOURCE is the program to check.

    The scanner report lists every token and lexical error. If there are
    no lexical errors, the parser report follows: the grammar rules that
    were tried and the syntax errors found.

    \b
    Examples:
        ityc program.txt                # Both reports
        ityc -I lib/ program.txt        # Search lib/ for Require files
        ityc --scan-only program.txt    # Tokens only
        ityc program.txt -o out.txt     # Also save the reports
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    # Environment first, command line on top
    options = FrontendOptions.from_env()
    options.include_paths = [str(p) for p in include] + options.include_paths
    options.strict_includes = options.strict_includes or strict_includes
    options.parse_on_lex_errors = force_parse
    if encoding:
        options.encoding = encoding

    try:
        if verbose:
            click.echo(f"Checking {source}...", err=True)
            if options.include_paths:
                click.echo(f"Include paths: {', '.join(options.include_paths)}", err=True)

        result = FrontendPipeline(options).run_file(source)

        if scan_only:
            report = result.scanner_report()
            failed = result.lexical_error_count > 0
        else:
            report = result.report()
            failed = not result.ok

        click.echo(report)

        if output is not None:
            output.write_text(report + "\n", encoding="utf-8")
            if verbose:
                click.echo(f"Wrote reports to {output}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose)

    sys.exit(ExitCode.CHECK_FAILED if failed else ExitCode.SUCCESS)


if __name__ == "__main__":
    main()
