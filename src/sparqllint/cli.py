"""Command line interface for :mod:`sparqllint`."""

from __future__ import annotations

import logging
from typing import List, Sequence

import click

from .config import Config, configure_logging
from .models import FormatMode, LintOptions
from .pipeline import reformat_lines, run_pipeline

__all__ = [
    "main",
    "scan_flags",
]

logger = logging.getLogger(__name__)

_RAW_ARGS = "sparqllint.raw_args"


class RawArgsCommand(click.Command):
    """Click command that leaves argument scanning to its callback.

    The flags are scanned in order and a bare ``--`` must reach the scanner,
    so click's own option parser is bypassed.
    """

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.meta[_RAW_ARGS] = list(args)
        return super().parse_args(ctx, [])


def scan_flags(args: Sequence[str]) -> LintOptions:
    """Build :class:`LintOptions` from the raw command line arguments.

    Flags are read from the first argument on; scanning stops at the first
    argument not starting with ``-`` or at a bare ``--``. Unknown flags are
    ignored. The last argument is always the query source, except with
    ``-l``, where queries are read from standard input one per line.
    """
    mode = FormatMode.PRETTY
    decode = False
    lines = False
    verbose = False
    show_help = False

    for arg in args:
        if arg == "--" or not arg.startswith("-"):
            break
        if arg == "-c":
            mode = FormatMode.CONCISE
        elif arg == "-d":
            decode = True
        elif arg == "-l":
            lines = True
        elif arg == "-v":
            verbose = True
        elif arg == "--help":
            show_help = True

    return LintOptions(
        mode=mode,
        decode=decode,
        lines=lines,
        verbose=verbose,
        show_help=show_help,
        argument=args[-1] if args else None,
    )


def _usage(prog: str) -> None:
    for line in Config.USAGE:
        click.echo(line.format(prog=prog))


def _reformat_stdin_lines(ctx: click.Context, options: LintOptions) -> None:
    """Reformat each line of stdin; failed lines are reported and skipped."""
    logger.debug("Reading one query per line from standard input")
    failed = 0
    for number, result in reformat_lines(click.get_binary_stream("stdin"), options):
        if result.ok:
            click.echo(result.output)
        else:
            failed += 1
            click.echo(f"Error: line {number}: {result.error}", err=True)

    if failed:
        logger.debug(f"{failed} line(s) could not be reformatted")
        ctx.exit(Config.EXIT_FAILURE)


@click.command("sparql-lint", cls=RawArgsCommand, add_help_option=False)
@click.pass_context
def main(ctx: click.Context) -> None:
    r"""Reformat a SPARQL query given as a file path or as a literal string.

    Example:
      sparql-lint query.rq
      sparql-lint -c 'SELECT * WHERE { ?s ?p ?o }'
      sparql-lint -c -d -l < encoded-queries.log
    """
    options = scan_flags(ctx.meta[_RAW_ARGS])
    configure_logging(options.verbose)

    if options.show_help or options.argument is None:
        _usage(ctx.info_name or "sparql-lint")
        ctx.exit(Config.EXIT_USAGE)

    if options.lines:
        _reformat_stdin_lines(ctx, options)
        return

    logger.debug(f"Options: mode={options.mode.value} decode={options.decode}")
    result = run_pipeline(options.argument, options)
    if not result.ok:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(Config.EXIT_FAILURE)

    click.echo(result.output)


if __name__ == "__main__":
    main()
