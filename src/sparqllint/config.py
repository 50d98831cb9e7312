"""Static configuration for the sparqllint command line tool."""

from __future__ import annotations

import logging


class Config:
    """Defaults shared by the CLI, the pipeline and the serializer."""

    # One level of indentation in pretty output
    INDENT = "    "

    # Exit statuses
    EXIT_USAGE = 1
    EXIT_FAILURE = 2

    # Usage lines printed when no query is given; {prog} is the program name
    USAGE = (
        "Usage: {prog} [-c] [-d] [-l] QUERY_FILE_OR_STRING",
        "  -c  one-line output;  -d  URL-decode first;  -l  read one query per line from stdin",
    )

    # Positional argument that reads the query from standard input
    STDIN_ARGUMENT = "-"

    LOG_FORMAT = "%(levelname)s: %(message)s"
    VERBOSE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger; all log output goes to stderr."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format=Config.VERBOSE_LOG_FORMAT,
            force=True,
        )
        logging.getLogger("sparqllint").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING, format=Config.LOG_FORMAT, force=True)
