"""
Query source resolution.

An argument is either the path of a query file or the query text itself.
The decision is made once, by probing the argument as a filesystem path:

    from sparqllint.resolver import read_query

    resolved = read_query("query.rq")
    resolved.base_uri      # 'file:///home/me/query.rq'

    resolved = read_query("SELECT * WHERE { ?s ?p ?o }")
    resolved.base_uri      # None

Filesystem access goes through a :class:`FileProbe` so that callers (and
tests) can substitute an in-memory implementation.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from .config import Config
from .errors import QueryEncodingError, QuerySourceError
from .models import FileSource, LiteralSource, QuerySource, ResolvedQuery, StdinSource

__all__ = [
    "FileProbe",
    "LocalFileProbe",
    "decode_bytes",
    "read_query",
    "resolve_source",
]

logger = logging.getLogger(__name__)


class FileProbe(Protocol):
    """Filesystem capability used by the resolver."""

    def exists(self, path: str) -> bool:
        """Return True if a resource is reachable at ``path``; never raise."""
        ...

    def read_bytes(self, path: str) -> bytes:
        """Return the whole content of ``path``; raise ``OSError`` on failure."""
        ...

    def base_uri(self, path: str) -> str:
        """Return the absolute ``file://`` URI of ``path``."""
        ...


class LocalFileProbe:
    """:class:`FileProbe` backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        try:
            return Path(path).exists()
        except (OSError, ValueError) as e:
            # ENAMETOOLONG, embedded NUL and friends: a query literal, not a file
            logger.debug(f"Path probe failed for argument: {e}")
            return False

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def base_uri(self, path: str) -> str:
        return Path(path).absolute().as_uri()


def resolve_source(argument: str, probe: Optional[FileProbe] = None) -> QuerySource:
    """Classify ``argument`` as a query file, standard input or literal text.

    Args:
        argument: Command line argument naming the query
        probe: Filesystem capability, the local filesystem by default

    Returns:
        The active :data:`~sparqllint.models.QuerySource` variant
    """
    probe = probe or LocalFileProbe()
    if argument == Config.STDIN_ARGUMENT:
        return StdinSource()
    if probe.exists(argument):
        return FileSource(path=argument, base_uri=probe.base_uri(argument))
    try:
        argument.encode("utf-8")
    except UnicodeEncodeError as e:
        raise QueryEncodingError("Could not interpret SPARQL query string as UTF-8") from e
    return LiteralSource(text=argument)


def read_query(
    argument: str,
    probe: Optional[FileProbe] = None,
    stdin: Optional[BinaryIO] = None,
) -> ResolvedQuery:
    """Resolve ``argument`` and load the raw query bytes.

    Args:
        argument: Query file path, query text, or ``-`` for standard input
        probe: Filesystem capability, the local filesystem by default
        stdin: Binary stream read for ``-``, ``sys.stdin.buffer`` by default

    Returns:
        ResolvedQuery with the raw bytes and, for files, the base URI

    Raises:
        QuerySourceError: The file is reachable but could not be read
        QueryEncodingError: The literal argument is not encodable as UTF-8
    """
    probe = probe or LocalFileProbe()
    source = resolve_source(argument, probe)

    if isinstance(source, FileSource):
        logger.debug(f"Reading query from file: {source.path}")
        try:
            data = probe.read_bytes(source.path)
        except OSError as e:
            raise QuerySourceError(f"Failed to read query file {source.path}: {e}") from e
        return ResolvedQuery(source=source, data=data, base_uri=source.base_uri)

    if isinstance(source, StdinSource):
        logger.debug("Reading query from standard input")
        stream = stdin if stdin is not None else sys.stdin.buffer
        try:
            data = stream.read()
        except OSError as e:
            raise QuerySourceError(f"Failed to read query from standard input: {e}") from e
        return ResolvedQuery(source=source, data=data)

    logger.debug("Argument is not a reachable path; using it as query text")
    return ResolvedQuery(source=source, data=source.text.encode("utf-8"))


def decode_bytes(data: bytes) -> str:
    """Decode raw query bytes as strict UTF-8.

    Raises:
        QueryEncodingError: The bytes are not valid UTF-8
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise QueryEncodingError(f"Failed to decode SPARQL query as UTF-8: {e}") from e
