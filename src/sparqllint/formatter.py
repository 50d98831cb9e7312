"""
SPARQL reformatting.

The pipeline only depends on the :class:`Formatter` protocol; the default
implementation, :class:`SparqlFormatter`, checks the text against rdflib's
SPARQL 1.1 grammar and re-serializes its token stream.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pyparsing import ParseBaseException
from rdflib.plugins.sparql.parser import parseQuery, parseUpdate

from .errors import FormatterError, SparqlLexError
from .lexer import TokenKind, tokenize
from .models import FormatMode
from .serializer import SparqlSerializer

__all__ = [
    "Formatter",
    "SparqlFormatter",
    "check_syntax",
]

logger = logging.getLogger(__name__)


class Formatter(Protocol):
    """Reformats SPARQL text; raises :class:`FormatterError` on invalid input."""

    def reformat(self, text: str, mode: FormatMode) -> str:
        ...


def check_syntax(text: str) -> str:
    """Parse ``text`` as a SPARQL query, then as an update.

    Returns:
        ``"query"`` or ``"update"``

    Raises:
        FormatterError: The text is neither a query nor an update
    """
    try:
        parseQuery(text)
        return "query"
    except (ParseBaseException, ValueError) as query_error:
        logger.debug(f"Not a SPARQL query: {query_error}")
        try:
            parseUpdate(text)
            return "update"
        except (ParseBaseException, ValueError) as update_error:
            logger.debug(f"Not a SPARQL update: {update_error}")
            raise FormatterError(f"Failed to parse query: {query_error}") from query_error


class SparqlFormatter:
    """Default :class:`Formatter`.

    Args:
        validate: Check the text with rdflib's SPARQL parser before formatting.
            Disable only for input known to be valid.
    """

    def __init__(self, validate: bool = True) -> None:
        self.validate = validate

    def reformat(self, text: str, mode: FormatMode) -> str:
        if self.validate:
            kind = check_syntax(text)
            logger.debug(f"Input parsed as a SPARQL {kind}")

        # Comments always end their line, so they are dropped from concise output
        try:
            tokens = tokenize(text, include_comments=mode.pretty)
        except SparqlLexError as e:
            raise FormatterError(f"Failed to tokenize query: {e}") from e

        if not any(t.kind is not TokenKind.COMMENT for t in tokens):
            raise FormatterError("Query is empty")

        logger.debug(f"Serializing {len(tokens)} tokens ({mode.value})")
        return SparqlSerializer(pretty=mode.pretty).serialize(tokens)
