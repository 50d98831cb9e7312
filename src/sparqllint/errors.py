"""Exceptions raised by the sparqllint pipeline stages."""

from __future__ import annotations

__all__ = [
    "FormatterError",
    "QueryEncodingError",
    "QuerySourceError",
    "SparqlLexError",
    "SparqlLintError",
]


class SparqlLintError(Exception):
    """Base exception for sparqllint errors."""

    pass


class QueryEncodingError(SparqlLintError):
    """Raised when query text cannot be decoded or encoded as UTF-8."""

    pass


class QuerySourceError(SparqlLintError):
    """Raised when a reachable query file cannot be read."""

    pass


class FormatterError(SparqlLintError):
    """Raised when the formatter rejects the query as unparsable."""

    pass


class SparqlLexError(FormatterError):
    """Raised by the lexer on input it cannot tokenize."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column
