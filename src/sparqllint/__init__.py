"""sparqllint: reformat SPARQL queries given as files or literal strings.

Main modules:
- resolver: classify an argument as a query file or query text and load it
- decode: form URL decoding of query text
- formatter: the Formatter protocol and the default rdflib-checked formatter
- pipeline: resolve, decode and reformat in one call, or once per input line
- cli: the ``sparql-lint`` command
"""

from .errors import (
    FormatterError,
    QueryEncodingError,
    QuerySourceError,
    SparqlLexError,
    SparqlLintError,
)
from .formatter import Formatter, SparqlFormatter
from .models import FormatMode, LintOptions, LintResult
from .pipeline import reformat_lines, reformat_query, run_pipeline
from .version import VERSION

__all__ = [
    "VERSION",
    "FormatMode",
    "Formatter",
    "FormatterError",
    "LintOptions",
    "LintResult",
    "QueryEncodingError",
    "QuerySourceError",
    "SparqlFormatter",
    "SparqlLexError",
    "SparqlLintError",
    "reformat_lines",
    "reformat_query",
    "run_pipeline",
]
