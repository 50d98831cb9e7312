"""URL decoding of query text (application/x-www-form-urlencoded)."""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote_to_bytes

from .errors import QueryEncodingError

__all__ = [
    "decode_query",
    "url_decode",
]

logger = logging.getLogger(__name__)

# A percent sign that does not start a two-digit hex escape
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def url_decode(text: str) -> str:
    """Reverse form URL encoding of ``text``.

    ``+`` is replaced with a space before percent escapes are decoded, so
    ``%2B`` yields a literal ``+``::

        >>> url_decode("a+b%2Bc")
        'a b+c'

    Raises:
        QueryEncodingError: A ``%`` escape is malformed, or the decoded
            bytes are not valid UTF-8
    """
    text = text.replace("+", " ")
    bad = _MALFORMED_ESCAPE.search(text)
    if bad:
        raise QueryEncodingError(
            f"Failed to URL percent decode SPARQL query: malformed escape at offset {bad.start()}"
        )
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeError as e:
        raise QueryEncodingError(f"Failed to URL percent decode SPARQL query: {e}") from e


def decode_query(text: str, enabled: bool) -> str:
    """Return ``text`` URL-decoded when ``enabled``, unchanged otherwise."""
    if not enabled:
        return text
    decoded = url_decode(text)
    logger.debug(f"URL-decoded query ({len(text)} -> {len(decoded)} characters)")
    return decoded
