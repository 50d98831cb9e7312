"""Tests for URL decoding of query text."""

import pytest

from sparqllint.decode import decode_query, url_decode
from sparqllint.errors import QueryEncodingError


def test_plus_becomes_space():
    """'+' is a space in form encoding."""
    assert url_decode("SELECT+*") == "SELECT *"


def test_encoded_plus_survives():
    assert url_decode("?x+%2B+1") == "?x + 1"


def test_percent_escapes():
    encoded = "SELECT+*+WHERE+%7B+%3Fs+%3Fp+%3Fo+%7D"
    assert url_decode(encoded) == "SELECT * WHERE { ?s ?p ?o }"


def test_multibyte_escape():
    assert url_decode("%22caf%C3%A9%22") == '"café"'


def test_lowercase_hex():
    assert url_decode("%7b%7d") == "{}"


def test_text_without_escapes_unchanged():
    assert url_decode("ASK {}") == "ASK {}"


@pytest.mark.parametrize("text", ["100%", "%zz", "%4", "SELECT %+*"])
def test_malformed_escape(text):
    """A '%' not followed by two hex digits is rejected."""
    with pytest.raises(QueryEncodingError, match="percent decode"):
        url_decode(text)


def test_invalid_utf8_after_decoding():
    with pytest.raises(QueryEncodingError, match="percent decode"):
        url_decode("%FF%FE")


def test_decode_disabled_is_identity():
    """Without decoding, escapes and '+' are left alone."""
    assert decode_query("a+b%20c%", enabled=False) == "a+b%20c%"


def test_decode_enabled():
    assert decode_query("a+b%20c", enabled=True) == "a b c"
