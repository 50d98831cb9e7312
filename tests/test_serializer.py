"""Tests for the pretty and plain token serializer."""

import pytest

from sparqllint.lexer import tokenize
from sparqllint.serializer import SparqlSerializer

PRETTY_CASES = [
    (
        "SELECT * WHERE { ?s ?p ?o }",
        "SELECT * WHERE {\n    ?s ?p ?o\n}",
    ),
    (
        "PREFIX ex: <http://example.org/> SELECT ?x WHERE { ?x a ex:C . FILTER(?x != ex:y) }",
        "PREFIX ex: <http://example.org/>\nSELECT ?x WHERE {\n    ?x a ex:C .\n    FILTER(?x != ex:y)\n}",
    ),
    (
        "SELECT * WHERE { { ?s ?p ?o } UNION { ?s ?q ?o } }",
        "SELECT * WHERE {\n    {\n        ?s ?p ?o\n    } UNION {\n        ?s ?q ?o\n    }\n}",
    ),
    (
        "SELECT * WHERE { ?s ?p ?o OPTIONAL { ?s ?q ?v } }",
        "SELECT * WHERE {\n    ?s ?p ?o\n    OPTIONAL {\n        ?s ?q ?v\n    }\n}",
    ),
    (
        "SELECT ?s WHERE { ?s ?p ?o } ORDER BY DESC(?s) LIMIT 10",
        "SELECT ?s WHERE {\n    ?s ?p ?o\n}\nORDER BY DESC(?s)\nLIMIT 10",
    ),
    (
        "SELECT * WHERE { ?s ?p ?o ; ?q ?v . }",
        "SELECT * WHERE {\n    ?s ?p ?o ;\n        ?q ?v .\n}",
    ),
    (
        "SELECT * WHERE { BIND(1 AS ?x) ?s ?p ?x }",
        "SELECT * WHERE {\n    BIND(1 AS ?x)\n    ?s ?p ?x\n}",
    ),
    (
        "INSERT DATA { <http://a> <http://b> <http://c> }",
        "INSERT DATA {\n    <http://a> <http://b> <http://c>\n}",
    ),
]


def pretty(text, **kwargs):
    return SparqlSerializer(pretty=True, **kwargs).serialize(
        tokenize(text, include_comments=True)
    )


def plain(text):
    return SparqlSerializer(pretty=False).serialize(tokenize(text, include_comments=True))


@pytest.mark.parametrize("query,expected", PRETTY_CASES)
def test_pretty_layout(query, expected):
    assert pretty(query) == expected


@pytest.mark.parametrize("query,expected", PRETTY_CASES)
def test_pretty_is_idempotent(query, expected):
    """Reformatting pretty output gives the same text."""
    assert pretty(expected) == expected


@pytest.mark.parametrize("query,expected", PRETTY_CASES)
def test_plain_is_single_line(query, expected):
    output = plain(expected)
    assert "\n" not in output
    assert output == plain(query)


def test_plain_spacing():
    assert plain("SELECT*{?s ?p ?o}") == "SELECT * { ?s ?p ?o }"


def test_plain_collapses_whitespace():
    assert plain("SELECT  *\n\tWHERE {\n  ?s ?p ?o\n}") == "SELECT * WHERE { ?s ?p ?o }"


def test_comment_keeps_own_line():
    query = "# find all\nSELECT * WHERE { ?s ?p ?o }"
    assert pretty(query) == "# find all\nSELECT * WHERE {\n    ?s ?p ?o\n}"
    assert plain(query) == "# find all\nSELECT * WHERE { ?s ?p ?o }"


def test_custom_indent():
    assert pretty("SELECT * WHERE { ?s ?p ?o }", indent="  ") == "SELECT * WHERE {\n  ?s ?p ?o\n}"


def test_no_surrounding_whitespace():
    output = pretty("\n\n  SELECT * WHERE { ?s ?p ?o }  \n")
    assert output == output.strip()


def test_literals_untouched():
    query = 'SELECT * WHERE { ?s ?p "a  b"@en , "1"^^<http://www.w3.org/2001/XMLSchema#int> }'
    output = pretty(query)
    assert '"a  b"@en' in output
    assert '"1"^^<http://www.w3.org/2001/XMLSchema#int>' in output


def test_empty_token_stream():
    assert SparqlSerializer().serialize([]) == ""
    assert SparqlSerializer(pretty=False).serialize([]) == ""


@pytest.mark.parametrize(
    "query",
    [
        "SELECT * WHERE { ?s <http://p>* ?o }",
        "SELECT * WHERE { ?s ^<http://p>/<http://q>? ?o }",
        'SELECT * WHERE { ?s ?p "v"@en , "1"^^<http://t> }',
        "SELECT * WHERE { ?s ?p ?o FILTER(!BOUND(?o)) }",
    ],
)
def test_plain_keeps_adjacent_tokens_together(query):
    """Path modifiers, tags and function calls are not split apart."""
    assert plain(query) == query


def test_plain_escapes_line_breaks_in_long_literals():
    output = plain("ASK { ?s ?p '''one\ntwo''' }")
    assert output == "ASK { ?s ?p '''one\\ntwo''' }"


def test_plain_comment_inside_group():
    output = plain("SELECT * WHERE { # inner\n?s ?p ?o }")
    assert output == "SELECT * WHERE { # inner\n?s ?p ?o }"
