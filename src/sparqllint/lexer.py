"""
SPARQL 1.1 tokenizer.

Produces the flat token stream consumed by
:class:`~sparqllint.serializer.SparqlSerializer`. Literals, IRIs and prefixed
names are kept verbatim so that re-serializing a token never changes its
meaning; keywords are normalised to upper case and booleans to lower case.

Usage:
    from sparqllint.lexer import tokenize

    for token in tokenize("SELECT * WHERE { ?s ?p ?o }"):
        print(token.kind, token.text)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

from .errors import SparqlLexError

__all__ = [
    "AGGREGATES",
    "FUNCTIONS",
    "KEYWORDS",
    "Token",
    "TokenKind",
    "tokenize",
]


class TokenKind(str, Enum):
    """Lexical category of a :class:`Token`."""

    COMMENT = "comment"
    NIL = "nil"
    ANON = "anon"
    DOUBLE = "double"
    DECIMAL = "decimal"
    INTEGER = "integer"
    HATHAT = "hathat"
    LANG = "lang"
    LPAREN = "lparen"
    RPAREN = "rparen"
    LBRACE = "lbrace"
    RBRACE = "rbrace"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    EQUALS = "equals"
    NOTEQUALS = "notequals"
    BANG = "bang"
    LE = "le"
    GE = "ge"
    LT = "lt"
    GT = "gt"
    ANDAND = "andand"
    OROR = "oror"
    SEMICOLON = "semicolon"
    DOT = "dot"
    COMMA = "comma"
    PLUS = "plus"
    MINUS = "minus"
    STAR = "star"
    SLASH = "slash"
    HAT = "hat"
    QUESTION = "question"
    OR = "or"
    VAR = "var"
    STRING = "string"
    BNODE = "bnode"
    PNAME = "pname"
    BOOLEAN = "boolean"
    KEYWORD = "keyword"
    IRI = "iri"


@dataclass(frozen=True)
class Token:
    """A SPARQL token; ``offset`` is informational and ignored by ``==``."""

    kind: TokenKind
    value: str = ""
    offset: int = field(default=-1, compare=False)

    @property
    def text(self) -> str:
        """SPARQL rendering of the token."""
        kind = self.kind
        if kind in _FIXED_TEXT:
            return _FIXED_TEXT[kind]
        if kind is TokenKind.COMMENT:
            return f"# {self.value}" if self.value else "#"
        if kind is TokenKind.LANG:
            return f"@{self.value}"
        if kind is TokenKind.VAR:
            return f"?{self.value}"
        if kind is TokenKind.BNODE:
            return f"_:{self.value}"
        if kind is TokenKind.IRI:
            return f"<{self.value}>"
        if kind is TokenKind.KEYWORD and self.value == "A":
            return "a"
        return self.value

    def is_keyword(self, *names: str) -> bool:
        return self.kind is TokenKind.KEYWORD and self.value in names

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


_FIXED_TEXT = {
    TokenKind.NIL: "()",
    TokenKind.ANON: "[]",
    TokenKind.HATHAT: "^^",
    TokenKind.LPAREN: "(",
    TokenKind.RPAREN: ")",
    TokenKind.LBRACE: "{",
    TokenKind.RBRACE: "}",
    TokenKind.LBRACKET: "[",
    TokenKind.RBRACKET: "]",
    TokenKind.EQUALS: "=",
    TokenKind.NOTEQUALS: "!=",
    TokenKind.BANG: "!",
    TokenKind.LE: "<=",
    TokenKind.GE: ">=",
    TokenKind.LT: "<",
    TokenKind.GT: ">",
    TokenKind.ANDAND: "&&",
    TokenKind.OROR: "||",
    TokenKind.SEMICOLON: ";",
    TokenKind.DOT: ".",
    TokenKind.COMMA: ",",
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.STAR: "*",
    TokenKind.SLASH: "/",
    TokenKind.HAT: "^",
    TokenKind.QUESTION: "?",
    TokenKind.OR: "|",
}

FUNCTIONS = frozenset(
    [
        "STR", "LANG", "LANGMATCHES", "DATATYPE", "BOUND", "IRI", "URI", "BNODE",
        "RAND", "ABS", "CEIL", "FLOOR", "ROUND", "CONCAT", "STRLEN", "UCASE",
        "LCASE", "ENCODE_FOR_URI", "CONTAINS", "STRSTARTS", "STRENDS", "STRBEFORE",
        "STRAFTER", "YEAR", "MONTH", "DAY", "HOURS", "MINUTES", "SECONDS",
        "TIMEZONE", "TZ", "NOW", "UUID", "STRUUID", "MD5", "SHA1", "SHA256",
        "SHA384", "SHA512", "COALESCE", "IF", "STRLANG", "STRDT", "SAMETERM",
        "SUBSTR", "REPLACE", "ISIRI", "ISURI", "ISBLANK", "ISLITERAL", "ISNUMERIC",
        "REGEX",
    ]
)

AGGREGATES = frozenset(["COUNT", "SUM", "MIN", "MAX", "AVG", "SAMPLE", "GROUP_CONCAT"])

KEYWORDS = (
    frozenset(
        [
            "ADD", "ALL", "AS", "ASC", "ASK", "BASE", "BIND", "BY", "CLEAR",
            "CONSTRUCT", "COPY", "CREATE", "DATA", "DEFAULT", "DELETE", "DESC",
            "DESCRIBE", "DISTINCT", "DROP", "EXISTS", "FILTER", "FROM", "GRAPH",
            "GROUP", "HAVING", "IN", "INSERT", "INTO", "LIMIT", "LOAD", "MINUS",
            "MOVE", "NAMED", "NOT", "OFFSET", "OPTIONAL", "ORDER", "PREFIX",
            "REDUCED", "SELECT", "SEPARATOR", "SERVICE", "SILENT", "TO", "UNDEF",
            "UNION", "USING", "VALUES", "WHERE", "WITH",
        ]
    )
    | FUNCTIONS
    | AGGREGATES
)

# Character classes from the SPARQL 1.1 grammar (section 19.8)
_PN_CHARS_BASE = (
    "A-Za-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    "\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF"
    "\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
_PN_CHARS_U = _PN_CHARS_BASE + "_"
_PN_CHARS = _PN_CHARS_U + "\\-0-9\u00B7\u0300-\u036F\u203F-\u2040"
_PLX = r"(?:%[0-9A-Fa-f]{2}|\\[_~.\-!$&'()*+,;=/?#@%])"
_UCHAR = r"(?:\\u[0-9A-Fa-f]{4}|\\U[0-9A-Fa-f]{8})"
_ECHAR = r"""(?:\\[tbnrf\\"'])"""

_PN_PREFIX = f"[{_PN_CHARS_BASE}](?:[{_PN_CHARS}.]*[{_PN_CHARS}])?"
_PN_LOCAL = (
    f"(?:[{_PN_CHARS_U}:0-9]|{_PLX})"
    f"(?:(?:[{_PN_CHARS}.:]|{_PLX})*(?:[{_PN_CHARS}:]|{_PLX}))?"
)

_PN_START_RE = re.compile(f"[{_PN_CHARS_BASE}]")
_PNAME_RE = re.compile(f"(?:{_PN_PREFIX})?:(?:{_PN_LOCAL})?")
_VARNAME_RE = re.compile(f"[{_PN_CHARS_U}0-9][{_PN_CHARS_U}0-9\u00B7\u0300-\u036F\u203F-\u2040]*")
_BNODE_RE = re.compile(f"_:([{_PN_CHARS_U}0-9](?:[{_PN_CHARS}.]*[{_PN_CHARS}])?)")
_IRI_RE = re.compile(f"<((?:[^<>\"{{}}|^`\\\\\x00-\x20]|{_UCHAR})*)>")
_LANG_RE = re.compile(r"@([a-zA-Z]+(?:-[a-zA-Z0-9]+)*)")
_NIL_RE = re.compile(r"\([ \t\r\n]*\)")
_ANON_RE = re.compile(r"\[[ \t\r\n]*\]")
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_WS_RE = re.compile(r"[ \t\r\n]+")
_COMMENT_RE = re.compile(r"#([^\r\n]*)")

_NUMBER_RES = (
    (TokenKind.DOUBLE, re.compile(r"[+-]?(?:[0-9]+\.[0-9]*[eE][+-]?[0-9]+|\.[0-9]+[eE][+-]?[0-9]+|[0-9]+[eE][+-]?[0-9]+)")),
    (TokenKind.DECIMAL, re.compile(r"[+-]?[0-9]*\.[0-9]+")),
    (TokenKind.INTEGER, re.compile(r"[+-]?[0-9]+")),
)

_STRING_RES = (
    re.compile(f"'''(?:(?:'|'')?(?:[^'\\\\]|{_ECHAR}|{_UCHAR}))*'''"),
    re.compile(f'"""(?:(?:"|"")?(?:[^"\\\\]|{_ECHAR}|{_UCHAR}))*"""'),
    re.compile(f"'(?:[^'\\\\\\n\\r]|{_ECHAR}|{_UCHAR})*'"),
    re.compile(f'"(?:[^"\\\\\\n\\r]|{_ECHAR}|{_UCHAR})*"'),
)

# Single characters that always form a token on their own
_SINGLE = {
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "=": TokenKind.EQUALS,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "]": TokenKind.RBRACKET,
    ")": TokenKind.RPAREN,
    ";": TokenKind.SEMICOLON,
    "/": TokenKind.SLASH,
    "*": TokenKind.STAR,
}

# Two-character operators, tried before their one-character prefixes
_PAIRS = {
    "^^": TokenKind.HATHAT,
    "!=": TokenKind.NOTEQUALS,
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
    "&&": TokenKind.ANDAND,
    "||": TokenKind.OROR,
}

_PAIR_PREFIXES = {
    "^": TokenKind.HAT,
    "!": TokenKind.BANG,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "|": TokenKind.OR,
}


class _Lexer:
    """Cursor over the query text; one instance per :func:`tokenize` call."""

    def __init__(self, text: str, include_comments: bool) -> None:
        self.text = text
        self.pos = 0
        self.include_comments = include_comments

    def error(self, message: str) -> SparqlLexError:
        line = self.text.count("\n", 0, self.pos) + 1
        column = self.pos - (self.text.rfind("\n", 0, self.pos) + 1) + 1
        near = self.text[self.pos:self.pos + 20]
        return SparqlLexError(f"{message} near {near!r}", line, column)

    def tokens(self) -> Iterator[Token]:
        text = self.text
        while self.pos < len(text):
            ws = _WS_RE.match(text, self.pos)
            if ws:
                self.pos = ws.end()
                continue
            if text[self.pos] == "#":
                m = _COMMENT_RE.match(text, self.pos)
                start = self.pos
                self.pos = m.end()
                if self.include_comments:
                    yield Token(TokenKind.COMMENT, m.group(1).strip(), start)
                continue
            yield self.next_token()

    def take(self, kind: TokenKind, length: int, value: str = "") -> Token:
        token = Token(kind, value, self.pos)
        self.pos += length
        return token

    def take_match(self, kind: TokenKind, match: "re.Match[str]", value: str) -> Token:
        token = Token(kind, value, self.pos)
        self.pos = match.end()
        return token

    def next_token(self) -> Token:  # noqa: C901
        text, pos = self.text, self.pos
        c = text[pos]

        if c == "(":
            m = _NIL_RE.match(text, pos)
            if m:
                return self.take_match(TokenKind.NIL, m, "")
            return self.take(TokenKind.LPAREN, 1)
        if c == "[":
            m = _ANON_RE.match(text, pos)
            if m:
                return self.take_match(TokenKind.ANON, m, "")
            return self.take(TokenKind.LBRACKET, 1)
        if c in _SINGLE:
            return self.take(_SINGLE[c], 1)
        if c == "<":
            m = _IRI_RE.match(text, pos)
            if m:
                return self.take_match(TokenKind.IRI, m, m.group(1))
        if c in "^!<>|&":
            pair = text[pos:pos + 2]
            if pair in _PAIRS:
                return self.take(_PAIRS[pair], 2)
            if c in _PAIR_PREFIXES:
                return self.take(_PAIR_PREFIXES[c], 1)
            raise self.error("Unexpected character")
        if c in "?$":
            m = _VARNAME_RE.match(text, pos + 1)
            if m:
                return self.take_match(TokenKind.VAR, m, m.group(0))
            if c == "?":
                return self.take(TokenKind.QUESTION, 1)
            raise self.error("Invalid variable name")
        if c == "@":
            m = _LANG_RE.match(text, pos)
            if m:
                return self.take_match(TokenKind.LANG, m, m.group(1))
            raise self.error("Invalid language tag")
        if c in "'\"":
            for regex in _STRING_RES:
                m = regex.match(text, pos)
                if m:
                    return self.take_match(TokenKind.STRING, m, m.group(0))
            raise self.error("Found EOF in string literal")
        if c == "_":
            m = _BNODE_RE.match(text, pos)
            if m:
                return self.take_match(TokenKind.BNODE, m, m.group(1))
            raise self.error("Invalid blank node label")
        if c in "0123456789+-":
            for kind, regex in _NUMBER_RES:
                m = regex.match(text, pos)
                if m:
                    return self.take_match(kind, m, m.group(0))
            if c == "+":
                return self.take(TokenKind.PLUS, 1)
            if c == "-":
                return self.take(TokenKind.MINUS, 1)
        if c == ":" or _PN_START_RE.match(c):
            m = _PNAME_RE.match(text, pos)
            if m:
                return self.take_match(TokenKind.PNAME, m, m.group(0))
        return self.keyword()

    def keyword(self) -> Token:
        m = _WORD_RE.match(self.text, self.pos)
        if not m:
            raise self.error("Unexpected character")
        word = m.group(0)
        upper = word.upper()
        if upper in KEYWORDS:
            return self.take_match(TokenKind.KEYWORD, m, upper)
        if word == "a":
            return self.take_match(TokenKind.KEYWORD, m, "A")
        if upper in ("TRUE", "FALSE"):
            return self.take_match(TokenKind.BOOLEAN, m, word.lower())
        raise self.error("Expecting keyword")


def tokenize(text: str, include_comments: bool = False) -> List[Token]:
    """Split SPARQL ``text`` into tokens.

    Args:
        text: Query or update text
        include_comments: Keep ``#`` comments as COMMENT tokens

    Returns:
        The token list, without whitespace

    Raises:
        SparqlLexError: The text contains something that is not a SPARQL token
    """
    return list(_Lexer(text, include_comments).tokens())
