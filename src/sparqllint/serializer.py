"""
Token-stream serializer with pretty and plain layouts.

The pretty layout works on pairs of adjacent tokens: each token is turned
into a short run of output pieces (the token text, a space, or a newline at
some indent level) depending on the token that follows it. A second pass
breaks the line after bracketed ``FILTER``/``BIND`` expressions, and a final
pass collapses redundant whitespace before the pieces are joined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .config import Config
from .lexer import AGGREGATES, FUNCTIONS, Token, TokenKind

__all__ = [
    "SparqlSerializer",
]

logger = logging.getLogger(__name__)

K = TokenKind

# Keywords that start a new line
_LINE_STARTERS = (
    "BASE", "PREFIX", "SELECT", "ASK", "CONSTRUCT", "DESCRIBE", "FROM",
    "INSERT", "DELETE", "LOAD", "CLEAR", "DROP", "CREATE", "ADD", "MOVE",
    "COPY", "WITH",
)

# Solution modifiers: newline before, space after
_MODIFIERS = ("GROUP", "HAVING", "ORDER", "LIMIT", "OFFSET")

# Keywords kept on the same line as the brace they introduce
_BLOCK_KEYWORDS = ("EXISTS", "OPTIONAL", "UNION", "MINUS")

_NAMES = (K.IRI, K.PNAME)

# Property path modifiers, written directly after the path element
_PATH_MODS = (K.STAR, K.PLUS, K.QUESTION)

_END = Token(K.COMMENT, "")

_NEWLINE = "newline"
_SPACE = "space"
_TEXT = "text"


@dataclass(frozen=True)
class _Piece:
    kind: str
    value: str = ""
    indent: int = 0


_SP = _Piece(_SPACE)


def _nl(indent: int) -> _Piece:
    return _Piece(_NEWLINE, indent=indent)


def _text(token: Token) -> _Piece:
    return _Piece(_TEXT, token.text)


def _escape_line_breaks(literal: str) -> str:
    # only long literals ('''...''', """...""") can hold raw line breaks
    return literal.replace("\r", "\\r").replace("\n", "\\n")


@dataclass
class _ParseState:
    indent_level: int = 0
    open_parens: int = 0
    open_braces: int = 0
    open_brackets: int = 0


class SparqlSerializer:
    """Serialize SPARQL tokens in a pretty or a plain (single-line) layout.

    Example:
        >>> from sparqllint.lexer import tokenize
        >>> SparqlSerializer(pretty=False).serialize(tokenize("SELECT*{?s ?p ?o}"))
        'SELECT * { ?s ?p ?o }'
    """

    def __init__(self, pretty: bool = True, indent: str = Config.INDENT) -> None:
        self.pretty = pretty
        self.indent = indent

    def serialize(self, tokens: Iterable[Token]) -> str:
        tokens = list(tokens)
        if self.pretty:
            return self.serialize_pretty(tokens)
        return self.serialize_plain(tokens)

    def serialize_plain(self, tokens: Iterable[Token]) -> str:
        """Lay the tokens out on a single line.

        Spacing follows the pretty layout with every line break turned into
        a space, so tokens that must touch (``<p>+``, ``"v"@en``, ``^<p>``)
        stay together. A comment still ends its line, and line breaks inside
        long string literals are written as ``\\n``/``\\r`` escapes.
        """
        pieces: List[_Piece] = []
        for token, piece in self._layout(list(tokens)):
            if piece.kind == _TEXT and token.kind is K.STRING:
                piece = _Piece(_TEXT, _escape_line_breaks(piece.value))
            elif piece.kind == _NEWLINE and token.kind is not K.COMMENT:
                piece = _SP
            elif piece.kind == _NEWLINE:
                piece = _nl(0)

            if piece.kind == _TEXT:
                pieces.append(piece)
            elif piece.kind == _NEWLINE:
                while pieces and pieces[-1].kind == _SPACE:
                    pieces.pop()
                pieces.append(piece)
            elif pieces and pieces[-1].kind == _TEXT:
                pieces.append(piece)

        while pieces and pieces[-1].kind != _TEXT:
            pieces.pop()
        return self._render(pieces)

    def serialize_pretty(self, tokens: List[Token]) -> str:
        pieces = self._layout(tokens)
        pieces = self._break_after_bracketed_calls(pieces)
        pieces = self._collapse_whitespace(pieces)
        return self._render(pieces)

    # -- layout ----------------------------------------------------------

    def _layout(self, tokens: List[Token]) -> List[Tuple[Token, _Piece]]:  # noqa: C901
        out: List[Tuple[Token, _Piece]] = []
        state = _ParseState()

        def emit(token: Token, *pieces: _Piece) -> None:
            out.extend((token, p) for p in pieces)

        for i, t in enumerate(tokens):
            u = tokens[i + 1] if i + 1 < len(tokens) else _END
            tk, uk = t.kind, u.kind

            if tk is K.RBRACE:
                state.open_braces -= 1
                state.indent_level -= 1
            level = state.indent_level

            if tk is K.COMMENT:
                # a comment always ends its line
                emit(t, _text(t), _nl(level))
            elif tk is K.LBRACE:
                emit(t, _text(t), _nl(level + 1))
            elif state.open_braces == 0 and uk is K.LBRACE:
                emit(t, _text(t), _SP)
            elif tk is K.RBRACE and u.is_keyword("UNION", "MINUS"):
                emit(t, _nl(level), _text(t), _SP)
            elif tk is K.RBRACE:
                # a closing brace stands on a line by itself
                emit(t, _nl(level), _text(t), _nl(level))
            elif t.is_keyword(*_BLOCK_KEYWORDS) and uk is K.LBRACE:
                emit(t, _nl(level), _text(t), _SP)
            elif tk is K.BANG:
                emit(t, _text(t))
            elif tk is K.RPAREN and uk is K.LBRACE:
                # VALUES (?x ?y) { ... }
                emit(t, _text(t), _SP)
            elif t.is_keyword("WHERE") and uk is K.LBRACE:
                emit(t, _text(t), _SP)
            elif uk is K.LBRACE:
                emit(t, _text(t), _nl(level))
            elif u.is_keyword(*_LINE_STARTERS):
                emit(t, _text(t), _nl(level))
            elif tk in _NAMES and u.is_keyword("WHERE"):
                # SELECT * FROM <g> WHERE { ... }
                emit(t, _text(t), _nl(level))
            elif t.is_keyword("ORDER") and state.open_parens > 0:
                # ORDER BY inside parentheses, e.g. in a window function
                emit(t, _text(t), _SP)
            elif t.is_keyword(*_MODIFIERS):
                emit(t, _nl(level), _text(t), _SP)
            elif tk is K.DOT:
                emit(t, _text(t), _nl(level))
            elif tk is K.SEMICOLON and u.is_keyword("SEPARATOR"):
                # GROUP_CONCAT(?x ; SEPARATOR=",")
                emit(t, _text(t), _SP)
            elif tk is K.SEMICOLON:
                emit(t, _text(t), _nl(level + 1))
            elif t.is_keyword("FILTER", "BIND") and uk is K.LPAREN:
                emit(t, _nl(level), _text(t))
            elif t.is_keyword("FILTER", "BIND"):
                emit(t, _nl(level), _text(t), _SP)
            elif tk is K.HATHAT or t.is_keyword("ASC", "DESC"):
                emit(t, _text(t))
            elif uk is K.RPAREN or tk is K.LPAREN:
                emit(t, _text(t))
            elif uk is K.LPAREN and (
                (tk is K.KEYWORD and (t.value in AGGREGATES or t.value in FUNCTIONS))
                or tk is K.PNAME
            ):
                # function call: no space before the opening paren
                emit(t, _text(t))
            elif uk in (K.HATHAT, K.LANG):
                emit(t, _text(t))
            elif tk is K.HAT and uk in _NAMES:
                emit(t, _text(t))
            elif tk is K.RPAREN and uk in _PATH_MODS and state.open_parens == 1:
                # (ex:a/ex:b)* in a property path
                emit(t, _text(t))
            elif tk in _NAMES and uk in _PATH_MODS:
                emit(t, _text(t))
            elif tk is K.OR or uk is K.OR:
                emit(t, _text(t))
            elif (
                (tk in _NAMES and uk is K.SLASH)
                or (tk is K.SLASH and uk in _NAMES)
                or (tk in _PATH_MODS and uk is K.SLASH)
            ):
                emit(t, _text(t))
            elif t.is_keyword("VALUES"):
                emit(t, _nl(level), _text(t), _SP)
            else:
                emit(t, _text(t), _SP)

            if tk is K.LBRACE:
                state.indent_level += 1
                state.open_braces += 1
            elif tk is K.LBRACKET:
                state.open_brackets += 1
            elif tk is K.RBRACKET:
                state.open_brackets -= 1
            elif tk is K.LPAREN:
                state.open_parens += 1
                state.indent_level += 1
            elif tk is K.RPAREN:
                state.open_parens -= 1
                state.indent_level -= 1

        return out

    def _break_after_bracketed_calls(
        self, out: List[Tuple[Token, _Piece]]
    ) -> List[Tuple[Token, _Piece]]:
        """Add a newline after the closing paren of FILTER and BIND calls.

        ``BIND(1 AS ?x) ?s ?p ?o`` puts the triple pattern on its own line.
        No newline is added when the paren is followed by a dot or by a sort
        direction.
        """
        padded = out + [(_END, _SP), (_END, _SP)]
        processed: List[Tuple[Token, _Piece]] = []
        in_call = 0
        closing_depth: Set[int] = set()
        indent_at_depth: Dict[int, int] = {}
        depth = 0

        for i, (token, piece) in enumerate(out):
            processed.append((token, piece))
            if piece.kind == _NEWLINE:
                indent_at_depth[depth] = piece.indent
                continue
            if piece.kind != _TEXT:
                continue

            needs_newline = False
            if token.is_keyword("FILTER", "BIND"):
                in_call += 1
                closing_depth.add(depth)
            elif token.kind is K.LPAREN and in_call > 0:
                depth += 1
            elif token.kind is K.RPAREN and in_call > 0:
                depth -= 1
                if depth in closing_depth or depth == 0:
                    closing_depth.discard(depth)
                    in_call -= 1
                    following = padded[i + 2][0]
                    continued = padded[i + 1][1] == _SP and (
                        following.kind is K.DOT or following.is_keyword("ASC", "DESC")
                    )
                    needs_newline = not continued
            elif token.kind is K.NIL and in_call > 0 and depth == 0:
                needs_newline = True
                in_call -= 1

            if needs_newline:
                processed.append((token, _nl(indent_at_depth.get(depth, 0))))

        return processed

    def _collapse_whitespace(self, out: List[Tuple[Token, _Piece]]) -> List[_Piece]:
        pieces = [piece for _, piece in out]
        collapsed: List[_Piece] = []
        for i, piece in enumerate(pieces):
            following: Optional[_Piece] = pieces[i + 1] if i + 1 < len(pieces) else None
            if following is None:
                collapsed.append(piece)
                continue
            if following.kind == _NEWLINE and piece.kind in (_SPACE, _NEWLINE):
                # whitespace before a newline is dropped
                continue
            if piece.kind == _NEWLINE and following.kind == _SPACE:
                # the newline wins over a following space
                pieces[i + 1] = piece
                continue
            if piece.kind == _NEWLINE and collapsed:
                last = collapsed[-1]
                if (last.value == "}" and following.value in ("OPTIONAL", "UNION")) or (
                    last.value == "NOT" and following.value == "EXISTS"
                ):
                    # "} UNION {", "} OPTIONAL {" and "NOT EXISTS" stay on one line
                    collapsed.append(_SP)
                    continue
            collapsed.append(piece)

        # no leading or trailing whitespace
        start = 0
        while start < len(collapsed) and collapsed[start].kind != _TEXT:
            start += 1
        end = len(collapsed)
        while end > start and collapsed[end - 1].kind != _TEXT:
            end -= 1
        return collapsed[start:end]

    def _render(self, pieces: List[_Piece]) -> str:
        parts: List[str] = []
        for piece in pieces:
            if piece.kind == _NEWLINE:
                parts.append("\n" + self.indent * max(piece.indent, 0))
            elif piece.kind == _SPACE:
                parts.append(" ")
            else:
                parts.append(piece.value)
        return "".join(parts)
