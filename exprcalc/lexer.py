"""Lexer for exprcalc.

Converts an expression string into a sequence of typed tokens, terminated
by a single END token.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from exprcalc.errors import UnexpectedCharacter

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    """Token types for the expression grammar."""

    # Literals
    INTEGER = "integer"
    FLOAT = "float"

    # Operators
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    CARET = "^"
    BANG = "!"

    # Punctuation
    LPAREN = "("
    RPAREN = ")"

    # End of input
    END = "end"


@dataclass(frozen=True)
class Token:
    """A single token and the offset of its first character."""

    kind: TokenKind
    text: str
    pos: int

    @property
    def literal(self) -> Union[int, float]:
        """Numeric value of an INTEGER or FLOAT token."""
        if self.kind == TokenKind.INTEGER:
            return int(self.text.lstrip("0") or "0")
        if self.kind == TokenKind.FLOAT:
            return float(self.text)
        raise ValueError(f"{self.kind.name} token has no literal value")


_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
    "!": TokenKind.BANG,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

# ASCII only: str.isdigit() also accepts superscripts and other scripts' digits
_NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]+)?")


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Args:
        source: Expression text (e.g., "(1 + 2) * 3!").

    Returns:
        Tokens in source order, always ending with an END token whose
        position is len(source).

    Raises:
        UnexpectedCharacter: On the first character that starts no token.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c.isspace():
            i += 1
            continue

        m = _NUMBER_RE.match(source, i)
        if m:
            kind = TokenKind.FLOAT if m.group(1) else TokenKind.INTEGER
            tokens.append(Token(kind, m.group(0), i))
            i = m.end()
            continue

        kind = _SINGLE_CHAR.get(c)
        if kind is None:
            raise UnexpectedCharacter(c, i)
        tokens.append(Token(kind, c, i))
        i += 1

    tokens.append(Token(TokenKind.END, "", n))
    logger.debug("tokenized %d chars into %d tokens", n, len(tokens))
    return tokens
