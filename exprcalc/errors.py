"""Error taxonomy for exprcalc.

Every failure raised by the pipeline is a CalcError. The three families map
onto the three stages (LexError, ParseError, EvalError) and each concrete
class identifies one fault kind. Positions are 0-based character offsets
into the source text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from exprcalc.lexer import Token


class CalcError(Exception):
    """Base exception for all exprcalc errors."""

    category = "calc"

    def __init__(self, message: str, pos: Optional[int] = None):
        self.message = message
        self.pos = pos
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with position if available."""
        if self.pos is not None:
            return f"{self.message} at position {self.pos}"
        return self.message


# ---------------------------------------------------------------------------
# Lexing
# ---------------------------------------------------------------------------

class LexError(CalcError):
    """Raised when the source text cannot be split into tokens."""

    category = "lex"


class UnexpectedCharacter(LexError):
    """A character that starts no known token."""

    def __init__(self, char: str, pos: int):
        self.char = char
        super().__init__(f"Unexpected character {char!r}", pos)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class ParseError(CalcError):
    """Raised when the token sequence is not a well-formed expression."""

    category = "parse"


class UnexpectedToken(ParseError):
    """A token that cannot appear where the grammar needs something else."""

    def __init__(self, token: Token, expected: str = "an expression"):
        self.token = token
        self.expected = expected
        super().__init__(f"Expected {expected}, found {token.text!r}", token.pos)


class UnbalancedParens(ParseError):
    """An unmatched '(' or a ')' with no group open."""

    def __init__(self, pos: int, unclosed: bool = False):
        self.unclosed = unclosed
        what = "Unclosed '('" if unclosed else "Unmatched ')'"
        super().__init__(what, pos)


class UnexpectedEnd(ParseError):
    """Input ran out before the expression was complete."""

    def __init__(self, pos: int):
        super().__init__("Unexpected end of input", pos)


class TrailingInput(ParseError):
    """Tokens left over after a complete expression."""

    def __init__(self, token: Token):
        self.token = token
        super().__init__(f"Unexpected {token.text!r} after expression", token.pos)


class NestingTooDeep(ParseError):
    """Groups, prefix operators or exponents nested beyond the parser's limit."""

    def __init__(self, pos: int, limit: int):
        self.limit = limit
        super().__init__(f"Expression nested more than {limit} levels deep", pos)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

class EvalError(CalcError):
    """Raised when a well-formed expression cannot be computed."""

    category = "eval"


class DivisionByZero(EvalError):
    pass


class Overflow(EvalError):
    pass


class InvalidOperand(EvalError):
    pass


class TypeMismatch(EvalError):
    pass
