"""exprcalc: embeddable arithmetic expression calculator.

Text goes through a lexer, an operator-precedence parser and a tree-walking
evaluator; the result is a typed Value or a specific CalcError.

Usage:
    from exprcalc import calculate

    calculate("(1 + 1) * 2 + 4!")   # Value(kind=INTEGER, number=28)
    calculate("-4!")                # -(4!) == -24
    calculate("1 / 0")              # raises DivisionByZero

    python -m exprcalc eval "2^10"  # CLI
"""

from exprcalc.calculator import Outcome, calculate, try_calculate
from exprcalc.errors import (
    CalcError,
    DivisionByZero,
    EvalError,
    InvalidOperand,
    LexError,
    NestingTooDeep,
    Overflow,
    ParseError,
    TrailingInput,
    TypeMismatch,
    UnbalancedParens,
    UnexpectedCharacter,
    UnexpectedEnd,
    UnexpectedToken,
)
from exprcalc.evaluator import evaluate
from exprcalc.lexer import Token, TokenKind, tokenize
from exprcalc.models import Limits, OperatorKind, Value, ValueKind
from exprcalc.parser import parse, parse_expression

__all__ = [
    "CalcError",
    "DivisionByZero",
    "EvalError",
    "InvalidOperand",
    "LexError",
    "Limits",
    "NestingTooDeep",
    "OperatorKind",
    "Outcome",
    "Overflow",
    "ParseError",
    "Token",
    "TokenKind",
    "TrailingInput",
    "TypeMismatch",
    "UnbalancedParens",
    "UnexpectedCharacter",
    "UnexpectedEnd",
    "UnexpectedToken",
    "Value",
    "ValueKind",
    "calculate",
    "evaluate",
    "parse",
    "parse_expression",
    "tokenize",
    "try_calculate",
]
