"""Data models for exprcalc.

OperatorKind, the expression tree nodes, Value and Limits: the typed
structures that flow through lexer → parser → evaluator → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Associativity(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class Fixity(str, Enum):
    INFIX = "infix"
    PREFIX = "prefix"
    POSTFIX = "postfix"


class OperatorKind(str, Enum):
    """Closed set of operators the grammar knows about."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULO = "modulo"
    POWER = "power"
    FACTORIAL = "factorial"
    NEGATE = "negate"
    POSITIVE = "positive"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def precedence(self) -> int:
        """Binding strength; higher binds tighter."""
        return _PRECEDENCE[self]

    @property
    def associativity(self) -> Associativity:
        if self == OperatorKind.POWER:
            return Associativity.RIGHT
        return Associativity.LEFT

    @property
    def fixity(self) -> Fixity:
        if self == OperatorKind.FACTORIAL:
            return Fixity.POSTFIX
        if self in (OperatorKind.NEGATE, OperatorKind.POSITIVE):
            return Fixity.PREFIX
        return Fixity.INFIX


_SYMBOLS: dict[OperatorKind, str] = {
    OperatorKind.ADD: "+",
    OperatorKind.SUBTRACT: "-",
    OperatorKind.MULTIPLY: "*",
    OperatorKind.DIVIDE: "/",
    OperatorKind.MODULO: "%",
    OperatorKind.POWER: "^",
    OperatorKind.FACTORIAL: "!",
    OperatorKind.NEGATE: "-",
    OperatorKind.POSITIVE: "+",
}

# Additive < multiplicative < prefix < power < postfix
_PRECEDENCE: dict[OperatorKind, int] = {
    OperatorKind.ADD: 1,
    OperatorKind.SUBTRACT: 1,
    OperatorKind.MULTIPLY: 2,
    OperatorKind.DIVIDE: 2,
    OperatorKind.MODULO: 2,
    OperatorKind.NEGATE: 3,
    OperatorKind.POSITIVE: 3,
    OperatorKind.POWER: 4,
    OperatorKind.FACTORIAL: 5,
}


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

class ValueKind(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"


@dataclass(frozen=True)
class Value:
    """Result of evaluating an expression."""

    kind: ValueKind
    number: Union[int, float]

    @classmethod
    def integer(cls, n: int) -> Value:
        return cls(ValueKind.INTEGER, int(n))

    @classmethod
    def real(cls, x: float) -> Value:
        return cls(ValueKind.FLOAT, float(x))

    @property
    def is_integer(self) -> bool:
        return self.kind == ValueKind.INTEGER

    def __str__(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class Limits:
    """Signed integer range used for overflow checks.

    Passed explicitly to each evaluation; there is no process-wide setting.
    """

    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits < 2:
            raise ValueError(f"bits must be at least 2, got {self.bits}")

    @property
    def min_int(self) -> int:
        return -(1 << (self.bits - 1))

    @property
    def max_int(self) -> int:
        return (1 << (self.bits - 1)) - 1

    def contains(self, n: int) -> bool:
        return self.min_int <= n <= self.max_int


DEFAULT_LIMITS = Limits()


# ---------------------------------------------------------------------------
# Expression tree
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Literal:
    """A numeric literal as written in the source."""

    value: Value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BinaryOp:
    op: OperatorKind
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.op.symbol} {self.right})"


@dataclass(frozen=True)
class UnaryOp:
    """Prefix operator applied to one operand."""

    op: OperatorKind
    operand: Expression

    def __str__(self) -> str:
        return f"({self.op.symbol}{self.operand})"


@dataclass(frozen=True)
class PostfixOp:
    op: OperatorKind
    operand: Expression

    def __str__(self) -> str:
        return f"({self.operand}{self.op.symbol})"


Expression = Union[Literal, BinaryOp, UnaryOp, PostfixOp]
