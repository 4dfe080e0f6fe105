"""
Expression evaluator for exprcalc.

Walks an expression tree post-order (left child before right child) and
produces a single Value. Integer arithmetic is exact and range-checked
against Limits rather than wrapped; integer division truncates toward
zero, so the sign of a remainder follows the dividend.

Floats only enter through float literals or negative exponents. Any
operation that would need a transcendental function (a non-integer
exponent) is rejected with TypeMismatch.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from exprcalc.errors import DivisionByZero, InvalidOperand, Overflow, TypeMismatch
from exprcalc.models import (
    DEFAULT_LIMITS,
    BinaryOp,
    Expression,
    Limits,
    Literal,
    OperatorKind,
    PostfixOp,
    UnaryOp,
    Value,
)

logger = logging.getLogger(__name__)

# Short labels for trace lines
_TRACE_LABELS: dict[OperatorKind, str] = {
    OperatorKind.ADD: "ADD",
    OperatorKind.SUBTRACT: "SUB",
    OperatorKind.MULTIPLY: "MUL",
    OperatorKind.DIVIDE: "DIV",
    OperatorKind.MODULO: "MOD",
    OperatorKind.POWER: "POW",
}


def _trunc_div(a: int, b: int) -> int:
    """Integer quotient rounded toward zero (Python's // floors)."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


class _Evaluator:
    """Tree walker bound to one set of limits and an optional trace."""

    def __init__(self, limits: Limits, trace: Optional[list[str]]) -> None:
        self.limits = limits
        self.trace = trace

    def log(self, msg: str) -> None:
        if self.trace is not None:
            self.trace.append(msg)

    # -- Range checks --

    def checked_int(self, n: int) -> Value:
        if not self.limits.contains(n):
            raise Overflow(f"Integer overflow: {n} does not fit in {self.limits.bits} bits")
        return Value.integer(n)

    @staticmethod
    def checked_float(x: float) -> Value:
        if not math.isfinite(x):
            raise Overflow("Floating-point overflow")
        return Value.real(x)

    @staticmethod
    def as_float(v: Value) -> float:
        try:
            return float(v.number)
        except OverflowError:
            raise Overflow(f"Integer {v.number} is too large to convert to float") from None

    # -- Dispatch --

    def interpret(self, expr: Expression) -> Value:
        if isinstance(expr, Literal):
            return self.interpret_literal(expr)

        if isinstance(expr, BinaryOp):
            left = self.interpret(expr.left)
            right = self.interpret(expr.right)
            if expr.op == OperatorKind.POWER:
                result = self.power(left, right)
            else:
                result = self.arithmetic(expr.op, left, right)
            self.log(f"{_TRACE_LABELS[expr.op]} {left} {expr.op.symbol} {right} = {result}")
            return result

        if isinstance(expr, UnaryOp):
            operand = self.interpret(expr.operand)
            return self.prefix(expr.op, operand)

        if isinstance(expr, PostfixOp):
            operand = self.interpret(expr.operand)
            result = self.factorial(operand)
            self.log(f"FACT {operand}! = {result}")
            return result

        raise AssertionError(f"Unknown expression node: {type(expr).__name__}")

    def interpret_literal(self, expr: Literal) -> Value:
        v = expr.value
        result = self.checked_int(v.number) if v.is_integer else self.checked_float(v.number)
        self.log(f"CONST {result}")
        return result

    # -- Operators --

    def arithmetic(self, op: OperatorKind, left: Value, right: Value) -> Value:
        """The four basic operations plus modulo."""
        if op in (OperatorKind.DIVIDE, OperatorKind.MODULO) and right.number == 0:
            raise DivisionByZero("Can't divide by zero")

        if left.is_integer and right.is_integer:
            a, b = left.number, right.number
            if op == OperatorKind.ADD:
                return self.checked_int(a + b)
            if op == OperatorKind.SUBTRACT:
                return self.checked_int(a - b)
            if op == OperatorKind.MULTIPLY:
                return self.checked_int(a * b)
            if op == OperatorKind.DIVIDE:
                return self.checked_int(_trunc_div(a, b))
            if op == OperatorKind.MODULO:
                return self.checked_int(a - b * _trunc_div(a, b))
            raise AssertionError(f"Not an arithmetic operator: {op}")

        # Mixed or float operands: promote both sides
        x, y = self.as_float(left), self.as_float(right)
        if op == OperatorKind.ADD:
            return self.checked_float(x + y)
        if op == OperatorKind.SUBTRACT:
            return self.checked_float(x - y)
        if op == OperatorKind.MULTIPLY:
            return self.checked_float(x * y)
        if op == OperatorKind.DIVIDE:
            return self.checked_float(x / y)
        if op == OperatorKind.MODULO:
            return self.checked_float(math.fmod(x, y))
        raise AssertionError(f"Not an arithmetic operator: {op}")

    def power(self, base: Value, exponent: Value) -> Value:
        if not exponent.is_integer:
            raise TypeMismatch(f"Can't raise to non-integer power {exponent}")
        e = exponent.number

        if base.is_integer and e >= 0:
            return self.checked_int(self.int_power(base.number, e))

        if base.number == 0 and e < 0:
            raise DivisionByZero("Can't raise zero to a negative power")
        try:
            return self.checked_float(self.as_float(base) ** e)
        except OverflowError:
            raise Overflow("Floating-point overflow") from None

    def int_power(self, b: int, e: int) -> int:
        """b ** e without building numbers far outside the limits."""
        if b in (0, 1):
            return b if e > 0 else 1
        if b == -1:
            return 1 if e % 2 == 0 else -1
        # |b| >= 2, so |b| ** bits is out of range whatever the sign
        if e >= self.limits.bits:
            raise Overflow(f"Integer overflow: {b} ^ {e} does not fit in {self.limits.bits} bits")
        result = 1
        for _ in range(e):
            result = self.checked_int(result * b).number
        return result

    def factorial(self, operand: Value) -> Value:
        if not operand.is_integer:
            raise TypeMismatch(f"Can't take factorial of {operand}")
        n = operand.number
        if n < 0:
            raise InvalidOperand(f"Can't take factorial of negative number {n}")
        result = 1
        # Stops at the first out-of-range partial product
        for i in range(2, n + 1):
            result = self.checked_int(result * i).number
        return Value.integer(result)

    def prefix(self, op: OperatorKind, operand: Value) -> Value:
        if op == OperatorKind.POSITIVE:
            self.log(f"POS +({operand}) = {operand}")
            return operand
        if op == OperatorKind.NEGATE:
            if operand.is_integer:
                result = self.checked_int(-operand.number)
            else:
                result = Value.real(-operand.number)
            self.log(f"NEG -({operand}) = {result}")
            return result
        raise AssertionError(f"Not a prefix operator: {op}")


def evaluate(
    expr: Expression,
    limits: Optional[Limits] = None,
    trace: Optional[list[str]] = None,
) -> Value:
    """Evaluate an expression tree.

    Args:
        expr: Tree produced by parse().
        limits: Integer range for overflow checks. Defaults to 64-bit.
        trace: If given, one line per evaluation step is appended to it.
            Steps completed before an error are kept.

    Returns:
        The computed Value.

    Raises:
        DivisionByZero: Division, modulo or negative power with a zero divisor.
        Overflow: A result outside the integer limits or a non-finite float.
        InvalidOperand: Factorial of a negative integer.
        TypeMismatch: Factorial of a float, or a non-integer exponent.
    """
    result = _Evaluator(limits or DEFAULT_LIMITS, trace).interpret(expr)
    logger.debug("evaluated %s = %s", expr, result)
    return result
