"""Calculator entry points: text in, Value out.

Data flow per call:
1. tokenize() the source text
2. parse() the tokens into an expression tree
3. evaluate() the tree against the given limits

Nothing is kept between calls; the tokens and the tree live only for the
duration of one call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from exprcalc.errors import CalcError
from exprcalc.evaluator import evaluate
from exprcalc.lexer import tokenize
from exprcalc.models import Limits, Value
from exprcalc.parser import parse

logger = logging.getLogger(__name__)


def calculate(
    source: str,
    limits: Optional[Limits] = None,
    trace: Optional[list[str]] = None,
) -> Value:
    """Evaluate an arithmetic expression.

    Args:
        source: Expression text (e.g., "(1 + 1) * 2 + 4!").
        limits: Integer range for overflow checks. Defaults to 64-bit.
        trace: Optional list that receives one line per evaluation step.

    Returns:
        The computed Value.

    Raises:
        TypeError: If source is not a string.
        CalcError: The first lexing, parsing or evaluation error found.
    """
    if not isinstance(source, str):
        raise TypeError(f"Expression must be a string, got {type(source).__name__}")
    tokens = tokenize(source)
    expr = parse(tokens)
    return evaluate(expr, limits=limits, trace=trace)


@dataclass(frozen=True)
class Outcome:
    """Either a value or the error that prevented computing one."""

    source: str
    value: Optional[Value] = None
    error: Optional[CalcError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def verdict(self) -> str:
        if self.error is None:
            return "ok"
        return f"{self.error.category}-error"


def try_calculate(source: str, limits: Optional[Limits] = None) -> Outcome:
    """Like calculate(), but returns CalcErrors instead of raising them.

    Every string yields an Outcome, including over-long literals and
    expressions nested past the parser's limits. The only exception that
    can still escape is TypeError when source is not a string.
    """
    try:
        return Outcome(source=source, value=calculate(source, limits=limits))
    except CalcError as e:
        logger.debug("calculation of %r failed: %s", source, e)
        return Outcome(source=source, error=e)
