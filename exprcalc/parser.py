"""
Operator-precedence parser for exprcalc.

Grammar (precedence low to high):
    expr     → factor (binop factor)*      climbed by OperatorKind.precedence
    binop    → "+" | "-" | "*" | "/" | "%"  all left-associative
    factor   → "-" factor | "+" factor | power
    power    → postfix ("^" factor)?       right-associative
    postfix  → atom "!"*
    atom     → INTEGER | FLOAT | "(" expr ")"

Postfix "!" binds tighter than prefix "-", so "-4!" is "-(4!)".

Nesting is bounded: more than MAX_NESTING open groups, prefix operators or
exponents on the descent path, or a tree deeper than MAX_TREE_DEPTH, raises
NestingTooDeep instead of exhausting the interpreter stack.
"""

from __future__ import annotations

import logging
from typing import Sequence

from exprcalc.errors import (
    NestingTooDeep,
    Overflow,
    TrailingInput,
    UnbalancedParens,
    UnexpectedEnd,
    UnexpectedToken,
)
from exprcalc.lexer import Token, TokenKind, tokenize
from exprcalc.models import (
    Associativity,
    BinaryOp,
    Expression,
    Literal,
    OperatorKind,
    PostfixOp,
    UnaryOp,
    Value,
)

logger = logging.getLogger(__name__)

_BINARY_OPS: dict[TokenKind, OperatorKind] = {
    TokenKind.PLUS: OperatorKind.ADD,
    TokenKind.MINUS: OperatorKind.SUBTRACT,
    TokenKind.STAR: OperatorKind.MULTIPLY,
    TokenKind.SLASH: OperatorKind.DIVIDE,
    TokenKind.PERCENT: OperatorKind.MODULO,
}

_PREFIX_OPS: dict[TokenKind, OperatorKind] = {
    TokenKind.MINUS: OperatorKind.NEGATE,
    TokenKind.PLUS: OperatorKind.POSITIVE,
}

_LOWEST_PRECEDENCE = min(op.precedence for op in _BINARY_OPS.values())

# Each nesting level costs up to eight parser frames
MAX_NESTING = 80
# Evaluation and rendering recurse once per tree level
MAX_TREE_DEPTH = 256


class _Parser:
    """Recursive descent parser over a token list ending in END."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        if not tokens or tokens[-1].kind != TokenKind.END:
            raise ValueError("token sequence must end with an END token")
        self.tokens = tokens
        self.pos = 0
        # Opening tokens of the groups currently being parsed
        self.open_groups: list[Token] = []
        self.nesting = 0
        # id(node) -> height of the subtree; literals are absent and count as 1
        self.heights: dict[int, int] = {}

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    # -- Depth bookkeeping --

    def enter(self, tok: Token) -> None:
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            raise NestingTooDeep(tok.pos, MAX_NESTING)

    def leave(self) -> None:
        self.nesting -= 1

    def node(self, expr: Expression, tok: Token, *children: Expression) -> Expression:
        """Record the height of a new node, rejecting trees that grow too deep."""
        height = 1 + max(self.heights.get(id(child), 1) for child in children)
        if height > MAX_TREE_DEPTH:
            raise NestingTooDeep(tok.pos, MAX_TREE_DEPTH)
        self.heights[id(expr)] = height
        return expr

    # -- Grammar rules --

    def parse(self) -> Expression:
        """Top level: a full expression followed by END."""
        expr = self.parse_expr(_LOWEST_PRECEDENCE)
        tok = self.current
        if tok.kind == TokenKind.RPAREN:
            raise UnbalancedParens(tok.pos)
        if tok.kind != TokenKind.END:
            raise TrailingInput(tok)
        return expr

    def parse_expr(self, min_prec: int) -> Expression:
        """Precedence climbing over the binary operators."""
        left = self.parse_factor()
        while True:
            op = _BINARY_OPS.get(self.current.kind)
            if op is None or op.precedence < min_prec:
                return left
            op_tok = self.advance()
            if op.associativity == Associativity.LEFT:
                next_min = op.precedence + 1
            else:
                next_min = op.precedence
            right = self.parse_expr(next_min)
            left = self.node(BinaryOp(op, left, right), op_tok, left, right)

    def parse_factor(self) -> Expression:
        """'-' factor | '+' factor | power"""
        op = _PREFIX_OPS.get(self.current.kind)
        if op is not None:
            op_tok = self.advance()
            self.enter(op_tok)
            operand = self.parse_factor()
            self.leave()
            return self.node(UnaryOp(op, operand), op_tok, operand)
        return self.parse_power()

    def parse_power(self) -> Expression:
        """postfix ('^' factor)?"""
        base = self.parse_postfix()
        if self.current.kind == TokenKind.CARET:
            caret = self.advance()
            self.enter(caret)
            # The exponent is a factor, so 2^-1 and 2^3^2 = 2^(3^2) both work
            exponent = self.parse_factor()
            self.leave()
            return self.node(BinaryOp(OperatorKind.POWER, base, exponent), caret, base, exponent)
        return base

    def parse_postfix(self) -> Expression:
        """atom '!'*"""
        expr = self.parse_atom()
        while self.current.kind == TokenKind.BANG:
            bang = self.advance()
            expr = self.node(PostfixOp(OperatorKind.FACTORIAL, expr), bang, expr)
        return expr

    def parse_atom(self) -> Expression:
        """INTEGER | FLOAT | '(' expr ')'"""
        tok = self.current

        if tok.kind == TokenKind.INTEGER:
            self.advance()
            try:
                n = tok.literal
            except ValueError:
                # More digits than int() will convert; far outside any range
                raise Overflow(
                    f"Integer literal of {len(tok.text)} digits is out of range", tok.pos
                ) from None
            return Literal(Value.integer(n))
        if tok.kind == TokenKind.FLOAT:
            self.advance()
            return Literal(Value.real(tok.literal))

        if tok.kind == TokenKind.LPAREN:
            return self._parse_group()

        if tok.kind == TokenKind.RPAREN and not self.open_groups:
            raise UnbalancedParens(tok.pos)
        if tok.kind == TokenKind.END:
            raise UnexpectedEnd(tok.pos)
        raise UnexpectedToken(tok)

    def _parse_group(self) -> Expression:
        opening = self.advance()
        self.enter(opening)
        self.open_groups.append(opening)
        inner = self.parse_expr(_LOWEST_PRECEDENCE)

        closing = self.current
        if closing.kind == TokenKind.END:
            raise UnbalancedParens(opening.pos, unclosed=True)
        if closing.kind != TokenKind.RPAREN:
            raise UnexpectedToken(closing, expected="')'")
        self.advance()
        self.open_groups.pop()
        self.leave()
        return inner


def parse(tokens: Sequence[Token]) -> Expression:
    """Build an expression tree from a token sequence.

    Args:
        tokens: Output of tokenize(); must end with an END token.

    Returns:
        The root of the expression tree.

    Raises:
        UnexpectedToken: A token that cannot start the expected construct.
        UnbalancedParens: Unclosed '(' or stray ')'.
        UnexpectedEnd: Input ended where an operand was required.
        TrailingInput: Tokens remain after a complete expression.
        NestingTooDeep: Groups, prefix operators or exponents nested too deeply.
        Overflow: An integer literal too long to convert at all.
    """
    expr = _Parser(tokens).parse()
    logger.debug("parsed %s", expr)
    return expr


def parse_expression(source: str) -> Expression:
    """Tokenize and parse an expression string."""
    return parse(tokenize(source))
