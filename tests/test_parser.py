"""Tests for the parser: precedence, associativity, prefix/postfix binding,
and error localization."""

import pytest

from exprcalc.errors import (
    NestingTooDeep,
    ParseError,
    TrailingInput,
    UnbalancedParens,
    UnexpectedEnd,
    UnexpectedToken,
)
from exprcalc.lexer import Token, TokenKind, tokenize
from exprcalc.models import (
    Associativity,
    BinaryOp,
    Fixity,
    Literal,
    OperatorKind,
    PostfixOp,
    UnaryOp,
    Value,
)
from exprcalc.parser import MAX_NESTING, MAX_TREE_DEPTH, parse, parse_expression


def lit(n):
    return Literal(Value.integer(n))


# --- Operator table ---

def test_precedence_ordering():
    levels = [
        OperatorKind.ADD,
        OperatorKind.MULTIPLY,
        OperatorKind.NEGATE,
        OperatorKind.POWER,
        OperatorKind.FACTORIAL,
    ]
    precedences = [op.precedence for op in levels]
    assert precedences == sorted(precedences)
    assert len(set(precedences)) == len(precedences)


def test_operator_metadata():
    assert OperatorKind.SUBTRACT.associativity == Associativity.LEFT
    assert OperatorKind.POWER.associativity == Associativity.RIGHT
    assert OperatorKind.FACTORIAL.fixity == Fixity.POSTFIX
    assert OperatorKind.NEGATE.fixity == Fixity.PREFIX
    assert OperatorKind.MODULO.fixity == Fixity.INFIX
    assert OperatorKind.NEGATE.symbol == OperatorKind.SUBTRACT.symbol == "-"


# --- Tree shape ---

def test_single_literal():
    assert parse_expression("7") == lit(7)


def test_float_literal_keeps_its_kind():
    assert parse_expression("2.5") == Literal(Value.real(2.5))
    assert parse_expression("1") != parse_expression("1.0")


def test_multiplication_binds_tighter_than_addition():
    assert parse_expression("1+2*3") == BinaryOp(
        OperatorKind.ADD, lit(1), BinaryOp(OperatorKind.MULTIPLY, lit(2), lit(3))
    )


def test_subtraction_is_left_associative():
    assert parse_expression("10-3-2") == BinaryOp(
        OperatorKind.SUBTRACT, BinaryOp(OperatorKind.SUBTRACT, lit(10), lit(3)), lit(2)
    )


def test_power_is_right_associative():
    assert str(parse_expression("2^3^2")) == "(2 ^ (3 ^ 2))"


def test_parentheses_override_precedence():
    assert str(parse_expression("(1+2)*3")) == "((1 + 2) * 3)"


def test_factorial_binds_tighter_than_unary_minus():
    assert parse_expression("-4!") == UnaryOp(
        OperatorKind.NEGATE, PostfixOp(OperatorKind.FACTORIAL, lit(4))
    )


def test_power_binds_tighter_than_unary_minus():
    assert str(parse_expression("-2^2")) == "(-(2 ^ 2))"


def test_signed_exponent():
    assert str(parse_expression("2^-1")) == "(2 ^ (-1))"


def test_repeated_factorial_and_power():
    assert str(parse_expression("3!!")) == "((3!)!)"
    assert str(parse_expression("3!^2")) == "((3!) ^ 2)"


def test_unary_plus_and_double_negation():
    assert str(parse_expression("+-5")) == "(+(-5))"
    assert str(parse_expression("- -5")) == "(-(-5))"


def test_mixed_precedence_chain():
    assert str(parse_expression("1-2*3%4+5")) == "((1 - ((2 * 3) % 4)) + 5)"


def test_reparse_builds_identical_tree():
    tokens = tokenize("(1+1)*2+4!")
    assert parse(tokens) == parse(tokens)


# --- Errors ---

@pytest.mark.parametrize("source, pos", [
    ("1*!1", 2),
    ("-!1", 1),
    ("!1", 0),
    ("1+*2", 2),
])
def test_operator_cannot_start_a_primary(source, pos):
    with pytest.raises(UnexpectedToken) as exc:
        parse_expression(source)
    assert exc.value.pos == pos


def test_unclosed_paren_points_at_opening():
    with pytest.raises(UnbalancedParens) as exc:
        parse_expression("2*(1+2")
    assert exc.value.pos == 2
    assert exc.value.unclosed


def test_nested_unclosed_paren_reports_outer():
    with pytest.raises(UnbalancedParens) as exc:
        parse_expression("((1)")
    assert exc.value.pos == 0


def test_stray_close_paren_after_expression():
    with pytest.raises(UnbalancedParens) as exc:
        parse_expression("(1+2))")
    assert exc.value.pos == 5
    assert not exc.value.unclosed


def test_stray_close_paren_at_start():
    with pytest.raises(UnbalancedParens) as exc:
        parse_expression(")")
    assert exc.value.pos == 0


def test_empty_group_is_unexpected_token():
    with pytest.raises(UnexpectedToken) as exc:
        parse_expression("()")
    assert exc.value.pos == 1


def test_missing_close_inside_group():
    with pytest.raises(UnexpectedToken) as exc:
        parse_expression("(1 2)")
    assert exc.value.expected == "')'"
    assert exc.value.pos == 3


@pytest.mark.parametrize("source", ["", "   ", "1+", "-", "(1+", "2^"])
def test_unexpected_end(source):
    with pytest.raises(UnexpectedEnd) as exc:
        parse_expression(source)
    assert exc.value.pos == len(source)


def test_trailing_input():
    with pytest.raises(TrailingInput) as exc:
        parse_expression("1 2")
    assert exc.value.pos == 2
    assert exc.value.token.kind == TokenKind.INTEGER


def test_trailing_group():
    with pytest.raises(TrailingInput):
        parse_expression("3 (4)")


def test_all_parse_errors_share_a_base():
    with pytest.raises(ParseError):
        parse_expression("1 +")


def test_token_sequence_must_end_with_end():
    with pytest.raises(ValueError):
        parse([Token(TokenKind.INTEGER, "1", 0)])


# --- Nesting limits ---

def test_nesting_up_to_the_limit_parses():
    source = "(" * MAX_NESTING + "1" + ")" * MAX_NESTING
    assert parse_expression(source) == lit(1)


@pytest.mark.parametrize("depth", [MAX_NESTING + 1, 200, 5000])
def test_deep_parentheses_are_rejected(depth):
    with pytest.raises(NestingTooDeep) as exc_info:
        parse_expression("(" * depth + "1" + ")" * depth)
    # the first '(' past the limit
    assert exc_info.value.pos == MAX_NESTING
    assert exc_info.value.limit == MAX_NESTING


def test_deep_unclosed_parentheses_are_rejected():
    with pytest.raises(NestingTooDeep):
        parse_expression("(" * 5000)


def test_long_prefix_chain_is_rejected():
    with pytest.raises(NestingTooDeep) as exc_info:
        parse_expression("-" * 5000 + "1")
    assert exc_info.value.pos == MAX_NESTING


def test_long_exponent_chain_is_rejected():
    with pytest.raises(NestingTooDeep) as exc_info:
        parse_expression("2^" * 300 + "1")
    # carets sit at odd offsets
    assert exc_info.value.pos == 2 * MAX_NESTING + 1


def test_groups_and_prefixes_share_one_budget():
    with pytest.raises(NestingTooDeep):
        parse_expression("(-" * 50 + "1" + ")" * 50)


def test_long_left_associative_chain_is_rejected():
    with pytest.raises(NestingTooDeep) as exc_info:
        parse_expression("1+" * 1000 + "1")
    assert exc_info.value.limit == MAX_TREE_DEPTH


def test_long_factorial_chain_is_rejected():
    with pytest.raises(NestingTooDeep):
        parse_expression("3" + "!" * 1000)


def test_chain_below_tree_depth_parses():
    tree = parse_expression("1+" * 100 + "1")
    assert isinstance(tree, BinaryOp)
    assert tree.right == lit(1)


def test_nesting_error_is_a_parse_error():
    with pytest.raises(ParseError):
        parse_expression("-" * 5000 + "1")
