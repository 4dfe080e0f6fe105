"""Rich renderers for tokens, expression trees, values and errors.

Used by the CLI; the library itself never prints.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from exprcalc.errors import CalcError
from exprcalc.lexer import Token, TokenKind
from exprcalc.models import BinaryOp, Expression, Literal, PostfixOp, UnaryOp, Value

_CATEGORY_LABELS = {
    "lex": "Lex error",
    "parse": "Parse error",
    "eval": "Evaluation error",
}

_KIND_STYLES = {
    TokenKind.INTEGER: "cyan",
    TokenKind.FLOAT: "cyan",
    TokenKind.LPAREN: "dim",
    TokenKind.RPAREN: "dim",
    TokenKind.END: "dim",
}


def render_tokens(tokens: Sequence[Token], console: Console) -> None:
    """Render a table of tokens with their source positions."""
    table = Table(title="Tokens", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", min_width=8)
    table.add_column("Text")
    table.add_column("Pos", justify="right")

    for i, tok in enumerate(tokens):
        style = _KIND_STYLES.get(tok.kind, "yellow")
        table.add_row(
            str(i),
            f"[{style}]{tok.kind.name}[/{style}]",
            escape(tok.text) or "[dim]--[/dim]",
            str(tok.pos),
        )

    console.print()
    console.print(table)
    console.print()


def _node_label(expr: Expression) -> str:
    if isinstance(expr, Literal):
        return f"[cyan]{expr.value}[/cyan] [dim]{expr.value.kind.value}[/dim]"
    # Operator nodes
    return f"[yellow]{escape(expr.op.symbol)}[/yellow] [dim]{expr.op.value}[/dim]"


def build_tree(expr: Expression, tree: Tree | None = None) -> Tree:
    """Convert an expression into a rich Tree, children in evaluation order."""
    node = Tree(_node_label(expr)) if tree is None else tree.add(_node_label(expr))
    if isinstance(expr, BinaryOp):
        build_tree(expr.left, node)
        build_tree(expr.right, node)
    elif isinstance(expr, (UnaryOp, PostfixOp)):
        build_tree(expr.operand, node)
    return node


def render_tree(expr: Expression, console: Console) -> None:
    console.print()
    console.print(build_tree(expr))
    console.print(f"[dim]{escape(str(expr))}[/dim]")
    console.print()


def render_value(value: Value, console: Console) -> None:
    console.print(str(value), highlight=False)


def render_trace(steps: Sequence[str], console: Console) -> None:
    """Print evaluation steps, one per line."""
    for step in steps:
        console.print(f"  [dim]{escape(step)}[/dim]")


def render_error(source: str, error: CalcError, console: Console) -> None:
    """Print an error, with a caret under the offending position if known."""
    label = _CATEGORY_LABELS.get(error.category, "Error")
    console.print(f"[red]{label}:[/red] {escape(error.message)}")
    if error.pos is None or "\n" in source:
        return
    console.print(f"  {escape(source)}", highlight=False)
    console.print(f"  {' ' * error.pos}[bold red]^[/bold red]")
