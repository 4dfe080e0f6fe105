"""CLI for the exprcalc expression calculator.

Usage:
    python -m exprcalc eval "1 + 2 * 3"         # Print the value
    python -m exprcalc eval "-4!" --trace       # Also show evaluation steps
    python -m exprcalc eval "2^40" --bits 32    # Narrower integer range
    python -m exprcalc tokens "(1 + 2) * 3"     # Show the token stream
    python -m exprcalc tree "1 + 2 * 3"         # Show the parse tree
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from exprcalc.calculator import calculate
from exprcalc.errors import CalcError
from exprcalc.lexer import tokenize
from exprcalc.models import Limits
from exprcalc.parser import parse_expression
from exprcalc.render import render_error, render_tokens, render_trace, render_tree, render_value

app = typer.Typer(
    name="exprcalc",
    help="Evaluate integer arithmetic expressions",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


@app.command("eval")
def cmd_eval(
    expression: str = typer.Argument(help="Expression to evaluate (e.g., '(1+1)*2+4!')"),
    bits: int = typer.Option(64, "--bits", "-b", help="Signed integer width for overflow checks"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show evaluation steps"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr"),
) -> None:
    """Evaluate an expression and print its value."""
    _setup_logging(verbose)
    try:
        limits = Limits(bits=bits)
    except ValueError as e:
        err_console.print(f"[red]Invalid --bits:[/red] {e}")
        raise typer.Exit(2)

    steps: list[str] = []
    try:
        value = calculate(expression, limits=limits, trace=steps)
    except CalcError as e:
        if trace:
            render_trace(steps, err_console)
        render_error(expression, e, err_console)
        raise typer.Exit(1)

    if trace:
        render_trace(steps, err_console)
    render_value(value, console)


@app.command("tokens")
def cmd_tokens(
    expression: str = typer.Argument(help="Expression to tokenize"),
) -> None:
    """Show the token stream for an expression."""
    try:
        tokens = tokenize(expression)
    except CalcError as e:
        render_error(expression, e, err_console)
        raise typer.Exit(1)
    render_tokens(tokens, console)


@app.command("tree")
def cmd_tree(
    expression: str = typer.Argument(help="Expression to parse"),
) -> None:
    """Show the parse tree for an expression."""
    try:
        expr = parse_expression(expression)
    except CalcError as e:
        render_error(expression, e, err_console)
        raise typer.Exit(1)
    render_tree(expr, console)


if __name__ == "__main__":
    app()
