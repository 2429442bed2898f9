"""Render expression trees back to Wat source text.

`parse(tokenize(to_source(tree)))` gives back `tree` for any tree the parser
can produce. Comments and original whitespace are not kept.
"""

from __future__ import annotations

from decimal import Decimal

from wat import SExpression
from wat.types.nil import NilType
from wat.types.symbol import Symbol


def format_float(value: float) -> str:
    """Positional notation that the float pattern accepts, e.g. 1e16 -> 10000000000000000.0."""
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


def to_source(node: SExpression) -> str:
    if isinstance(node, list):
        return "(" + " ".join(to_source(child) for child in node) + ")"
    if isinstance(node, bool):
        return "true" if node else "false"
    if isinstance(node, NilType):
        return "nil"
    if isinstance(node, int):
        return str(node)
    if isinstance(node, float):
        return format_float(node)
    if isinstance(node, str):
        return f'"{node}"'
    if isinstance(node, Symbol):
        return str(node)
    raise TypeError(f"Cannot render {node!r} as source")


def show(node: SExpression) -> str:
    """to_source for error messages: never raises."""
    try:
        return to_source(node)
    except TypeError:
        return repr(node)
