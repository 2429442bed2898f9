"""
  Wat parser

Recursive descent over the lexer's tokens. Emits Python primitives:

    - forms    -> list
    - true     -> True, false -> False
    - nil      -> Nil
    - "text"   -> str
    - 12, -3   -> int
    - 1.5      -> float
    - :name    -> Keyword("name")
    - anything else -> Symbol

Two rewrites run on every completed form, innermost first:

    - literal coercion: raw numbers passed to a core function become
      (entity Integer n) / (entity Float n) sub-forms;
    - map shorthand: (entity T v :k1 v1 :k2 v2) becomes
      (entity T v (map :k1 v1 :k2 v2)).
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Optional

from wat import SExpression
from wat.errors import (
    WatSyntaxError,
    WatExpectedOpenParen,
    WatUnclosedParenthesis,
)
from wat.evaluation.special_forms import SPECIAL_FORMS
from wat.types.nil import Nil
from wat.types.symbol import Symbol, Keyword
from wat.types.type_tags import SUGAR_NAMES

logger = logging.getLogger(__name__)

INTEGER_RE = re.compile(r"-?[0-9]+")
FLOAT_RE = re.compile(r"-?[0-9]+\.[0-9]+")

ENTITY = Symbol("entity")
MAP = Symbol("map")
INTEGER = Symbol("Integer")
FLOAT = Symbol("Float")

# Heads whose numeric arguments are wrapped as entities at parse time
COERCING_HEADS = frozenset(
    name for name in SPECIAL_FORMS if name != ENTITY and name.id not in SUGAR_NAMES
)


def parse_atom(token: str) -> SExpression:
    """Classify a single non-paren token."""
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "nil":
        return Nil
    if token.startswith('"'):
        text = token[1:]
        if text.endswith('"'):
            text = text[:-1]
        if '"' in text:
            raise WatSyntaxError(f"Syntax error: misplaced quote in {token}")
        return text
    if '"' in token:
        raise WatSyntaxError(f"Syntax error: misplaced quote in {token}")
    if token.startswith("'"):
        raise WatSyntaxError(f"Syntax error: single quotes not allowed: {token}")
    if INTEGER_RE.fullmatch(token):
        return int(token)
    if FLOAT_RE.fullmatch(token):
        return float(token)
    if token.startswith(":"):
        return Keyword(token[1:])
    return Symbol(token)


def _is_number(node: SExpression) -> bool:
    return isinstance(node, (int, float)) and not isinstance(node, bool)


def coerce_literals(form: list[SExpression]) -> list[SExpression]:
    """Wrap raw numbers among a core call's arguments as entity forms."""
    head, *rest = form
    coerced = [head]
    for node in rest:
        if _is_number(node):
            tag = FLOAT if isinstance(node, float) else INTEGER
            coerced.append([ENTITY, tag, node])
        else:
            coerced.append(node)
    return coerced


def expand_map_shorthand(form: list[SExpression]) -> list[SExpression]:
    """Fold trailing key/value atoms of an entity form into a (map ...) form."""
    return form[:3] + [[MAP, *form[3:]]]


def rewrite_form(form: list[SExpression]) -> list[SExpression]:
    if not form or type(form[0]) is not Symbol:
        return form
    head = form[0]
    if head in COERCING_HEADS:
        return coerce_literals(form)
    if head == ENTITY and len(form) > 3 and not isinstance(form[3], list):
        return expand_map_shorthand(form)
    return form


class TokenStream:
    def __init__(self, tokens: Iterable[str]):
        self.tokens: Iterator[str] = iter(tokens)
        self.buffer: list[str] = []

    def peek(self) -> Optional[str]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None
        return self.buffer[0]

    def advance(self) -> Optional[str]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, None)

    def parse_form(self) -> list[SExpression]:
        """Consume one balanced (...) group."""
        tok = self.advance()
        if tok != "(":
            found = "end of input" if tok is None else repr(tok)
            raise WatExpectedOpenParen(f"Syntax error: expected '(' but found {found}")
        items: list[SExpression] = []
        while True:
            tok = self.peek()
            if tok is None:
                raise WatUnclosedParenthesis("Syntax error: unclosed parenthesis")
            if tok == ")":
                self.advance()
                break
            if tok == "(":
                items.append(self.parse_form())
            else:
                self.advance()
                items.append(parse_atom(tok))
        return rewrite_form(items)

    def parse_all(self) -> Iterator[list[SExpression]]:
        while self.peek() is not None:
            yield self.parse_form()


def _too_deep() -> WatSyntaxError:
    return WatSyntaxError("Syntax error: forms nested too deeply")


def parse(tokens: Iterable[str]) -> list[SExpression]:
    """Parse the first balanced form from `tokens`."""
    try:
        form = TokenStream(tokens).parse_form()
    except RecursionError:
        raise _too_deep() from None
    logger.debug("parsed %r", form)
    return form


def parse_all(tokens: Iterable[str]) -> list[list[SExpression]]:
    """Parse every top-level form from `tokens`, in order."""
    try:
        return list(TokenStream(tokens).parse_all())
    except RecursionError:
        raise _too_deep() from None
