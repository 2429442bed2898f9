"""Core evaluator for the Wat interpreter.

Desugars type-named heads into `entity` forms, dispatches core forms, and
applies closures. Every nested evaluation carries a depth counter; going past
the configured limit raises WatRecursionDepthExceeded instead of exhausting
the Python stack. A limit set higher than the stack can hold is still
reported the same way: a RecursionError becomes an Error entity at the
nearest application, or WatRecursionDepthExceeded from `evaluate`.
"""

from __future__ import annotations

import logging
from typing import Optional

from wat import SExpression, WatValue
from wat.config import get_max_depth
from wat.errors import WatRecursionDepthExceeded, WatUnknownOperator
from wat.evaluation.apply import apply_closure
from wat.evaluation.special_forms import SPECIAL_FORMS
from wat.reader.lexer import tokenize
from wat.reader.parser import parse_all, rewrite_form, ENTITY, MAP
from wat.reader.printer import show
from wat.types.closure import Closure
from wat.types.entity import Entity, error_entity
from wat.types.environment import Environment
from wat.types.nil import Nil
from wat.types.symbol import Symbol, Keyword
from wat.types.type_tags import SUGAR_NAMES, ROLE_SUGAR, TypeTag

logger = logging.getLogger(__name__)

ROLE = Keyword("role")
ROLE_TYPE = Symbol(TypeTag.Noun.value)


def evaluate(source: str | SExpression, env: Optional[Environment] = None) -> WatValue:
    """
    Evaluate program text or an already parsed expression tree.

    Text is tokenized and parsed first; every top-level form is evaluated in
    order and the last value is returned (nil for empty text). Without `env`
    a fresh top-level environment is used.

    A tree nested deeper than the Python stack allows, outside any closure
    application, raises WatRecursionDepthExceeded.
    """
    if env is None:
        env = Environment()
    forms = parse_all(tokenize(source)) if isinstance(source, str) else [source]
    result: WatValue = Nil
    try:
        for form in forms:
            result = evaluate0(form, env)
    except RecursionError:
        raise WatRecursionDepthExceeded(get_max_depth()) from None
    return result


def desugar(
    expr: list[SExpression], env: Environment, depth: int
) -> list[SExpression] | Entity:
    """
    Rewrite a form headed by a type-sugar name into an `entity` form.

    (Noun "dog" :size "big")  -> (entity Noun "dog" (map :size "big"))
    (Subject "dog" :age n)    -> (entity Noun "dog" (map :age <n evaluated> :role "subject"))

    Subject/Object values are evaluated here; an odd trailing key/value list
    gives an Error entity.
    """
    head = expr[0]
    if type(head) is not Symbol or head.id not in SUGAR_NAMES:
        return expr

    if head.id not in ROLE_SUGAR:
        return rewrite_form([ENTITY, *expr])

    if len(expr) < 2:
        return error_entity(f"invalid {head} syntax: expected ({head} value key value ...)")
    value, *pairs = expr[1:]
    if len(pairs) % 2:
        return error_entity(f"unpaired map key: {show(pairs[-1])}")
    attrs: list[SExpression] = []
    for key, val in zip(pairs[::2], pairs[1::2]):
        attrs += [key, evaluate0(val, env, depth + 1)]
    attrs += [ROLE, ROLE_SUGAR[head.id]]
    return [ENTITY, ROLE_TYPE, value, [MAP, *attrs]]


def evaluate0(expr: SExpression, env: Environment, depth: int = 0) -> WatValue:
    """
    Evaluate a single node. Core forms and closures receive `depth` so that
    the nesting limit covers the whole recursive descent.
    """
    limit = get_max_depth()
    if depth > limit:
        raise WatRecursionDepthExceeded(limit)

    match expr:
        case list() if not expr:
            raise WatUnknownOperator("Unknown operator: empty form")

        case list():
            form = desugar(expr, env, depth)
            if isinstance(form, Entity):
                return form
            head, *tail = form

            if type(head) is Symbol:
                handler = SPECIAL_FORMS.get(head)
                if handler is not None:
                    logger.debug("core form %s", head)
                    return handler(tail, env, evaluate0, depth)
                head_value = env.lookup(head)
            elif isinstance(head, list):
                head_value = evaluate0(head, env, depth + 1)
            else:
                head_value = head

            if isinstance(head_value, Closure):
                return apply_closure(head_value, tail, env, evaluate0, depth + 1)
            # A failed application in head position stays a soft failure
            if isinstance(head_value, Entity) and head_value.is_error:
                return head_value
            raise WatUnknownOperator(f"Unknown operator: {show(head)}")

        case Keyword():
            return expr

        case Symbol():
            return env.lookup(expr)

    # --- Atoms, entities and closures evaluate to themselves ---
    return expr
