"""Numeric core functions: add, sub, mul, and eq.

Operands are evaluated in the current scope and must be Integer or Float
entities. The result is a Float entity if any operand is a Float, else an
Integer entity.
"""

from functools import reduce
import operator
from typing import Callable

from wat import EvaluatorFn
from wat import SExpression, WatValue
from wat.types.entity import Entity, describe, error_entity, TRUE, FALSE
from wat.types.environment import Environment
from wat.types.type_tags import TypeTag, NUMERIC_TYPES


def _numeric_operands(
    name: str,
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> list[Entity] | Entity:
    if not tail:
        return error_entity(f"{name}: insufficient arguments (expected at least 1)")
    operands: list[Entity] = []
    for expr in tail:
        value = evaluate_fn(expr, env, depth + 1)
        if not (isinstance(value, Entity) and value.kind in NUMERIC_TYPES):
            return error_entity(f"{name}: expected Numeric operand, got {describe(value)}")
        operands.append(value)
    return operands


def _fold(name: str, op: Callable) -> Callable:
    def numeric_form(
        tail: list[SExpression],
        env: Environment,
        evaluate_fn: EvaluatorFn,
        depth: int,
    ) -> WatValue:
        operands = _numeric_operands(name, tail, env, evaluate_fn, depth)
        if isinstance(operands, Entity):
            return operands
        total = reduce(op, (o.payload for o in operands))
        if any(o.kind is TypeTag.Float for o in operands):
            return Entity(TypeTag.Float, float(total))
        return Entity(TypeTag.Integer, total)

    numeric_form.__name__ = f"{name}_form"
    return numeric_form


add_form = _fold("add", operator.add)
sub_form = _fold("sub", operator.sub)
mul_form = _fold("mul", operator.mul)


def eq_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    """
    (eq a b) -> Boolean entity
    Entities are equal when kind and payload match; Integer and Float compare by value.
    """
    if len(tail) != 2:
        return error_entity(f"eq: argument count mismatch (expected 2, got {len(tail)})")
    left, right = (evaluate_fn(expr, env, depth + 1) for expr in tail)
    for value in (left, right):
        if not isinstance(value, Entity) or value.is_error:
            return error_entity(f"eq: expected entity operand, got {describe(value)}")
    if left.kind in NUMERIC_TYPES and right.kind in NUMERIC_TYPES:
        return TRUE if left.payload == right.payload else FALSE
    return TRUE if left.kind is right.kind and left.payload == right.payload else FALSE
