from wat import EvaluatorFn
from wat import SExpression, WatValue
from wat.types.entity import Entity, EntityList, describe, error_entity
from wat.types.environment import Environment
from wat.types.type_tags import LISTABLE_TYPES


def list_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    """
    (list e1 e2 ...)
    Every element must evaluate to a Noun, Time, Verb, Integer or Float entity.
    The first element that does not stops the evaluation with an Error entity.
    """
    items: list[Entity] = []
    for position, expr in enumerate(tail, start=1):
        value = evaluate_fn(expr, env, depth + 1)
        if not (isinstance(value, Entity) and value.kind in LISTABLE_TYPES):
            return error_entity(f"cannot list element {position}: got {describe(value)}")
        items.append(value)
    return EntityList(items)
