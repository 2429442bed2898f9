import logging

from wat import EvaluatorFn
from wat import SExpression, WatValue
from wat.reader.printer import show
from wat.types.closure import Closure
from wat.types.entity import error_entity
from wat.types.environment import Environment
from wat.types.nil import Nil
from wat.types.symbol import Symbol

logger = logging.getLogger(__name__)

BE = Symbol("be")


def _is_binding(node: SExpression) -> bool:
    return (
        isinstance(node, list)
        and len(node) == 3
        and type(node[0]) is Symbol
        and node[1] == BE
    )


def fix_closures(scope: Environment) -> None:
    """Give every pending closure bound in `scope` a snapshot of `scope`.

    Runs once, after all bindings of a let are installed, so a closure sees
    its siblings (including later ones) as they are at this moment. Names the
    scope does not bind keep their value from the closure's earlier snapshot,
    which is what a closure returned from an application relies on.
    """
    for name, value in list(scope.bindings.items()):
        if isinstance(value, Closure) and not value.fixed:
            scope.define(name, value.fix(scope.merged_with(value.env)))
            logger.debug("fixed closure %s", name)


def let_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    """
    (let ((name be expr) ...) body...)
    Bindings are evaluated in order in a fresh scope, each one visible to the
    next. The value of the last body form is returned, nil for an empty body.
    """
    if not tail or not isinstance(tail[0], list):
        return error_entity("invalid let syntax: expected (let ((name be value) ...) body...)")

    bindings, *body = tail
    for binding in bindings:
        if not _is_binding(binding):
            return error_entity(f"invalid binding: expected (name be value), got {show(binding)}")

    scope = env.clone()
    logger.debug("let scope with %d binding(s)", len(bindings))
    for name, _, value_expr in bindings:
        scope.define(name, evaluate_fn(value_expr, scope, depth + 1))
    fix_closures(scope)

    result: WatValue = Nil
    for expr in body:
        result = evaluate_fn(expr, scope, depth + 1)
    return result
