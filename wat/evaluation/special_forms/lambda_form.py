from wat import EvaluatorFn
from wat import SExpression, WatValue
from wat.errors import WatSyntaxError
from wat.reader.printer import show
from wat.types.closure import Closure
from wat.types.entity import error_entity
from wat.types.environment import Environment
from wat.types.symbol import Symbol
from wat.types.type_tags import TypeTag

LAMBDA = Symbol("lambda")
RETURNS = Symbol("returns")
AS = Symbol("as")
SELF = Symbol("self")


def is_lambda_form(node: SExpression) -> bool:
    return isinstance(node, list) and bool(node) and node[0] == LAMBDA


def _type_tag(node: SExpression) -> TypeTag | None:
    return TypeTag.from_name(node.id) if type(node) is Symbol else None


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    """
    (lambda ((name as Type) ...) returns Type body)
    Produces a pending closure over a copy of the current scope.
    """
    if len(tail) != 4:
        return error_entity("invalid lambda syntax: expected (lambda (params) returns Type body)")

    params_node, returns_node, return_node, body = tail
    if not isinstance(params_node, list):
        return error_entity(f"invalid lambda syntax: parameter list expected, got {show(params_node)}")
    if returns_node != RETURNS:
        return error_entity(f"invalid lambda syntax: expected `returns`, got {show(returns_node)}")

    params: list[tuple[Symbol, TypeTag]] = []
    seen: set[Symbol] = set()
    for param in params_node:
        if not (isinstance(param, list) and len(param) == 3
                and type(param[0]) is Symbol and param[1] == AS):
            return error_entity(f"invalid lambda syntax: expected (name as Type), got {show(param)}")
        name, _, type_node = param
        tag = _type_tag(type_node)
        if tag is None:
            return error_entity(f"invalid parameter type for `{name}`: {show(type_node)}")
        if name in seen:
            return error_entity(f"duplicate parameter name: {name}")
        seen.add(name)
        params.append((name, tag))

    return_type = _type_tag(return_node)
    if return_type is None:
        return error_entity(f"invalid return type: {show(return_node)}")

    # Without a let binding there is nothing for `self` to refer to
    if body == SELF:
        raise WatSyntaxError("Syntax error: lambda body cannot be a bare `self`; recursion is not supported")

    return Closure(tuple(params), return_type, body, env.clone())
