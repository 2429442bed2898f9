import logging

from wat import EvaluatorFn
from wat import SExpression, WatValue
from wat.reader.printer import show
from wat.types.entity import Entity, describe, error_entity, make_entity
from wat.types.environment import Environment
from wat.types.symbol import Symbol
from wat.types.type_tags import TypeTag

logger = logging.getLogger(__name__)

MAP = Symbol("map")
ADJECTIVE = "adjective"


def _payload(
    node: SExpression, env: Environment, evaluate_fn: EvaluatorFn, depth: int
) -> WatValue:
    # Literals are taken as written; symbols and forms are evaluated and an
    # entity result lends its payload.
    if isinstance(node, (Symbol, list)):
        value = evaluate_fn(node, env, depth + 1)
        if isinstance(value, Entity) and not value.is_error:
            return value.payload
        return value
    return node


def map_key(node: SExpression) -> str | None:
    if isinstance(node, Symbol):
        return node.id
    if isinstance(node, str):
        return node
    return None


def build_attributes(
    pairs: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, depth: int
) -> dict[str, WatValue] | Entity:
    """Turn the flat `(map k v ...)` arguments into an attribute dict.

    Values are kept as written, except `adjective`, which is evaluated and
    must be an Adjective entity. Returns an Error entity on failure.
    """
    if len(pairs) % 2:
        return error_entity(f"unpaired map key: {show(pairs[-1])}")
    attrs: dict[str, WatValue] = {}
    for key_node, value in zip(pairs[::2], pairs[1::2]):
        key = map_key(key_node)
        if key is None:
            return error_entity(f"invalid map key: {show(key_node)}")
        if key == ADJECTIVE:
            value = evaluate_fn(value, env, depth + 1)
            if not (isinstance(value, Entity) and value.kind is TypeTag.Adjective):
                return error_entity(
                    f"invalid adjective: expected Adjective entity, got {describe(value)}"
                )
        attrs[key] = value
    return attrs


def entity_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    """
    (entity Type value)
    (entity Type value (map :key value ...))
    """
    if len(tail) < 2 or len(tail) > 3:
        return error_entity("invalid entity syntax: expected (entity Type value [(map ...)])")

    type_node, value_node, *rest = tail
    kind_name = type_node.id if type(type_node) is Symbol else show(type_node)
    payload = _payload(value_node, env, evaluate_fn, depth)
    if isinstance(payload, Entity) and payload.is_error:
        return payload
    entity = make_entity(kind_name, payload)
    if entity.is_error:
        logger.debug("entity construction failed: %s", entity.message)
        return entity

    attrs_node = rest[0] if rest else None
    if not (isinstance(attrs_node, list) and attrs_node and attrs_node[0] == MAP):
        return entity

    attrs = build_attributes(attrs_node[1:], env, evaluate_fn, depth)
    if isinstance(attrs, Entity):
        return attrs
    return Entity(entity.kind, entity.payload, attrs)
