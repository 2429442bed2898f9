from wat import EvaluatorFn
from wat import SExpression, WatValue
from wat.reader.printer import show
from wat.types.entity import error_entity, TRUE
from wat.types.environment import Environment
from wat.types.symbol import Symbol
from wat.types.type_tags import TypeTag, TraitTag

FOR = Symbol("for")


def _tag(enum, node: SExpression):
    return enum.from_name(node.id) if type(node) is Symbol else None


def impl_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    """
    (impl Trait for Type)
    Declares Trait for Type in the active environment. Inside a let this is
    the let's own scope, so the declaration ends with it.
    """
    if len(tail) != 3 or tail[1] != FOR:
        return error_entity("invalid impl syntax: expected (impl Trait for Type)")

    trait_node, _, type_node = tail
    trait = _tag(TraitTag, trait_node)
    type_tag = _tag(TypeTag, type_node)
    if trait is None or type_tag is None:
        return error_entity(f"invalid trait/type: {show(trait_node)} for {show(type_node)}")

    env.implement(type_tag, trait)
    return TRUE
