"""Closure application for Wat.

Applying a closure:

- checks the argument count against the parameter list;
- builds the call scope from the closure's captured environment merged with
  the caller's, the captured bindings winning on a name clash;
- evaluates every argument in that merged scope, coerces raw natives to the
  parameter type and type-checks the result;
- returns a new closure when the body is itself a `lambda` form, otherwise
  evaluates the body with the closure's own name unbound and checks the
  result against the declared return type.

Hard failures raised anywhere inside an application come back as an Error
entity carrying the failure's message.
"""

import logging

from wat import EvaluatorFn
from wat import SExpression, WatValue
from wat.config import get_max_depth
from wat.errors import WatError, WatRecursionDepthExceeded
from wat.evaluation.special_forms.lambda_form import is_lambda_form
from wat.types.closure import Closure
from wat.types.entity import Entity, coerce_native, describe, error_entity
from wat.types.environment import Environment
from wat.types.nil import Nil
from wat.types.type_tags import TypeTag

logger = logging.getLogger(__name__)


def _accepts(param_type: TypeTag, value: WatValue) -> bool:
    if param_type is TypeTag.Lambda:
        return isinstance(value, Closure)
    return isinstance(value, Entity) and value.kind is param_type


def bind_arguments(
    fn: Closure,
    arg_exprs: list[SExpression],
    arg_env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> Environment | Entity:
    """Evaluate and bind arguments; returns the call scope or an Error entity."""
    call_env = arg_env.clone()
    for (name, param_type), expr in zip(fn.params, arg_exprs):
        value = evaluate_fn(expr, arg_env, depth + 1)
        if value is Nil:
            return error_entity(f"nil argument not allowed for `{name}`")
        if not isinstance(value, (Entity, Closure)):
            value = coerce_native(param_type, value)
        if not _accepts(param_type, value):
            return error_entity(
                f"type mismatch for `{name}`: expected {param_type}, got {describe(value)}"
            )
        call_env.define(name, value)
    return call_env


def unbind_self(fn: Closure, env: Environment) -> None:
    """Remove every binding that refers to `fn` (in any of its states)."""
    for name, value in list(env.bindings.items()):
        if fn.same_origin(value):
            env.remove(name)


def _apply(
    fn: Closure,
    arg_exprs: list[SExpression],
    caller_env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    if len(arg_exprs) != fn.arity:
        return error_entity(
            f"argument count mismatch: expected {fn.arity}, got {len(arg_exprs)}"
        )

    arg_env = fn.env.merged_with(caller_env)
    call_env = bind_arguments(fn, arg_exprs, arg_env, evaluate_fn, depth)
    if isinstance(call_env, Entity):
        return call_env

    if is_lambda_form(fn.body):
        return evaluate_fn(fn.body, call_env, depth + 1)

    unbind_self(fn, call_env)
    result = evaluate_fn(fn.body, call_env, depth + 1)
    if isinstance(result, Closure):
        return result
    if isinstance(result, Entity) and result.kind is fn.return_type:
        return result
    return error_entity(
        f"return type mismatch: expected {fn.return_type}, got {describe(result)}"
    )


def apply_closure(
    fn: Closure,
    arg_exprs: list[SExpression],
    caller_env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int,
) -> WatValue:
    """Apply `fn` to unevaluated argument expressions from `caller_env`."""
    logger.debug("apply %s to %d argument(s)", fn, len(arg_exprs))
    try:
        return _apply(fn, arg_exprs, caller_env, evaluate_fn, depth)
    except WatError as exc:
        logger.info("application of %s failed: %s", fn, exc)
        return error_entity(str(exc))
    except RecursionError:
        # Python stack ran out before the configured depth limit
        exc = WatRecursionDepthExceeded(get_max_depth())
        logger.info("application of %s failed: %s", fn, exc)
        return error_entity(str(exc))
