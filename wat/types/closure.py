"""Closure values produced by `lambda`."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from io import StringIO
from itertools import count

from wat import SExpression
from wat.types.environment import Environment
from wat.types.symbol import Symbol
from wat.types.type_tags import TypeTag

_closure_ids = count(1)


@dataclass(frozen=True, eq=False)
class Closure:
    """A typed lambda with its captured environment.

    A closure starts *pending*: its environment is the snapshot taken when
    the `lambda` form ran. The first `let` that binds it produces a *fixed*
    copy whose environment is the let scope. Both states share `origin`,
    which identifies the lambda literal they came from.
    """

    params: tuple[tuple[Symbol, TypeTag], ...]
    return_type: TypeTag
    body: SExpression
    env: Environment
    fixed: bool = False
    origin: int = field(default_factory=lambda: next(_closure_ids))

    @property
    def arity(self) -> int:
        return len(self.params)

    def fix(self, env: Environment) -> Closure:
        """Return the fixed state of this closure, capturing `env`."""
        if self.fixed:
            return self
        return replace(self, env=env, fixed=True)

    def same_origin(self, other: object) -> bool:
        return isinstance(other, Closure) and other.origin == self.origin

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(λ (")
            buffer.write(" ".join(f"({name} as {tag})" for name, tag in self.params))
            buffer.write(f") returns {self.return_type})")
            return buffer.getvalue()

    def __repr__(self) -> str:
        state = "fixed" if self.fixed else "pending"
        return f"<Closure {self} {state}>"
