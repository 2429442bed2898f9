"""Runtime environment for Wat.

An Environment holds two maps: symbol bindings and, per type tag, the set of
traits declared for it with `impl`. Scopes do not chain through an `outer`
link; entering a scope clones the environment instead, so a child can never
change what its parent sees.

Clones are copy-on-write. `clone()` hands the child the parent's dicts and
marks both sides as sharing them; whichever side writes first copies the dict
it is about to change. Trait sets are frozensets and are replaced rather than
mutated, so a one-level dict copy is enough for independence.

Environments are not thread-safe. `impl` writes to the environment it is
given, so evaluating against one shared top-level environment from several
threads needs a lock around each `evaluate` call, or one environment per
thread.
"""

from __future__ import annotations

import logging
from io import StringIO
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from wat import WatValue
from wat.errors import WatUnboundSymbol
from wat.types.symbol import Symbol
from wat.types.type_tags import TypeTag, TraitTag

logger = logging.getLogger(__name__)


class Environment:
    """Bindings plus trait registry for one scope."""

    __slots__ = (
        "_vars",
        "_traits",
        "_owns_vars",
        "_owns_traits",
    )

    def __init__(
        self,
        bindings: Optional[Mapping[Symbol, WatValue]] = None,
        traits: Optional[Mapping[TypeTag, Iterable[TraitTag]]] = None,
    ):
        self._vars: dict[Symbol, WatValue] = dict(bindings or {})
        self._traits: dict[TypeTag, frozenset[TraitTag]] = {
            tag: frozenset(names) for tag, names in (traits or {}).items()
        }
        self._owns_vars = True
        self._owns_traits = True

    # --- Scope handling ---
    def clone(self) -> Environment:
        """Return an independent copy of this scope (bindings and traits)."""
        child = Environment.__new__(Environment)
        child._vars = self._vars
        child._traits = self._traits
        child._owns_vars = False
        child._owns_traits = False
        self._owns_vars = False
        self._owns_traits = False
        return child

    def merged_with(self, caller: Environment) -> Environment:
        """Clone of this scope with `caller`'s bindings and traits folded in.

        On a name collision this scope's binding wins. Trait sets are unioned.
        """
        merged = Environment.__new__(Environment)
        merged._vars = {**caller._vars, **self._vars}
        traits = dict(caller._traits)
        for tag, names in self._traits.items():
            traits[tag] = traits.get(tag, frozenset()) | names
        merged._traits = traits
        merged._owns_vars = True
        merged._owns_traits = True
        return merged

    def _own_vars(self) -> None:
        if not self._owns_vars:
            self._vars = dict(self._vars)
            self._owns_vars = True

    def _own_traits(self) -> None:
        if not self._owns_traits:
            self._traits = dict(self._traits)
            self._owns_traits = True

    # --- Bindings ---
    def define(self, name: Symbol, value: WatValue) -> None:
        """Bind `name` to `value` in this scope."""
        self._own_vars()
        self._vars[name] = value

    def remove(self, name: Symbol) -> None:
        """Drop the binding for `name` if there is one."""
        if name in self._vars:
            self._own_vars()
            del self._vars[name]

    def lookup(self, name: Symbol) -> WatValue:
        """Look up the value bound to `name`.

        Raises WatUnboundSymbol if not found.
        """
        try:
            return self._vars[name]
        except KeyError:
            raise WatUnboundSymbol(f"Unbound variable: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    @property
    def bindings(self) -> Mapping[Symbol, WatValue]:
        """Read-only view of the current bindings."""
        return MappingProxyType(self._vars)

    # --- Traits ---
    def implement(self, type_tag: TypeTag, trait: TraitTag) -> bool:
        """Declare `trait` for `type_tag`. Returns False if it was already declared."""
        current = self._traits.get(type_tag, frozenset())
        if trait in current:
            return False
        self._own_traits()
        self._traits[type_tag] = current | {trait}
        logger.debug("impl %s for %s", trait, type_tag)
        return True

    def has_trait(self, type_tag: TypeTag, trait: TraitTag) -> bool:
        return trait in self._traits.get(type_tag, frozenset())

    def traits_for(self, type_tag: TypeTag) -> frozenset[TraitTag]:
        return self._traits.get(type_tag, frozenset())

    @property
    def traits(self) -> Mapping[TypeTag, frozenset[TraitTag]]:
        """Read-only view of the trait registry."""
        return MappingProxyType(self._traits)

    # --- Display ---
    def _write_vars(self, buffer: StringIO) -> None:
        """Write this scope's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in self._vars.items()))
        buffer.write("}")

    def _write_traits(self, buffer: StringIO) -> None:
        buffer.write("{")
        buffer.write(", ".join(
            f"{tag}: [{' '.join(sorted(str(t) for t in names))}]"
            for tag, names in self._traits.items()
        ))
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment vars=")
            self._write_vars(buffer)
            buffer.write(" traits=")
            self._write_traits(buffer)
            buffer.write(">")
            return buffer.getvalue()


def clone_scope(env: Environment) -> Environment:
    """Independent copy of `env`, as made on entry to a `let` or an application."""
    return env.clone()
